"""
Listener Models - Snapshot types for load balancer listeners.

A snapshot describes one listener either as the control plane reports it
(current) or as configuration wants it (desired). Snapshots convert to and
from the ELBv2 API shape used by boto3.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

FORWARD_ACTION = "forward"


class Protocol(Enum):
    """Listener protocols supported on an application load balancer."""

    HTTP = "HTTP"
    HTTPS = "HTTPS"

    @classmethod
    def parse(cls, value: str) -> "Protocol":
        """
        Parse a protocol name (case-insensitive).

        Raises:
            ValueError: If the protocol is not HTTP or HTTPS.
        """
        try:
            return cls(value.upper())
        except (ValueError, AttributeError):
            raise ValueError(f"Unsupported listener protocol: {value!r}")


@dataclass
class PortData:
    """Port and scheme requested for a listener."""

    port: int
    scheme: str = "HTTP"


@dataclass
class Certificate:
    """Reference to a server certificate."""

    certificate_arn: str

    def to_api(self) -> Dict[str, Any]:
        return {"CertificateArn": self.certificate_arn}


@dataclass
class Action:
    """Listener default action. Only forward actions are produced."""

    type: str = FORWARD_ACTION
    target_group_arn: Optional[str] = None

    def to_api(self) -> Dict[str, Any]:
        return {"Type": self.type, "TargetGroupArn": self.target_group_arn}

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Action":
        return cls(type=data["Type"], target_group_arn=data.get("TargetGroupArn"))


@dataclass
class ListenerSnapshot:
    """
    One side of a listener's state.

    The listener ARN is only ever set on snapshots returned by the control
    plane.
    """

    port: int
    protocol: Protocol = Protocol.HTTP
    certificates: List[Certificate] = field(default_factory=list)
    ssl_policy: Optional[str] = None
    default_actions: List[Action] = field(default_factory=list)
    listener_arn: Optional[str] = None
    load_balancer_arn: Optional[str] = None

    def __post_init__(self):
        if self.protocol is Protocol.HTTPS and not self.certificates:
            raise ValueError(
                f"HTTPS listener on port {self.port} requires at least one certificate"
            )
        if self.protocol is Protocol.HTTP and self.certificates:
            raise ValueError(
                f"HTTP listener on port {self.port} cannot carry certificates"
            )

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ListenerSnapshot":
        """
        Build a snapshot from an ELBv2 listener description.

        Fields the reconciler does not manage (ForwardConfig, AlpnPolicy,
        certificate IsDefault flags) are dropped.

        Args:
            data: A single entry of a ``Listeners`` list.

        Returns:
            The corresponding ListenerSnapshot.
        """
        return cls(
            port=int(data["Port"]),
            protocol=Protocol.parse(data["Protocol"]),
            certificates=[
                Certificate(certificate_arn=c["CertificateArn"])
                for c in data.get("Certificates") or []
            ],
            ssl_policy=data.get("SslPolicy"),
            default_actions=[
                Action.from_api(a) for a in data.get("DefaultActions") or []
            ],
            listener_arn=data.get("ListenerArn"),
            load_balancer_arn=data.get("LoadBalancerArn"),
        )

    def to_api(self) -> Dict[str, Any]:
        """Render the snapshot in the ELBv2 listener description shape."""
        return {
            "ListenerArn": self.listener_arn,
            "LoadBalancerArn": self.load_balancer_arn,
            "Port": self.port,
            "Protocol": self.protocol.value,
            "Certificates": [c.to_api() for c in self.certificates],
            "SslPolicy": self.ssl_policy,
            "DefaultActions": [a.to_api() for a in self.default_actions],
        }
