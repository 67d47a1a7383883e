"""
Listener Reconciler - Drives one load balancer listener to its desired state.

A Listener pairs the state the control plane reports (current) with the
state configuration asks for (desired). Reconcile compares the two and
performs at most one create, modify or delete per call.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from alb.client import ListenerClient
from alb.models import Action, Certificate, ListenerSnapshot, PortData, Protocol
from alb.rules import Rules, TargetGroups
from events import EventRecorder, EventType
from log import prettify

logger = logging.getLogger(__name__)

# Compared in this order; the first mismatch decides.
DIFF_FIELDS = ("port", "protocol", "certificates", "default_actions", "ssl_policy")

LoggerLike = Union[logging.Logger, logging.LoggerAdapter]


class ReconcileAction(Enum):
    """Outcome of classifying a current/desired pair."""

    NONE = "none"
    CREATE = "create"
    MODIFY = "modify"
    DELETE = "delete"


@dataclass
class ReconcileOptions:
    """Context for a single reconciliation pass."""

    load_balancer_arn: Optional[str] = None
    target_groups: TargetGroups = field(default_factory=TargetGroups)
    events: EventRecorder = field(default_factory=EventRecorder)


def new_desired_listener(
    port: PortData,
    certificate_arn: Optional[str] = None,
    ssl_policy: Optional[str] = None,
    client: Optional[ListenerClient] = None,
    logger: Optional[LoggerLike] = None,
    rules: Optional[Rules] = None,
) -> "Listener":
    """
    Build a Listener holding only desired state.

    The listener is HTTP unless a certificate is given and the scheme is
    HTTPS. The SSL policy only applies once the listener is HTTPS.

    Args:
        port: Port and scheme to listen on.
        certificate_arn: Certificate to serve when the scheme is HTTPS.
        ssl_policy: Negotiation policy for HTTPS listeners.
        client: Control-plane client used by reconcile.
        logger: Logger for this listener (defaults to the module logger).
        rules: Rules owned by the listener.

    Returns:
        A Listener with ``desired`` set and ``current`` absent.
    """
    https = port.scheme.upper() == Protocol.HTTPS.value
    snapshot = ListenerSnapshot(
        port=port.port,
        default_actions=[Action()],
    )

    if certificate_arn is not None and https:
        snapshot.certificates = [Certificate(certificate_arn=certificate_arn)]
        snapshot.protocol = Protocol.HTTPS

    if ssl_policy is not None and snapshot.protocol is Protocol.HTTPS:
        snapshot.ssl_policy = ssl_policy

    return Listener(desired=snapshot, client=client, logger=logger, rules=rules)


def new_current_listener(
    snapshot: ListenerSnapshot,
    client: Optional[ListenerClient] = None,
    logger: Optional[LoggerLike] = None,
    rules: Optional[Rules] = None,
) -> "Listener":
    """Build a Listener holding only current state."""
    return Listener(current=snapshot, client=client, logger=logger, rules=rules)


class Listener:
    """
    A listener's current/desired state pair plus its rules.

    Not safe for concurrent use; one reconciliation pass owns an instance.
    """

    def __init__(
        self,
        current: Optional[ListenerSnapshot] = None,
        desired: Optional[ListenerSnapshot] = None,
        client: Optional[ListenerClient] = None,
        logger: Optional[LoggerLike] = None,
        rules: Optional[Rules] = None,
    ):
        self.current = current
        self.desired = desired
        self.client = client
        self.logger = logger or logging.getLogger(__name__)
        self.rules = rules if rules is not None else Rules()
        self.deleted = False

    @property
    def port(self) -> Optional[int]:
        snapshot = self.desired or self.current
        return snapshot.port if snapshot else None

    def plan(self, options: Optional[ReconcileOptions] = None) -> ReconcileAction:
        """
        Classify the state pair into the single action reconcile would take.

        Deletion wins over creation, which wins over modification.
        """
        if self.desired is None:
            if self.current is None:
                return ReconcileAction.NONE
            return ReconcileAction.DELETE
        if self.current is None:
            return ReconcileAction.CREATE
        if self.needs_modification(options):
            return ReconcileAction.MODIFY
        return ReconcileAction.NONE

    def reconcile(self, options: ReconcileOptions) -> ReconcileAction:
        """
        Compare current and desired state and converge them.

        Results in no action, or in the creation, modification or deletion
        of the listener.

        Args:
            options: Load balancer ARN, target group lookup and event sink.

        Returns:
            The action that was performed.

        Raises:
            Exception: Whatever the control-plane client raised. State is
                left as it was before the failed call.
        """
        action = self.plan(options)

        if action is ReconcileAction.DELETE:
            self.logger.info("Start Listener deletion.")
            self._delete(options)
            options.events.eventf(
                EventType.NORMAL, "DELETE", "%s listener deleted", self.current.port
            )
            self.logger.info("Completed Listener deletion.")

        elif action is ReconcileAction.CREATE:
            self.logger.info("Start Listener creation.")
            self._create(options)
            options.events.eventf(
                EventType.NORMAL, "CREATE", "%s listener created", self.current.port
            )
            self.logger.info(
                f"Completed Listener creation. ARN: {self.current.listener_arn} | "
                f"Port: {self.current.port} | Proto: {self.current.protocol.value}."
            )

        elif action is ReconcileAction.MODIFY:
            self.logger.info("Start Listener modification.")
            self._modify(options)
            options.events.eventf(
                EventType.NORMAL, "MODIFY", "%s listener modified", self.current.port
            )
            self.logger.info(
                f"Completed Listener modification. ARN: {self.current.listener_arn} | "
                f"Port: {self.current.port} | Proto: {self.current.protocol.value}."
            )

        return action

    def _resolve_default_action(self, options: ReconcileOptions) -> None:
        """Point the desired default action at the default rule's target group."""
        if self.desired is None or not self.desired.default_actions:
            return
        default_rule = self.rules.default_rule()
        if default_rule is not None:
            self.desired.default_actions[0].target_group_arn = (
                default_rule.target_group_arn(options.target_groups)
            )

    def _client(self) -> ListenerClient:
        if self.client is None:
            raise RuntimeError(
                f"Listener on port {self.port} has no control-plane client"
            )
        return self.client

    def _create(self, options: ReconcileOptions) -> None:
        """Add the desired listener to the load balancer."""
        desired = self.desired
        desired.load_balancer_arn = options.load_balancer_arn
        self._resolve_default_action(options)

        default_action = desired.default_actions[0]
        params: Dict[str, Any] = {
            "Certificates": [c.to_api() for c in desired.certificates],
            "LoadBalancerArn": desired.load_balancer_arn,
            "Protocol": desired.protocol.value,
            "Port": desired.port,
            "SslPolicy": desired.ssl_policy,
            "DefaultActions": [
                {
                    "Type": default_action.type,
                    "TargetGroupArn": default_action.target_group_arn,
                }
            ],
        }

        try:
            created = self._client().create_listener(params)
        except Exception as e:
            options.events.eventf(
                EventType.WARNING,
                "ERROR",
                "Error creating %s listener: %s",
                desired.port,
                e,
            )
            self.logger.error(
                f"Failed Listener creation. Port: {desired.port} | "
                f"Proto: {desired.protocol.value}: {e}."
            )
            self.logger.debug(f"Payload: {prettify(params)}")
            raise

        self.current = created

    def _modify(self, options: ReconcileOptions) -> None:
        """Apply the full desired field set to the existing listener."""
        if self.current is None:
            # not a modify, a create
            self._create(options)
            return

        desired = self.desired
        params: Dict[str, Any] = {
            "ListenerArn": self.current.listener_arn,
            "Certificates": [c.to_api() for c in desired.certificates],
            "Port": desired.port,
            "Protocol": desired.protocol.value,
            "SslPolicy": desired.ssl_policy,
            "DefaultActions": [a.to_api() for a in desired.default_actions],
        }

        try:
            modified = self._client().modify_listener(params)
        except Exception as e:
            options.events.eventf(
                EventType.WARNING,
                "ERROR",
                "Error modifying %s listener: %s",
                desired.port,
                e,
            )
            self.logger.error(
                f"Failed Listener modification. ARN: {self.current.listener_arn} | "
                f"Port: {self.current.port} | Proto: {self.current.protocol.value}: {e}."
            )
            self.logger.debug(f"Payload: {prettify(params)}")
            raise

        self.current = modified

    def _delete(self, options: ReconcileOptions) -> None:
        """Remove the listener from the load balancer."""
        try:
            self._client().remove_listener(self.current.listener_arn)
        except Exception as e:
            options.events.eventf(
                EventType.WARNING,
                "ERROR",
                "Error deleting %s listener: %s",
                self.current.port,
                e,
            )
            self.logger.error(
                f"Failed Listener deletion. ARN: {self.current.listener_arn}: {e}"
            )
            raise

        self.deleted = True

    def needs_modification(self, options: Optional[ReconcileOptions] = None) -> bool:
        """
        Return True when current and desired state differ.

        The desired default action is re-resolved from the default rule
        first, so a target group change alone is enough to trigger a
        modification. Lists are compared in order.
        """
        if options is not None:
            self._resolve_default_action(options)

        current = self.current
        desired = self.desired

        if current is None and desired is None:
            return False
        if current is None:
            self.logger.debug("Current is nil")
            return True
        if desired is None:
            self.logger.debug("Desired is nil")
            return True

        for name in DIFF_FIELDS:
            current_value = getattr(current, name)
            desired_value = getattr(desired, name)
            if current_value != desired_value:
                self.logger.debug(
                    f"{name} needs to be changed "
                    f"({prettify(current_value)} != {prettify(desired_value)})"
                )
                return True
        return False

    def strip_desired_state(self) -> None:
        """Remove the desired state from the listener and its rules."""
        self.desired = None
        self.rules.strip_desired_state()

    def strip_current_state(self) -> None:
        """Remove the current state from the listener and its rules."""
        self.current = None
        self.rules.strip_current_state()

    def get_rules(self) -> Rules:
        return self.rules

    def __repr__(self) -> str:
        return (
            f"Listener(port={self.port}, current={self.current is not None}, "
            f"desired={self.desired is not None}, deleted={self.deleted})"
        )
