"""
Control-plane client interface for listener mutations.

The reconciler talks to the control plane only through ListenerClient so
that tests and alternative backends can be injected.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from alb.models import ListenerSnapshot


class ListenerClient(ABC):
    """Abstract control-plane client for listeners."""

    @abstractmethod
    def create_listener(self, params: Dict[str, Any]) -> ListenerSnapshot:
        """
        Create a listener.

        Args:
            params: CreateListener request (Certificates, LoadBalancerArn,
                Protocol, Port, SslPolicy, DefaultActions).

        Returns:
            The created listener, including its assigned ARN.
        """
        pass

    @abstractmethod
    def modify_listener(self, params: Dict[str, Any]) -> ListenerSnapshot:
        """
        Modify a listener addressed by ``params['ListenerArn']``.

        Returns:
            The listener as it stands after the change.
        """
        pass

    @abstractmethod
    def remove_listener(self, listener_arn: str) -> None:
        """Delete the listener with the given ARN."""
        pass

    @abstractmethod
    def describe_listeners(self, load_balancer_arn: str) -> List[ListenerSnapshot]:
        """Return every listener attached to a load balancer."""
        pass
