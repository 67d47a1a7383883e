"""
Listener collection owned by one load balancer.
"""

import logging
from typing import Iterator, List, Optional

from alb.listener import Listener, ReconcileOptions

logger = logging.getLogger(__name__)


class Listeners:
    """Ordered set of listeners, unique by port."""

    def __init__(self, listeners: Optional[List[Listener]] = None):
        self._listeners: List[Listener] = list(listeners or [])

    @classmethod
    def merge(cls, current: "Listeners", desired: "Listeners") -> "Listeners":
        """
        Pair current and desired listeners by port.

        Current listeners with no desired counterpart keep an absent desired
        side and will be deleted on reconcile. Desired listeners with no
        current counterpart will be created.
        """
        merged: List[Listener] = []
        matched_ports = set()

        for want in desired:
            have = current.find_by_port(want.port)
            if have is None:
                merged.append(want)
                continue
            matched_ports.add(want.port)
            merged.append(
                Listener(
                    current=have.current,
                    desired=want.desired,
                    client=want.client or have.client,
                    logger=want.logger,
                    rules=want.rules.merge(have.rules),
                )
            )

        for have in current:
            if have.port in matched_ports:
                continue
            have.strip_desired_state()
            merged.append(have)

        return cls(merged)

    def find_by_port(self, port: Optional[int]) -> Optional[Listener]:
        for listener in self._listeners:
            if listener.port == port:
                return listener
        return None

    def reconcile(self, options: ReconcileOptions) -> None:
        """
        Reconcile every listener in order, then drop the deleted ones.

        The first failure propagates; listeners after it are not touched
        on this pass.
        """
        try:
            for listener in self._listeners:
                listener.reconcile(options)
        finally:
            pruned = [x for x in self._listeners if x.deleted]
            if pruned:
                logger.debug(f"Pruning {len(pruned)} deleted listener(s)")
            self._listeners = [x for x in self._listeners if not x.deleted]

    def strip_desired_state(self) -> None:
        for listener in self._listeners:
            listener.strip_desired_state()

    def __iter__(self) -> Iterator[Listener]:
        return iter(self._listeners)

    def __len__(self) -> int:
        return len(self._listeners)
