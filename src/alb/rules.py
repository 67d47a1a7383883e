"""
Listener Rules - Routing rules attached to a listener.

Only the default rule matters to listener reconciliation: its target group
becomes the listener's default forward action. Rules hold a current/desired
pair like listeners do so that stripping state cascades cleanly.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional

logger = logging.getLogger(__name__)


class TargetGroups:
    """Lookup table from target group logical name to ARN."""

    def __init__(self, arns: Optional[Mapping[str, str]] = None):
        self._arns: Dict[str, str] = dict(arns or {})

    def arn_for(self, name: Optional[str]) -> Optional[str]:
        """Return the ARN registered for ``name``, or None."""
        if name is None:
            return None
        return self._arns.get(name)

    def add(self, name: str, arn: str) -> None:
        self._arns[name] = arn

    def __contains__(self, name: object) -> bool:
        return name in self._arns

    def __len__(self) -> int:
        return len(self._arns)

    def __repr__(self) -> str:
        return f"TargetGroups({self._arns!r})"


@dataclass
class RuleSnapshot:
    """
    One side of a rule's state.

    A priority of None marks the listener's default rule.
    """

    target_group_name: Optional[str] = None
    priority: Optional[int] = None
    conditions: List[Dict[str, Any]] = field(default_factory=list)
    rule_arn: Optional[str] = None

    @property
    def is_default(self) -> bool:
        return self.priority is None


class Rule:
    """A routing rule with its current and desired state."""

    def __init__(
        self,
        current: Optional[RuleSnapshot] = None,
        desired: Optional[RuleSnapshot] = None,
    ):
        self.current = current
        self.desired = desired

    @property
    def priority(self) -> Optional[int]:
        snapshot = self.desired or self.current
        return snapshot.priority if snapshot else None

    def is_default(self) -> bool:
        snapshot = self.desired or self.current
        return snapshot is not None and snapshot.is_default

    def target_group_arn(self, target_groups: TargetGroups) -> Optional[str]:
        """
        Resolve this rule's target group ARN.

        The desired side wins; the current side is used when nothing is
        desired. Returns None when the name is unknown to the lookup table.
        """
        snapshot = self.desired or self.current
        if snapshot is None:
            return None
        arn = target_groups.arn_for(snapshot.target_group_name)
        if arn is None:
            logger.debug(
                f"No target group ARN known for '{snapshot.target_group_name}'"
            )
        return arn

    def strip_desired_state(self) -> None:
        self.desired = None

    def strip_current_state(self) -> None:
        self.current = None

    def __repr__(self) -> str:
        return f"Rule(current={self.current!r}, desired={self.desired!r})"


class Rules:
    """Ordered collection of rules owned by one listener."""

    def __init__(self, rules: Optional[List[Rule]] = None):
        self._rules: List[Rule] = list(rules or [])

    @classmethod
    def with_default(
        cls, target_group_name: str, desired: bool = True
    ) -> "Rules":
        """
        Build a collection holding only a default rule.

        Args:
            target_group_name: Target group the default rule forwards to.
            desired: Put the snapshot on the desired side (otherwise current).
        """
        snapshot = RuleSnapshot(target_group_name=target_group_name)
        if desired:
            return cls([Rule(desired=snapshot)])
        return cls([Rule(current=snapshot)])

    def default_rule(self) -> Optional[Rule]:
        """Return the default rule, if the collection has one."""
        for rule in self._rules:
            if rule.is_default():
                return rule
        return None

    def append(self, rule: Rule) -> None:
        self._rules.append(rule)

    def merge(self, other: "Rules") -> "Rules":
        """
        Combine two collections, pairing rules by priority.

        A rule of ``other`` whose priority matches one in this collection
        fills in the sides this one lacks. Unmatched rules are appended.
        """
        merged = Rules([Rule(r.current, r.desired) for r in self._rules])
        for incoming in other:
            match = next(
                (r for r in merged if r.priority == incoming.priority), None
            )
            if match is None:
                merged.append(Rule(incoming.current, incoming.desired))
                continue
            if match.current is None:
                match.current = incoming.current
            if match.desired is None:
                match.desired = incoming.desired
        return merged

    def strip_desired_state(self) -> None:
        for rule in self._rules:
            rule.strip_desired_state()

    def strip_current_state(self) -> None:
        for rule in self._rules:
            rule.strip_current_state()

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)
