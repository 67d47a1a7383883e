"""
Application load balancer listener reconciliation.

This package provides the listener snapshot model, the listener reconciler,
and the rules collaborator it consults for default target groups.
"""

from alb.client import ListenerClient
from alb.listener import (
    Listener,
    ReconcileAction,
    ReconcileOptions,
    new_current_listener,
    new_desired_listener,
)
from alb.listeners import Listeners
from alb.models import Action, Certificate, ListenerSnapshot, PortData, Protocol
from alb.rules import Rule, Rules, RuleSnapshot, TargetGroups

__all__ = [
    "Action",
    "Certificate",
    "Listener",
    "ListenerClient",
    "Listeners",
    "ListenerSnapshot",
    "PortData",
    "Protocol",
    "ReconcileAction",
    "ReconcileOptions",
    "Rule",
    "Rules",
    "RuleSnapshot",
    "TargetGroups",
    "new_current_listener",
    "new_desired_listener",
]
