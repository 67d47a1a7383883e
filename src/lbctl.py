#!/usr/bin/env python3
"""
CLI tool for the listener reconciler.
Provides a kubectl-like interface for load balancer listeners.
"""

import json
import logging
import sys
from typing import Any, Dict

import click
import yaml
from tabulate import tabulate

from alb import (
    Listeners,
    PortData,
    ReconcileAction,
    ReconcileOptions,
    Rules,
    TargetGroups,
    new_current_listener,
    new_desired_listener,
)
from alb.client import ListenerClient
from config import Config, get_config
from elbv2 import Boto3ListenerClient
from events import EventRecorder
from log import configure_logging
from validation import check_listener_references, validate_listener_config

logger = logging.getLogger(__name__)


def load_document(filename: str) -> Dict[str, Any]:
    """Read a YAML or JSON listener configuration file."""
    with open(filename, "r") as f:
        if filename.endswith(".yaml") or filename.endswith(".yml"):
            return yaml.safe_load(f)
        return json.load(f)


def build_desired_listeners(
    doc: Dict[str, Any], client: ListenerClient, cfg: Config
) -> Listeners:
    """Build desired-only listeners from a validated configuration document."""
    listeners = []
    for entry in doc.get("listeners", []):
        scheme = entry.get("scheme", "HTTP")
        ssl_policy = entry.get("ssl_policy") or cfg.listeners.default_ssl_policy
        listeners.append(
            new_desired_listener(
                PortData(port=entry["port"], scheme=scheme),
                certificate_arn=entry.get("certificate_arn"),
                ssl_policy=ssl_policy,
                client=client,
                rules=Rules.with_default(entry["default_target_group"]),
            )
        )
    return Listeners(listeners)


def fetch_current_listeners(client: ListenerClient, load_balancer_arn: str) -> Listeners:
    """Describe the load balancer's listeners as current-only listeners."""
    return Listeners(
        [
            new_current_listener(snapshot, client=client)
            for snapshot in client.describe_listeners(load_balancer_arn)
        ]
    )


def format_events(recorder: EventRecorder) -> str:
    headers = ["Type", "Reason", "Message", "Time"]
    rows = [
        [e.event_type.value, e.reason, e.message, e.timestamp]
        for e in recorder.events
    ]
    return tabulate(rows, headers=headers, tablefmt="grid")


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
@click.pass_context
def cli(ctx, log_level):
    """Listener reconciler CLI - kubectl-like interface for ALB listeners"""
    cfg = get_config()
    configure_logging(log_level or cfg.logging.log_level)
    ctx.obj = cfg


@cli.command()
@click.argument("filename", type=click.Path(exists=True))
@click.option("--dry-run", is_flag=True, help="Show planned actions without applying")
@click.pass_obj
def apply(cfg, filename, dry_run):
    """Reconcile listeners from a YAML/JSON file"""
    doc = load_document(filename)

    for check in (validate_listener_config, check_listener_references):
        is_valid, error = check(doc)
        if not is_valid:
            click.echo(f"Invalid configuration: {error}", err=True)
            sys.exit(1)

    client = Boto3ListenerClient(aws_config=cfg.aws)
    load_balancer_arn = doc["load_balancer_arn"]

    desired = build_desired_listeners(doc, client, cfg)
    current = fetch_current_listeners(client, load_balancer_arn)
    listeners = Listeners.merge(current, desired)

    recorder = EventRecorder(
        involved_object=load_balancer_arn, max_events=cfg.events.max_events
    )
    options = ReconcileOptions(
        load_balancer_arn=load_balancer_arn,
        target_groups=TargetGroups(doc.get("target_groups")),
        events=recorder,
    )

    if dry_run:
        rows = [
            [listener.port, listener.plan(options).value] for listener in listeners
        ]
        click.echo(tabulate(rows, headers=["Port", "Action"], tablefmt="grid"))
        return

    try:
        listeners.reconcile(options)
    except Exception as e:
        click.echo(format_events(recorder))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if len(recorder):
        click.echo(format_events(recorder))
    else:
        click.echo("No listener changes required")


@cli.command()
@click.argument("load_balancer_arn")
@click.option(
    "--output", "-o", type=click.Choice(["table", "json", "yaml"]), default="table"
)
@click.pass_obj
def get(cfg, load_balancer_arn, output):
    """List the listeners of a load balancer"""
    client = Boto3ListenerClient(aws_config=cfg.aws)
    snapshots = client.describe_listeners(load_balancer_arn)

    if output == "json":
        click.echo(json.dumps([s.to_api() for s in snapshots], indent=2))
    elif output == "yaml":
        click.echo(
            yaml.dump([s.to_api() for s in snapshots], default_flow_style=False)
        )
    else:
        headers = [
            "Port",
            "Protocol",
            "SSL Policy",
            "Certificates",
            "Target Group",
            "ARN",
        ]
        rows = []
        for s in snapshots:
            rows.append(
                [
                    s.port,
                    s.protocol.value,
                    s.ssl_policy or "",
                    ",".join(c.certificate_arn for c in s.certificates),
                    ",".join(a.target_group_arn or "" for a in s.default_actions),
                    s.listener_arn,
                ]
            )
        click.echo(tabulate(rows, headers=headers, tablefmt="grid"))


@cli.command()
@click.argument("load_balancer_arn")
@click.argument("port", type=int)
@click.confirmation_option(prompt="Are you sure you want to delete this listener?")
@click.pass_obj
def delete(cfg, load_balancer_arn, port):
    """Delete the listener on PORT"""
    client = Boto3ListenerClient(aws_config=cfg.aws)
    listener = fetch_current_listeners(client, load_balancer_arn).find_by_port(port)

    if listener is None:
        click.echo(f"No listener on port {port}", err=True)
        sys.exit(1)

    listener.strip_desired_state()
    recorder = EventRecorder(
        involved_object=load_balancer_arn, max_events=cfg.events.max_events
    )
    options = ReconcileOptions(load_balancer_arn=load_balancer_arn, events=recorder)

    try:
        action = listener.reconcile(options)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if action is ReconcileAction.DELETE:
        click.echo(f"Listener on port {port} deleted")


if __name__ == "__main__":
    cli()
