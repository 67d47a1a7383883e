"""Pytest configuration and fixtures."""

import boto3
import pytest
from moto import mock_aws
from unittest.mock import MagicMock

from alb import (
    Action,
    Certificate,
    ListenerClient,
    ListenerSnapshot,
    Protocol,
    ReconcileOptions,
    TargetGroups,
)
from config import reset_config
from events import EventRecorder

LB_ARN = (
    "arn:aws:elasticloadbalancing:us-east-1:123456789012:"
    "loadbalancer/app/my-lb/50dc6c495c0c9188"
)
LISTENER_ARN = (
    "arn:aws:elasticloadbalancing:us-east-1:123456789012:"
    "listener/app/my-lb/50dc6c495c0c9188/f2f7dc8efc522ab2"
)
WEB_TG_ARN = (
    "arn:aws:elasticloadbalancing:us-east-1:123456789012:"
    "targetgroup/web/73e2d6bc24d8a067"
)
API_TG_ARN = (
    "arn:aws:elasticloadbalancing:us-east-1:123456789012:"
    "targetgroup/api/0b9a3c2e6f1d4e57"
)
CERT_ARN = "arn:aws:acm:us-east-1:123456789012:certificate/cert-1"


@pytest.fixture(autouse=True)
def clean_config():
    """Make sure no configuration leaks between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def mock_client():
    """Create a mock control-plane client."""
    return MagicMock(spec=ListenerClient)


@pytest.fixture
def recorder():
    return EventRecorder(involved_object="default/web-ingress")


@pytest.fixture
def options(recorder):
    """Reconcile options with a web and an api target group."""
    return ReconcileOptions(
        load_balancer_arn=LB_ARN,
        target_groups=TargetGroups({"web": WEB_TG_ARN, "api": API_TG_ARN}),
        events=recorder,
    )


@pytest.fixture
def http_snapshot():
    """A current HTTP listener on port 80 forwarding to the web target group."""
    return ListenerSnapshot(
        port=80,
        protocol=Protocol.HTTP,
        default_actions=[Action(target_group_arn=WEB_TG_ARN)],
        listener_arn=LISTENER_ARN,
        load_balancer_arn=LB_ARN,
    )


@pytest.fixture
def https_snapshot():
    """A current HTTPS listener on port 443 forwarding to the web target group."""
    return ListenerSnapshot(
        port=443,
        protocol=Protocol.HTTPS,
        certificates=[Certificate(certificate_arn=CERT_ARN)],
        ssl_policy="ELBSecurityPolicy-2016-08",
        default_actions=[Action(target_group_arn=WEB_TG_ARN)],
        listener_arn=LISTENER_ARN,
        load_balancer_arn=LB_ARN,
    )


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mocked AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_REGION", raising=False)
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)


@pytest.fixture
def aws_lb(aws_credentials):
    """
    A mocked load balancer with two target groups.

    Yields a dict with the boto3 elbv2 client and the created ARNs.
    """
    with mock_aws():
        ec2 = boto3.client("ec2", region_name="us-east-1")
        elbv2 = boto3.client("elbv2", region_name="us-east-1")

        vpc_id = ec2.create_vpc(CidrBlock="172.28.7.0/24")["Vpc"]["VpcId"]
        subnet1 = ec2.create_subnet(
            VpcId=vpc_id, CidrBlock="172.28.7.192/26", AvailabilityZone="us-east-1a"
        )["Subnet"]["SubnetId"]
        subnet2 = ec2.create_subnet(
            VpcId=vpc_id, CidrBlock="172.28.7.0/26", AvailabilityZone="us-east-1b"
        )["Subnet"]["SubnetId"]
        security_group = ec2.create_security_group(
            GroupName="lb-sg", Description="load balancer", VpcId=vpc_id
        )["GroupId"]

        lb = elbv2.create_load_balancer(
            Name="my-lb",
            Subnets=[subnet1, subnet2],
            SecurityGroups=[security_group],
            Scheme="internal",
        )["LoadBalancers"][0]

        target_groups = {}
        for name in ("web", "api"):
            tg = elbv2.create_target_group(
                Name=name, Protocol="HTTP", Port=8080, VpcId=vpc_id
            )["TargetGroups"][0]
            target_groups[name] = tg["TargetGroupArn"]

        yield {
            "elbv2": elbv2,
            "load_balancer_arn": lb["LoadBalancerArn"],
            "target_groups": target_groups,
        }
