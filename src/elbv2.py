"""
ELBv2 Client - AWS-backed control-plane client for listeners.
"""

import logging
from typing import Any, Dict, List, Optional

import boto3

from alb.client import ListenerClient
from alb.models import ListenerSnapshot
from config import AWSConfig

logger = logging.getLogger(__name__)


def remove_empty_params(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Drop None values and empty lists; boto3 rejects None parameters.

    Dicts nested in lists (DefaultActions, Certificates) are cleaned too.
    """
    cleaned: Dict[str, Any] = {}
    for key, value in params.items():
        if isinstance(value, list):
            value = [
                remove_empty_params(item) if isinstance(item, dict) else item
                for item in value
            ]
        if value is None or value == []:
            continue
        cleaned[key] = value
    return cleaned


def get_elbv2_client(aws_config: Optional[AWSConfig] = None):
    """Create a boto3 elbv2 client from configuration."""
    aws_config = aws_config or AWSConfig()
    kwargs: Dict[str, Any] = {"region_name": aws_config.region}
    if aws_config.endpoint_url:
        kwargs["endpoint_url"] = aws_config.endpoint_url
    return boto3.client("elbv2", **kwargs)


class Boto3ListenerClient(ListenerClient):
    """
    ListenerClient backed by a boto3 elbv2 client.

    botocore exceptions propagate unchanged.
    """

    def __init__(self, client=None, aws_config: Optional[AWSConfig] = None):
        self._client = client or get_elbv2_client(aws_config)

    def create_listener(self, params: Dict[str, Any]) -> ListenerSnapshot:
        response = self._client.create_listener(**remove_empty_params(params))
        return ListenerSnapshot.from_api(response["Listeners"][0])

    def modify_listener(self, params: Dict[str, Any]) -> ListenerSnapshot:
        response = self._client.modify_listener(**remove_empty_params(params))
        return ListenerSnapshot.from_api(response["Listeners"][0])

    def remove_listener(self, listener_arn: str) -> None:
        self._client.delete_listener(ListenerArn=listener_arn)
        logger.debug(f"Deleted listener {listener_arn}")

    def describe_listeners(self, load_balancer_arn: str) -> List[ListenerSnapshot]:
        listeners: List[ListenerSnapshot] = []
        params: Dict[str, Any] = {"LoadBalancerArn": load_balancer_arn}
        while True:
            page = self._client.describe_listeners(**params)
            listeners.extend(
                ListenerSnapshot.from_api(data) for data in page.get("Listeners", [])
            )
            marker = page.get("NextMarker")
            if not marker:
                return listeners
            params["Marker"] = marker
