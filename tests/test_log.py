"""Unit tests for log.py - Logging helpers."""

import json
import logging
from datetime import datetime
from unittest.mock import patch

from alb import Action, ListenerSnapshot, Protocol
from log import LOG_FORMAT, configure_logging, prettify


class TestPrettify:
    """Tests for the diagnostic pretty-printer."""

    def test_dict(self):
        out = prettify({"Port": 80, "Protocol": "HTTP"})
        assert json.loads(out) == {"Port": 80, "Protocol": "HTTP"}
        assert "\n" in out

    def test_dataclass_and_enum(self):
        snapshot = ListenerSnapshot(port=80, default_actions=[Action()])
        parsed = json.loads(prettify(snapshot))
        assert parsed["port"] == 80
        assert parsed["protocol"] == "HTTP"
        assert parsed["default_actions"] == [
            {"type": "forward", "target_group_arn": None}
        ]

    def test_enum(self):
        assert prettify(Protocol.HTTPS) == '"HTTPS"'

    def test_datetime(self):
        out = prettify({"at": datetime(2024, 1, 15, 10, 30)})
        assert json.loads(out) == {"at": "2024-01-15T10:30:00"}

    def test_unserializable_falls_back_to_repr(self):
        value = {"obj": object()}
        assert prettify(value) == repr(value)


class TestConfigureLogging:
    def test_uses_standard_format(self):
        with patch.object(logging, "basicConfig") as basic_config:
            configure_logging("debug")
        basic_config.assert_called_once_with(level="DEBUG", format=LOG_FORMAT)
