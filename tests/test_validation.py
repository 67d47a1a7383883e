"""Unit tests for validation.py - Listener configuration validation."""

import pytest
from jsonschema import Draft7Validator

from validation import (
    LISTENER_CONFIG_SCHEMA,
    check_listener_references,
    validate_listener_config,
)
from tests.conftest import CERT_ARN, LB_ARN, WEB_TG_ARN


@pytest.fixture
def doc():
    """A valid configuration document."""
    return {
        "load_balancer_arn": LB_ARN,
        "target_groups": {"web": WEB_TG_ARN},
        "listeners": [
            {"port": 80, "default_target_group": "web"},
            {
                "port": 443,
                "scheme": "HTTPS",
                "certificate_arn": CERT_ARN,
                "ssl_policy": "ELBSecurityPolicy-2016-08",
                "default_target_group": "web",
            },
        ],
    }


class TestSchema:
    def test_schema_is_valid_draft7(self):
        Draft7Validator.check_schema(LISTENER_CONFIG_SCHEMA)


class TestValidateListenerConfig:
    """Tests for validate_listener_config function."""

    def test_valid(self, doc):
        is_valid, error = validate_listener_config(doc)
        assert is_valid is True
        assert error is None

    def test_missing_load_balancer_arn(self, doc):
        del doc["load_balancer_arn"]
        is_valid, error = validate_listener_config(doc)
        assert is_valid is False
        assert "(root)" in error
        assert "load_balancer_arn" in error

    def test_https_requires_certificate(self, doc):
        del doc["listeners"][1]["certificate_arn"]
        is_valid, error = validate_listener_config(doc)
        assert is_valid is False
        assert "listeners.1" in error
        assert "certificate_arn" in error

    def test_port_out_of_range(self, doc):
        doc["listeners"][0]["port"] = 70000
        is_valid, error = validate_listener_config(doc)
        assert is_valid is False
        assert "listeners.0.port" in error

    def test_unknown_scheme(self, doc):
        doc["listeners"][0]["scheme"] = "TCP"
        is_valid, error = validate_listener_config(doc)
        assert is_valid is False
        assert "listeners.0.scheme" in error

    def test_unknown_field(self, doc):
        doc["listeners"][0]["protocol"] = "HTTP"
        is_valid, error = validate_listener_config(doc)
        assert is_valid is False

    def test_default_target_group_required(self, doc):
        del doc["listeners"][0]["default_target_group"]
        is_valid, error = validate_listener_config(doc)
        assert is_valid is False
        assert "default_target_group" in error

    def test_collects_all_errors(self, doc):
        doc["listeners"][0]["port"] = "eighty"
        doc["listeners"][1]["scheme"] = "FTP"
        is_valid, error = validate_listener_config(doc)
        assert is_valid is False
        assert len(error.split("; ")) == 2

    def test_not_an_object(self):
        is_valid, error = validate_listener_config(["listeners"])
        assert is_valid is False

    def test_custom_schema(self):
        is_valid, error = validate_listener_config({"a": 1}, {"type": "object"})
        assert is_valid is True


class TestCheckListenerReferences:
    """Tests for cross-field checks."""

    def test_valid(self, doc):
        assert check_listener_references(doc) == (True, None)

    def test_duplicate_port(self, doc):
        doc["listeners"][1]["port"] = 80
        is_valid, error = check_listener_references(doc)
        assert is_valid is False
        assert error == "listeners.1.port: duplicate port 80"

    def test_unknown_target_group(self, doc):
        doc["listeners"][0]["default_target_group"] = "api"
        is_valid, error = check_listener_references(doc)
        assert is_valid is False
        assert "unknown target group 'api'" in error

    def test_missing_target_group_table(self, doc):
        del doc["target_groups"]
        is_valid, error = check_listener_references(doc)
        assert is_valid is False
