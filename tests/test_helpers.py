"""Tests for utility helpers."""

import pytest

from einsteinbot.models import TextVariable
from einsteinbot.utils import (
    ReleaseInfo,
    add_integration_type_and_name_to_context_variables,
    mask_authorization_header,
    validate_integration_name,
)


class TestIntegrationVariables:
    def test_adds_type_and_name(self):
        result = add_integration_type_and_name_to_context_variables([], "Slack")
        assert [(v.name, v.value) for v in result] == [
            ("$Context.IntegrationType", "API"),
            ("$Context.IntegrationName", "Slack"),
        ]

    def test_is_idempotent(self):
        once = add_integration_type_and_name_to_context_variables(None, "Slack")
        twice = add_integration_type_and_name_to_context_variables(once, "Slack")
        assert len(twice) == 2

    def test_does_not_mutate_input(self):
        variables = [TextVariable(name="Locale", value="en_US")]
        result = add_integration_type_and_name_to_context_variables(variables, "Slack")
        assert len(variables) == 1
        assert len(result) == 3

    def test_caller_integration_type_is_kept(self):
        variables = [TextVariable(name="$Context.IntegrationType", value="Custom")]
        result = add_integration_type_and_name_to_context_variables(variables, "Slack")
        assert [(v.name, v.value) for v in result] == [
            ("$Context.IntegrationType", "Custom"),
            ("$Context.IntegrationName", "Slack"),
        ]

    def test_caller_integration_name_is_kept(self):
        variables = [TextVariable(name="$Context.IntegrationName", value="Teams")]
        result = add_integration_type_and_name_to_context_variables(variables, "Slack")
        assert [(v.name, v.value) for v in result] == [
            ("$Context.IntegrationName", "Teams"),
            ("$Context.IntegrationType", "API"),
        ]

    def test_no_name_no_variables(self):
        assert add_integration_type_and_name_to_context_variables(None, None) == []


class TestValidateIntegrationName:
    def test_none_is_allowed(self):
        validate_integration_name(None)

    @pytest.mark.parametrize("name", ["", "   ", "x" * 129])
    def test_invalid(self, name):
        with pytest.raises(ValueError):
            validate_integration_name(name)


def test_mask_authorization_header():
    masked = mask_authorization_header({"Authorization": "Bearer secret", "X-Org-Id": "00D"})
    assert masked == {"Authorization": "MASKED", "X-Org-Id": "00D"}


def test_release_info_user_agent():
    assert ReleaseInfo("einsteinbot-sdk", "1.2.3").user_agent == "einsteinbot-sdk/1.2.3"
