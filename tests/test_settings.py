"""Tests for startup configuration loading."""

import pytest

from abap_adt_mcp.config import AdtSettings, ConfigurationError, load_settings


@pytest.fixture
def complete_env():
    return {
        "SAP_URL": "https://sap.example.com:44300",
        "SAP_USER": "DEVELOPER",
        "SAP_PASSWORD": "secret",
    }


def test_required_variables_only(complete_env):
    settings = load_settings(complete_env)

    assert settings.url == "https://sap.example.com:44300"
    assert settings.user == "DEVELOPER"
    assert settings.password.get_secret_value() == "secret"
    assert settings.client is None
    assert settings.language is None
    assert settings.timeout == 60.0
    assert settings.verify_tls is True
    assert settings.single_flight_reconnect is True


def test_optional_variables(complete_env):
    env = dict(
        complete_env,
        SAP_CLIENT="001",
        SAP_LANGUAGE="EN",
        SAP_TIMEOUT="15",
        SAP_VERIFY_TLS="false",
        ADT_MCP_SINGLE_FLIGHT_RECONNECT="false",
    )

    settings = load_settings(env)

    assert settings.client == "001"
    assert settings.language == "EN"
    assert settings.timeout == 15.0
    assert settings.verify_tls is False
    assert settings.single_flight_reconnect is False


def test_missing_user_is_reported(complete_env):
    """Startup with SAP_USER unset fails naming SAP_USER."""
    del complete_env["SAP_USER"]

    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(complete_env)

    assert exc_info.value.missing == ["SAP_USER"]
    assert "SAP_USER" in str(exc_info.value)


def test_every_missing_variable_is_listed():
    with pytest.raises(ConfigurationError) as exc_info:
        load_settings({"SAP_CLIENT": "001"})

    assert exc_info.value.missing == ["SAP_URL", "SAP_USER", "SAP_PASSWORD"]
    assert str(exc_info.value) == (
        "Missing required environment variables: SAP_URL, SAP_USER, SAP_PASSWORD"
    )


def test_empty_value_counts_as_missing(complete_env):
    complete_env["SAP_PASSWORD"] = ""

    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(complete_env)

    assert exc_info.value.missing == ["SAP_PASSWORD"]


def test_invalid_timeout_is_configuration_error(complete_env):
    complete_env["SAP_TIMEOUT"] = "soon"

    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(complete_env)

    assert "timeout" in str(exc_info.value)


def test_settings_are_immutable(complete_env):
    settings = load_settings(complete_env)

    with pytest.raises(Exception):
        settings.url = "https://elsewhere"


def test_password_not_in_repr(complete_env):
    settings = load_settings(complete_env)

    assert "secret" not in repr(settings)
    assert isinstance(settings, AdtSettings)
