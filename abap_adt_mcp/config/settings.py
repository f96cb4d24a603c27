"""
Connection settings for the ADT MCP server.

Settings are read once at startup from environment variables and passed
explicitly into the ADT client; nothing below the entry point reads the
environment.

Environment Variables:
    SAP_URL       - Base URL of the ABAP system (required)
    SAP_USER      - Logon user (required)
    SAP_PASSWORD  - Logon password (required)
    SAP_CLIENT    - SAP client number, e.g. 001 (optional)
    SAP_LANGUAGE  - Logon language, e.g. EN (optional)
    SAP_TIMEOUT   - HTTP timeout in seconds (default 60)
    SAP_VERIFY_TLS=true/false - Verify the server certificate (default true)
    ADT_MCP_SINGLE_FLIGHT_RECONNECT=true/false - Share one reconnect between
        concurrent calls that hit an expired session (default true)
"""

import os
from typing import List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError

REQUIRED_ENV_VARS = ("SAP_URL", "SAP_USER", "SAP_PASSWORD")


class ConfigurationError(Exception):
    """Startup configuration is missing or invalid."""

    def __init__(self, message: str, missing: Sequence[str] = ()):
        self.missing: List[str] = list(missing)
        super().__init__(message)

    @classmethod
    def for_missing(cls, missing: Sequence[str]) -> "ConfigurationError":
        return cls(
            f"Missing required environment variables: {', '.join(missing)}",
            missing=missing,
        )


class AdtSettings(BaseModel):
    """Everything needed to open a session against one ABAP system."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., min_length=1, description="Base URL of the ABAP system")
    user: str = Field(..., min_length=1, description="Logon user")
    password: SecretStr = Field(..., description="Logon password")
    client: Optional[str] = Field(None, description="SAP client number")
    language: Optional[str] = Field(None, description="Logon language")
    timeout: float = Field(60.0, gt=0, description="HTTP timeout in seconds")
    verify_tls: bool = Field(True, description="Verify the server certificate")
    single_flight_reconnect: bool = Field(
        True,
        description="Share one in-flight reconnect between concurrent callers",
    )


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.lower() == "true"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> AdtSettings:
    """
    Build settings from environment variables.

    Args:
        environ: Mapping to read from (default: os.environ)

    Returns:
        AdtSettings

    Raises:
        ConfigurationError: If a required variable is unset or empty, listing
            every missing name, or if an optional value is malformed

    Example:
        >>> load_settings({"SAP_URL": "https://sap:44300", "SAP_USER": "DEV"})
        Traceback (most recent call last):
        ...
        ConfigurationError: Missing required environment variables: SAP_PASSWORD
    """
    env = os.environ if environ is None else environ

    missing = [name for name in REQUIRED_ENV_VARS if not env.get(name)]
    if missing:
        raise ConfigurationError.for_missing(missing)

    values = {
        "url": env["SAP_URL"],
        "user": env["SAP_USER"],
        "password": env["SAP_PASSWORD"],
        "client": env.get("SAP_CLIENT") or None,
        "language": env.get("SAP_LANGUAGE") or None,
        "verify_tls": _flag(env.get("SAP_VERIFY_TLS"), True),
        "single_flight_reconnect": _flag(
            env.get("ADT_MCP_SINGLE_FLIGHT_RECONNECT"), True
        ),
    }
    if env.get("SAP_TIMEOUT"):
        values["timeout"] = env["SAP_TIMEOUT"]

    try:
        return AdtSettings(**values)
    except ValidationError as e:
        fields = ", ".join(
            ".".join(str(part) for part in error["loc"]) for error in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration value(s): {fields}") from e
