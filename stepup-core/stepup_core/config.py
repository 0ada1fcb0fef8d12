"""
Step-Up Configuration
=====================
Module configuration, validated once at startup.
"""

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .exceptions import ConfigurationError, ValidationError
from .otp.generator import validate_originator

DEFAULT_ORIGINATOR = "Spryng SMS"
DEFAULT_MOBILE_ATTRIBUTE = "mobile"
DEFAULT_VALID_UNTIL = 600
DEFAULT_STATE_TTL = 3600


def _coerce(name: str, value: Any, type_: type):
    try:
        return type_(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be a number of seconds") from e


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class StepUpConfig:
    """Configuration for the SMS step-up flow."""
    api_key: Optional[str] = None
    originator: str = DEFAULT_ORIGINATOR
    mobile_phone_attribute: str = DEFAULT_MOBILE_ATTRIBUTE
    valid_until: int = DEFAULT_VALID_UNTIL  # code TTL in seconds

    # Whether the statistics surface requires authentication, and with which source
    protected: bool = True
    auth: str = "admin"

    # Spryng REST client
    api_base_url: str = "https://rest.spryngsms.com/v1"
    route: str = "business"
    timeout: float = 10.0

    # Lifetime of stored state entries; must outlive the code so expiry is still reachable
    state_ttl: Optional[int] = None

    def __post_init__(self):
        if not self.api_key:
            raise ConfigurationError("Missing required REST API key for the Spryng service.")

        try:
            validate_originator(self.originator)
        except ValidationError as e:
            raise ConfigurationError(e.message) from e

        if not self.mobile_phone_attribute:
            raise ConfigurationError("mobilePhoneAttribute cannot be an empty string")

        self.valid_until = _coerce("validUntil", self.valid_until, int)
        if self.valid_until <= 0:
            raise ConfigurationError("validUntil must be a positive number of seconds")

        self.timeout = _coerce("timeout", self.timeout, float)
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be a positive number of seconds")

        if self.state_ttl is None:
            self.state_ttl = max(DEFAULT_STATE_TTL, self.valid_until + DEFAULT_VALID_UNTIL)
        self.state_ttl = _coerce("stateTtl", self.state_ttl, int)
        if self.state_ttl <= self.valid_until:
            raise ConfigurationError("stateTtl must be longer than validUntil")

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "StepUpConfig":
        """
        Build a configuration from the module's option names.

        Recognized keys: ``apiKey`` (or ``api_key``), ``originator``, ``mobilePhoneAttribute``,
        ``validUntil``, ``protected``, ``auth``, ``apiBaseUrl``, ``route``,
        ``timeout``, ``stateTtl``.
        """
        return cls(
            api_key=config.get("apiKey", config.get("api_key")),
            originator=config.get("originator", DEFAULT_ORIGINATOR),
            mobile_phone_attribute=config.get("mobilePhoneAttribute", DEFAULT_MOBILE_ATTRIBUTE),
            valid_until=config.get("validUntil", DEFAULT_VALID_UNTIL),
            protected=config.get("protected", True),
            auth=config.get("auth", "admin"),
            api_base_url=config.get("apiBaseUrl", "https://rest.spryngsms.com/v1"),
            route=config.get("route", "business"),
            timeout=config.get("timeout", 10.0),
            state_ttl=config.get("stateTtl"),
        )

    @classmethod
    def from_env(cls) -> "StepUpConfig":
        """Build a configuration from ``STEPUP_*`` environment variables."""
        return cls(
            api_key=os.environ.get("STEPUP_API_KEY"),
            originator=os.environ.get("STEPUP_ORIGINATOR", DEFAULT_ORIGINATOR),
            mobile_phone_attribute=os.environ.get(
                "STEPUP_MOBILE_PHONE_ATTRIBUTE", DEFAULT_MOBILE_ATTRIBUTE
            ),
            valid_until=os.environ.get("STEPUP_VALID_UNTIL", DEFAULT_VALID_UNTIL),
            protected=_env_bool("STEPUP_PROTECTED", True),
            auth=os.environ.get("STEPUP_AUTH", "admin"),
            api_base_url=os.environ.get("STEPUP_API_BASE_URL", "https://rest.spryngsms.com/v1"),
            route=os.environ.get("STEPUP_ROUTE", "business"),
            timeout=os.environ.get("STEPUP_TIMEOUT", 10.0),
            state_ttl=os.environ.get("STEPUP_STATE_TTL"),
        )
