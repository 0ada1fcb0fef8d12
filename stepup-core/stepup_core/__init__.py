"""
Step-Up Core Library
====================
SMS one-time-password step-up authentication for identity-provider pipelines.
"""

__version__ = "0.1.0"

# Configuration
from stepup_core.config import StepUpConfig

# Errors
from stepup_core.exceptions import (
    StepUpError,
    ConfigurationError,
    ValidationError,
    BadRequest,
    StateError,
    InvariantError,
    StateNotFoundError,
    NoPassiveError,
    DeliveryError,
)

# OTP
from stepup_core.otp import (
    PendingVerification,
    ResendReason,
    Delivered,
    ServerFailure,
    OtherFailure,
    DeliveryOutcome,
    generate_code,
    sanitize_phone_number,
    SecretHasher,
    Argon2SecretHasher,
    OTPEngine,
)

# Gateways
from stepup_core.gateway import SMSGateway, GatewayResponse, SpryngGateway

# State
from stepup_core.state import StateStore, InMemoryStateStore, RedisStateStore

# Flow
from stepup_core.controller import (
    VerificationController,
    Continuation,
    Resume,
    Redirect,
    View,
)
from stepup_core.process import StepUpFilter
from stepup_core.factory import create_stepup
from stepup_core.api import create_stepup_router

# Logging
from stepup_core.logging_config import setup_logging

__all__ = [
    # Configuration
    "StepUpConfig",
    # Errors
    "StepUpError",
    "ConfigurationError",
    "ValidationError",
    "BadRequest",
    "StateError",
    "InvariantError",
    "StateNotFoundError",
    "NoPassiveError",
    "DeliveryError",
    # OTP
    "PendingVerification",
    "ResendReason",
    "Delivered",
    "ServerFailure",
    "OtherFailure",
    "DeliveryOutcome",
    "generate_code",
    "sanitize_phone_number",
    "SecretHasher",
    "Argon2SecretHasher",
    "OTPEngine",
    # Gateways
    "SMSGateway",
    "GatewayResponse",
    "SpryngGateway",
    # State
    "StateStore",
    "InMemoryStateStore",
    "RedisStateStore",
    # Flow
    "VerificationController",
    "Continuation",
    "Resume",
    "Redirect",
    "View",
    "StepUpFilter",
    "create_stepup",
    "create_stepup_router",
    # Logging
    "setup_logging",
]
