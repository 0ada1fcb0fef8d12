"""
OTP Generation and Verification
================================
One-time code lifecycle for SMS step-up authentication.
"""

from .models import (
    PendingVerification,
    ResendReason,
    Delivered,
    ServerFailure,
    OtherFailure,
    DeliveryOutcome,
)
from .generator import generate_code, sanitize_phone_number, validate_originator, mask_recipient
from .hashing import SecretHasher, Argon2SecretHasher
from .engine import OTPEngine

__all__ = [
    # Models
    "PendingVerification",
    "ResendReason",
    "Delivered",
    "ServerFailure",
    "OtherFailure",
    "DeliveryOutcome",
    # Generator
    "generate_code",
    "sanitize_phone_number",
    "validate_originator",
    "mask_recipient",
    # Hashing
    "SecretHasher",
    "Argon2SecretHasher",
    # Engine
    "OTPEngine",
]
