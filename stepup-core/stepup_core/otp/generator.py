"""
OTP Generator
=============
Code generation and recipient/originator normalization.
"""

import re
import secrets

from ..exceptions import InvariantError, ValidationError

CODE_LENGTH = 6
CODE_MIN = 10000
CODE_MAX = 999999

_CODE_PATTERN = re.compile(r"[0-9]{%d}" % CODE_LENGTH)
_PREFIX_PATTERN = re.compile(r"^(\+|0{1,2})")
_DIGITS_PATTERN = re.compile(r"[0-9]+")
_ORIGINATOR_PATTERN = re.compile(r"[A-Za-z0-9]+( [A-Za-z0-9]+)*")


def generate_code() -> str:
    """
    Generate a 6-digit one-time code.

    The integer is drawn from [10000, 999999] and left-padded with zeros,
    so codes below 100000 all carry a single leading zero.

    Returns:
        The code as a string of exactly six ASCII digits

    Raises:
        InvariantError: if the padded value is not six digits
    """
    value = CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1)
    code = str(value).zfill(CODE_LENGTH)

    if not _CODE_PATTERN.fullmatch(code):
        raise InvariantError("Generated code is not a 6-digit string")

    return code


def sanitize_phone_number(raw: str) -> str:
    """
    Sanitize a mobile phone number for use with the SMS gateway.

    Strips a single leading ``+`` or one or two leading zeros, then
    removes every ``-`` separator.

    Args:
        raw: Phone number as supplied by the upstream attribute

    Returns:
        Digits-only recipient

    Raises:
        ValidationError: if the result is empty or contains non-digits
    """
    recipient = _PREFIX_PATTERN.sub("", raw, count=1)
    recipient = recipient.replace("-", "")

    if not recipient:
        raise ValidationError("Mobile phone number cannot be an empty string.")
    if not _DIGITS_PATTERN.fullmatch(recipient):
        raise ValidationError("Mobile phone number contains illegal characters.")

    return recipient


def validate_originator(originator: str) -> str:
    """Check that an SMS sender label is a non-empty alphanumeric string."""
    if not originator:
        raise ValidationError("Originator cannot be an empty string")
    if not _ORIGINATOR_PATTERN.fullmatch(originator):
        raise ValidationError("Originator must be an alphanumeric string")
    return originator


def mask_recipient(recipient: str) -> str:
    """Mask a recipient for logging, keeping the last 4 digits."""
    if len(recipient) <= 4:
        return "*" * len(recipient)
    return "*" * (len(recipient) - 4) + recipient[-4:]
