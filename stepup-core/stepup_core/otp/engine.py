"""
OTP Engine
==========
Generates, delivers, hashes and verifies one-time codes.
"""

import structlog

from ..exceptions import DeliveryError
from ..gateway.base import SMSGateway
from .generator import generate_code, sanitize_phone_number, mask_recipient
from .hashing import SecretHasher
from .models import DeliveryOutcome, Delivered, ServerFailure, OtherFailure

logger = structlog.get_logger(__name__)


class OTPEngine:
    """High-level one-time code operations over an SMS gateway and a hasher."""

    def __init__(self, gateway: SMSGateway, hasher: SecretHasher, api_key: str):
        self.gateway = gateway
        self.hasher = hasher
        self.api_key = api_key

    def generate_code(self) -> str:
        return generate_code()

    def sanitize_phone_number(self, raw: str) -> str:
        return sanitize_phone_number(raw)

    async def send_code(self, code: str, recipient: str, originator: str) -> DeliveryOutcome:
        """
        Send a code to the recipient in a single attempt.

        Args:
            code: Plain one-time code, used as the message body
            recipient: Sanitized phone number
            originator: Sender label

        Returns:
            Delivered, ServerFailure or OtherFailure
        """
        try:
            response = await self.gateway.send(
                api_key=self.api_key,
                originator=originator,
                recipient=recipient,
                body=code,
            )
        except DeliveryError as e:
            logger.warning(
                "SMS gateway unreachable",
                gateway=self.gateway.name,
                recipient=mask_recipient(recipient),
                error=e.message,
            )
            return ServerFailure(message=e.message)

        if response.success:
            return Delivered(message_id=response.message_id)
        if response.server_error:
            return ServerFailure(message=response.error_message)
        return OtherFailure(status_code=response.status_code, message=response.error_message)

    def hash_code(self, code: str) -> str:
        return self.hasher.hash(code)

    def verify_code(self, code_hash: str, candidate: str) -> bool:
        return self.hasher.verify(code_hash, candidate)
