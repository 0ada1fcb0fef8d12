"""
SMS Gateway Base
================
Interface for the SMS vendor client used to deliver one-time codes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Dict, Any
import structlog

logger = structlog.get_logger(__name__)


@dataclass
class GatewayResponse:
    """Result of a single send attempt."""
    success: bool
    message_id: Optional[str] = None
    server_error: bool = False
    status_code: Optional[int] = None
    error_message: Optional[str] = None
    raw_response: Optional[Dict[str, Any]] = None


class SMSGateway(ABC):
    """
    Abstract base class for SMS vendor clients.

    Implementations make exactly one delivery attempt per call and never
    retry on their own.
    """

    name: str = "base"

    async def close(self) -> None:
        """Release any held resources (e.g. HTTP clients)."""
        logger.debug("Gateway closed", gateway=self.name)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()

    @abstractmethod
    async def send(
        self,
        api_key: str,
        originator: str,
        recipient: str,
        body: str,
    ) -> GatewayResponse:
        """
        Send an SMS.

        Args:
            api_key: Vendor API key
            originator: Sender label shown to the recipient
            recipient: Digits-only phone number
            body: Message content

        Returns:
            GatewayResponse describing the vendor's answer

        Raises:
            DeliveryError: if the vendor could not be reached
        """
        pass
