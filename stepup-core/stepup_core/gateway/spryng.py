"""
Spryng SMS Gateway
==================
Client for the Spryng REST API (``POST /v1/messages``).
"""

from typing import Optional, List
import httpx
import structlog
from pydantic import BaseModel, ValidationError as PydanticValidationError

from ..exceptions import DeliveryError
from .base import SMSGateway, GatewayResponse

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://rest.spryngsms.com/v1"


class SpryngMessage(BaseModel):
    """The subset of Spryng's message object the flow relies on."""
    id: str
    originator: Optional[str] = None
    recipients: List[str] = []


class SpryngGateway(SMSGateway):
    """
    Spryng SMS gateway.

    Uses a bearer token per request so one client can serve any API key.
    """

    name = "spryng"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        route: str = "business",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.route = route
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
        await super().close()

    async def send(
        self,
        api_key: str,
        originator: str,
        recipient: str,
        body: str,
    ) -> GatewayResponse:
        payload = {
            "body": body,
            "encoding": "auto",
            "originator": originator,
            "recipients": [recipient],
            "route": self.route,
        }

        try:
            response = await self._get_client().post(
                "/messages",
                json=payload,
                headers={"Authorization": f"Bearer {api_key}"},
            )
        except httpx.HTTPError as e:
            logger.error("Spryng request failed", error=str(e))
            raise DeliveryError(f"Failed to reach Spryng: {e}") from e

        if response.is_success:
            try:
                message = SpryngMessage.model_validate(response.json())
            except (ValueError, PydanticValidationError) as e:
                logger.warning("Unexpected Spryng response body", error=str(e))
                return GatewayResponse(success=True, status_code=response.status_code)

            return GatewayResponse(
                success=True,
                message_id=message.id,
                status_code=response.status_code,
                raw_response=message.model_dump(),
            )

        return GatewayResponse(
            success=False,
            server_error=response.is_server_error,
            status_code=response.status_code,
            error_message=self._error_message(response),
        )

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(data, dict):
            return str(data.get("message") or data)
        return str(data)
