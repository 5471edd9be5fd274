"""HTTP client for the order endpoints, built on ``httpx``.

Transport errors (DNS, connect, read timeouts) become ``NetworkFailure``;
any 4xx/5xx answer becomes ``ServerRejection`` carrying the server's message
from ``detail`` or ``error``.
"""

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from checkout.api.schemas import (
    CreateOrderRequest,
    CreateOrderResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from checkout.config import CheckoutConfig, get_config
from checkout.errors import NetworkFailure, ServerRejection
from checkout.placement.port import OrderApi

logger = structlog.get_logger(__name__)

CREATE_ORDER_PATH = "/checkout/create-order"
VERIFY_PAYMENT_PATH = "/checkout/verify-payment"


def _error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("detail") or body.get("error") or body.get("message")
        if isinstance(message, str):
            return message
    return None


class HttpOrderApi(OrderApi):
    """Order API client.

    Args:
        config: Supplies the base URL and request timeout.
        transport: Optional ``httpx`` transport, used to route requests to an
            in-process app or a mock in tests.
    """

    def __init__(self, config: CheckoutConfig | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config or get_config()
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.api_base_url,
            timeout=self.config.request_timeout,
            transport=self.transport,
        )

    async def _post(self, path: str, payload: dict) -> httpx.Response:
        try:
            async with self._client() as client:
                response = await client.post(path, json=payload)
        except httpx.RequestError as exc:
            logger.warning("Order API unreachable", path=path, error=str(exc))
            raise NetworkFailure() from exc

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning("Order API rejected request", path=path, status_code=response.status_code, error=message)
            raise ServerRejection(message, status_code=response.status_code)
        return response

    @staticmethod
    def _parse(response: httpx.Response, schema: type[BaseModel]):
        try:
            return schema.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise ServerRejection("Unexpected response from the order service", status_code=response.status_code) from exc

    async def create_order(self, request: CreateOrderRequest) -> CreateOrderResponse:
        payload = request.model_dump(mode="json", by_alias=True, exclude_none=True)
        response = await self._post(CREATE_ORDER_PATH, payload)
        return self._parse(response, CreateOrderResponse)

    async def verify_payment(self, request: VerifyPaymentRequest) -> VerifyPaymentResponse:
        response = await self._post(VERIFY_PAYMENT_PATH, request.model_dump(mode="json"))
        return self._parse(response, VerifyPaymentResponse)
