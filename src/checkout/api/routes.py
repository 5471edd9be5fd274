"""FastAPI routes for the development order service.

Serves the order creation and payment verification contract the checkout
client speaks, backed by the configured order API (the in-memory fake by
default).
"""

import os

from fastapi import APIRouter, HTTPException

from checkout.api.schemas import (
    ConfigureOrderServiceRequest,
    CreateOrderRequest,
    CreateOrderResponse,
    OrderServiceConfigResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from checkout.errors import NetworkFailure, ServerRejection
from checkout.placement import get_order_api
from checkout.placement.fake_adapter import FakeOrderApi

checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


def _http_error(exc: ServerRejection | NetworkFailure) -> HTTPException:
    if isinstance(exc, NetworkFailure):
        return HTTPException(status_code=503, detail=exc.message)
    return HTTPException(status_code=exc.status_code or 400, detail=exc.message)


@checkout_router.post(
    "/create-order",
    status_code=201,
    response_model=CreateOrderResponse,
    response_model_exclude_none=True,
)
async def create_order(body: CreateOrderRequest) -> CreateOrderResponse:
    """Create one order per shop and, for gateway payments, the gateway order."""
    try:
        return await get_order_api().create_order(body)
    except (ServerRejection, NetworkFailure) as exc:
        raise _http_error(exc) from exc


@checkout_router.post("/verify-payment", response_model=VerifyPaymentResponse)
async def verify_payment(body: VerifyPaymentRequest) -> VerifyPaymentResponse:
    """Verify the gateway signature and mark the orders paid."""
    try:
        return await get_order_api().verify_payment(body)
    except (ServerRejection, NetworkFailure) as exc:
        raise _http_error(exc) from exc


@checkout_router.post("/gateway/configure", response_model=OrderServiceConfigResponse)
async def configure_order_service(body: ConfigureOrderServiceRequest) -> OrderServiceConfigResponse:
    """Configure the FakeOrderApi behavior (non-production only)."""
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Order service configuration not available in production")

    order_api = get_order_api()
    if not isinstance(order_api, FakeOrderApi):
        raise HTTPException(status_code=400, detail="Order service configuration only available for FakeOrderApi")

    order_api.configure(reject_with=body.reject_with, network_down=body.network_down)
    return OrderServiceConfigResponse(
        order_api=type(order_api).__name__,
        reject_with=order_api.reject_with,
        network_down=order_api.network_down,
    )
