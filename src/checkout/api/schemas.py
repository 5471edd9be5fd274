"""Pydantic schemas for the order endpoints.

These are external contracts (anti-corruption layer) shared by the HTTP client
and the development stub server. Field names on the wire follow the existing
endpoints: camelCase for order creation, snake_case with ``razorpay_`` prefixes
for verification.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Order creation
# ---------------------------------------------------------------------------
class OrderLineSchema(_CamelModel):
    id: str
    product_id: str
    product_name: str | None = None
    price: float = Field(ge=0)
    quantity: int = Field(ge=1)
    line_total: float = Field(ge=0)
    shop_id: str


class ShopOrderSchema(_CamelModel):
    shop_id: str
    shop_name: str
    items: list[OrderLineSchema]
    coupon_code: str | None = None


class CreateOrderRequest(_CamelModel):
    shipping_address_id: str
    billing_address_id: str
    payment_method: str
    shop_orders: list[ShopOrderSchema]
    notes: str | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "shippingAddressId": "addr-001",
                    "billingAddressId": "addr-001",
                    "paymentMethod": "cod",
                    "shopOrders": [
                        {
                            "shopId": "shop-001",
                            "shopName": "Tryout Cards",
                            "items": [
                                {
                                    "id": "ci-1",
                                    "productId": "prod-001",
                                    "price": 1000.0,
                                    "quantity": 2,
                                    "lineTotal": 2000.0,
                                    "shopId": "shop-001",
                                }
                            ],
                            "couponCode": None,
                        }
                    ],
                    "notes": "Leave at the door",
                }
            ]
        },
    )


class CreatedOrderSchema(BaseModel):
    id: str


class CreateOrderResponse(BaseModel):
    orders: list[CreatedOrderSchema]
    amount: int = Field(ge=0, description="Payable amount in the gateway's minor unit")
    currency: str
    total: float
    razorpay_order_id: str | None = None


# ---------------------------------------------------------------------------
# Payment verification
# ---------------------------------------------------------------------------
class VerifyPaymentRequest(BaseModel):
    order_ids: list[str]
    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str


class VerifyPaymentResponse(BaseModel):
    success: bool = True
    order_ids: list[str] = []
    payment_status: str = "paid"


# ---------------------------------------------------------------------------
# Stub server controls
# ---------------------------------------------------------------------------
class ConfigureOrderServiceRequest(BaseModel):
    reject_with: str | None = None
    network_down: bool = False


class OrderServiceConfigResponse(BaseModel):
    order_api: str
    reject_with: str | None = None
    network_down: bool = False
