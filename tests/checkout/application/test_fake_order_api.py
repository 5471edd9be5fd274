"""Tests for the in-memory order service."""

import asyncio

import pytest
from checkout.api.schemas import CreateOrderRequest, VerifyPaymentRequest
from checkout.cart.partition import partition
from checkout.errors import CheckoutError, NetworkFailure, ServerRejection
from checkout.gateway.signature import sign_payment
from checkout.placement.coordinator import build_placement_request
from checkout.placement.fake_adapter import FakeOrderApi
from checkout.session.state import CheckoutState, PaymentMethod


@pytest.fixture()
def request_for(make_item):
    def _build(payment_method=PaymentMethod.COD, sellers=("shop-1",), coupons=None, notes=""):
        items = [make_item(item_id=f"ci-{seller}", shop_id=seller, price=1000.0, quantity=2) for seller in sellers]
        state = CheckoutState(
            shipping_address_id="addr-home",
            payment_method=payment_method,
            coupons=coupons or {},
            notes=notes,
        )
        return build_placement_request(state, partition(items))

    return _build


def _verify(order_api, order_ids, gateway_order_id, payment_id="pay_1", signature=None, secret="test_secret"):
    request = VerifyPaymentRequest(
        order_ids=order_ids,
        razorpay_order_id=gateway_order_id,
        razorpay_payment_id=payment_id,
        razorpay_signature=signature or sign_payment(gateway_order_id, payment_id, secret),
    )
    return asyncio.run(order_api.verify_payment(request))


class TestCreateOrder:
    def test_cod_creates_pending_orders_without_gateway_order(self, order_api, request_for):
        response = asyncio.run(order_api.create_order(request_for(PaymentMethod.COD)))

        assert len(response.orders) == 1
        assert response.razorpay_order_id is None
        order = order_api.orders[response.orders[0].id]
        assert order["status"] == "pending"

    def test_amount_is_grand_total_in_minor_units(self, order_api, request_for):
        response = asyncio.run(order_api.create_order(request_for(PaymentMethod.COD)))

        assert response.total == 2460.0
        assert response.amount == 246000
        assert response.currency == "INR"

    def test_gateway_creates_pending_payment_orders(self, order_api, request_for):
        response = asyncio.run(order_api.create_order(request_for(PaymentMethod.GATEWAY)))

        assert response.razorpay_order_id.startswith("order_")
        order = order_api.orders[response.orders[0].id]
        assert order["status"] == "pending_payment"
        assert order["gateway_order_id"] == response.razorpay_order_id

    def test_one_order_per_shop(self, order_api, request_for):
        response = asyncio.run(order_api.create_order(request_for(sellers=("shop-1", "shop-2", "shop-3"))))

        assert len(response.orders) == 3
        shops = [order_api.orders[o.id]["shop_id"] for o in response.orders]
        assert shops == ["shop-1", "shop-2", "shop-3"]

    def test_coupon_codes_are_priced_server_side(self, order_api, request_for):
        from checkout.pricing.coupons import AppliedCoupon

        coupons = {"shop-1": AppliedCoupon(code="SAVE10", discount_amount=200.0)}
        response = asyncio.run(order_api.create_order(request_for(coupons=coupons)))

        # 2000 - 200 + 100 shipping + 18% of 1800
        assert response.total == 2224.0

    def test_empty_shop_orders_rejected(self, order_api):
        request = CreateOrderRequest(
            shipping_address_id="addr-home",
            billing_address_id="addr-home",
            payment_method="cod",
            shop_orders=[],
        )
        with pytest.raises(ServerRejection) as exc_info:
            asyncio.run(order_api.create_order(request))
        assert exc_info.value.message == "Cart is empty"
        assert exc_info.value.status_code == 400

    def test_rejected_coupon_becomes_server_rejection(self, config, request_for):
        from checkout.pricing.coupons import AppliedCoupon, CouponPricing

        class ExpiredCoupons(CouponPricing):
            def discount_for(self, code, draft):
                raise CheckoutError("Coupon has expired")

        order_api = FakeOrderApi(config, coupon_pricing=ExpiredCoupons())
        coupons = {"shop-1": AppliedCoupon(code="OLD", discount_amount=10.0)}

        with pytest.raises(ServerRejection) as exc_info:
            asyncio.run(order_api.create_order(request_for(coupons=coupons)))
        assert exc_info.value.message == "Coupon has expired"
        assert exc_info.value.status_code == 400

    def test_mismatched_line_total_becomes_server_rejection(self, order_api):
        request = CreateOrderRequest.model_validate(
            {
                "shippingAddressId": "addr-home",
                "billingAddressId": "addr-home",
                "paymentMethod": "cod",
                "shopOrders": [
                    {
                        "shopId": "shop-1",
                        "shopName": "Tryout Cards",
                        "items": [
                            {
                                "id": "ci-1",
                                "productId": "prod-1",
                                "price": 10.0,
                                "quantity": 2,
                                "lineTotal": 5.0,
                                "shopId": "shop-1",
                            }
                        ],
                    }
                ],
            }
        )

        with pytest.raises(ServerRejection) as exc_info:
            asyncio.run(order_api.create_order(request))
        assert exc_info.value.message.startswith("Line total does not match")
        assert order_api.orders == {}

    def test_configured_rejection(self, order_api, request_for):
        order_api.configure(reject_with="Product out of stock")

        with pytest.raises(ServerRejection) as exc_info:
            asyncio.run(order_api.create_order(request_for()))
        assert exc_info.value.message == "Product out of stock"
        assert order_api.orders == {}

    def test_network_down(self, order_api, request_for):
        order_api.configure(network_down=True)

        with pytest.raises(NetworkFailure):
            asyncio.run(order_api.create_order(request_for()))

    def test_call_logging(self, order_api, request_for):
        asyncio.run(order_api.create_order(request_for(notes="Fragile")))

        assert len(order_api.calls) == 1
        assert order_api.calls[0]["method"] == "create_order"
        assert order_api.calls[0]["request"]["notes"] == "Fragile"


class TestVerifyPayment:
    @pytest.fixture()
    def placed(self, order_api, request_for):
        return asyncio.run(order_api.create_order(request_for(PaymentMethod.GATEWAY, sellers=("shop-1", "shop-2"))))

    def test_valid_signature_marks_orders_paid(self, order_api, placed):
        order_ids = [o.id for o in placed.orders]
        response = _verify(order_api, order_ids, placed.razorpay_order_id)

        assert response.success is True
        assert response.payment_status == "paid"
        assert all(order_api.orders[oid]["status"] == "paid" for oid in order_ids)

    def test_bad_signature_marks_orders_failed(self, order_api, placed):
        order_ids = [o.id for o in placed.orders]

        with pytest.raises(ServerRejection) as exc_info:
            _verify(order_api, order_ids, placed.razorpay_order_id, signature="bogus")

        assert exc_info.value.message == "Payment verification failed"
        assert all(order_api.orders[oid]["status"] == "payment_failed" for oid in order_ids)

    def test_no_order_ids(self, order_api, placed):
        with pytest.raises(ServerRejection) as exc_info:
            _verify(order_api, [], placed.razorpay_order_id)
        assert exc_info.value.message == "No order IDs provided"

    def test_unknown_order(self, order_api, placed):
        with pytest.raises(ServerRejection) as exc_info:
            _verify(order_api, ["ord_missing"], placed.razorpay_order_id)
        assert exc_info.value.message == "Order not found"
        assert exc_info.value.status_code == 404
