"""Tests for checkout step transitions and their guards."""

from dataclasses import replace

import pytest
from checkout.pricing.coupons import AppliedCoupon
from checkout.session import transitions
from checkout.session.state import CheckoutState, CheckoutStep, PaymentMethod
from protean.exceptions import ValidationError


@pytest.fixture()
def filled():
    return CheckoutState(shipping_address_id="addr-home")


class TestAddressGate:
    def test_missing_shipping_blocks_advance(self):
        state = transitions.advance(CheckoutState())

        assert state.step == CheckoutStep.ADDRESS
        assert state.validation_errors["shipping"] == transitions.SHIPPING_REQUIRED_MESSAGE
        assert state.error == transitions.REQUIRED_FIELDS_MESSAGE

    def test_separate_billing_requires_billing_address(self, filled):
        state = transitions.set_billing_same_as_shipping(filled, False)
        state = transitions.advance(state)

        assert state.step == CheckoutStep.ADDRESS
        assert set(state.validation_errors) == {"billing"}

    def test_billing_same_as_shipping_passes_with_shipping_only(self, filled):
        assert transitions.advance(filled).step == CheckoutStep.PAYMENT

    def test_separate_billing_passes_when_selected(self, filled):
        state = transitions.set_billing_same_as_shipping(filled, False)
        state = transitions.select_billing_address(state, "addr-office")
        assert transitions.advance(state).step == CheckoutStep.PAYMENT

    def test_advance_clears_previous_errors(self):
        blocked = transitions.advance(CheckoutState())
        state = transitions.select_shipping_address(blocked, "addr-home")
        state = transitions.advance(state)

        assert state.step == CheckoutStep.PAYMENT
        assert dict(state.validation_errors) == {}
        assert state.error is None


class TestPaymentGate:
    def test_requires_payment_method(self, filled):
        state = replace(transitions.advance(filled), payment_method=None)
        state = transitions.advance(state)

        assert state.step == CheckoutStep.PAYMENT
        assert state.error == transitions.PAYMENT_METHOD_REQUIRED_MESSAGE

    def test_advances_to_review(self, filled):
        state = transitions.advance(transitions.advance(filled))
        assert state.step == CheckoutStep.REVIEW

    def test_cannot_advance_past_review(self, filled):
        state = transitions.advance(transitions.advance(filled))
        with pytest.raises(ValidationError) as exc_info:
            transitions.advance(state)
        assert "step" in exc_info.value.messages


class TestGoBack:
    def test_back_keeps_selections(self, filled):
        state = transitions.select_payment_method(transitions.advance(filled), PaymentMethod.COD)
        state = transitions.set_notes(state, "Leave with the guard")
        state = transitions.advance(state)

        state = transitions.go_back(transitions.go_back(state))

        assert state.step == CheckoutStep.ADDRESS
        assert state.shipping_address_id == "addr-home"
        assert state.payment_method == PaymentMethod.COD
        assert state.notes == "Leave with the guard"

    def test_cannot_go_back_from_address(self):
        with pytest.raises(ValidationError):
            transitions.go_back(CheckoutState())

    def test_unticking_same_as_shipping_restores_billing(self, filled):
        state = transitions.set_billing_same_as_shipping(filled, False)
        state = transitions.select_billing_address(state, "addr-office")
        state = transitions.set_billing_same_as_shipping(state, True)
        assert state.effective_billing_address_id == "addr-home"

        state = transitions.set_billing_same_as_shipping(state, False)
        assert state.effective_billing_address_id == "addr-office"


class TestCoupons:
    def test_apply_and_remove(self):
        coupon = AppliedCoupon(code="SAVE10", discount_amount=100.0)
        state = transitions.apply_coupon(CheckoutState(), "shop-1", coupon)
        assert state.coupons["shop-1"].code == "SAVE10"

        state = transitions.remove_coupon(state, "shop-1")
        assert "shop-1" not in state.coupons

    def test_removing_absent_coupon_is_noop(self):
        state = transitions.remove_coupon(CheckoutState(), "shop-1")
        assert dict(state.coupons) == {}

    def test_applying_replaces_existing_coupon(self):
        state = transitions.apply_coupon(CheckoutState(), "shop-1", AppliedCoupon(code="A", discount_amount=1.0))
        state = transitions.apply_coupon(state, "shop-1", AppliedCoupon(code="B", discount_amount=2.0))
        assert state.coupons["shop-1"].code == "B"
        assert len(state.coupons) == 1


class TestProcessingLock:
    @pytest.fixture()
    def processing(self, filled):
        review = transitions.advance(transitions.advance(filled))
        return transitions.begin_placement(review)

    def test_begin_sets_processing(self, processing):
        assert processing.processing is True

    def test_cannot_place_twice(self, processing):
        with pytest.raises(ValidationError) as exc_info:
            transitions.begin_placement(processing)
        assert "processing" in exc_info.value.messages

    def test_cannot_go_back(self, processing):
        with pytest.raises(ValidationError):
            transitions.go_back(processing)

    def test_cannot_switch_payment_method(self, processing):
        with pytest.raises(ValidationError):
            transitions.select_payment_method(processing, PaymentMethod.COD)

    def test_cannot_change_coupons(self, processing):
        with pytest.raises(ValidationError):
            transitions.apply_coupon(processing, "shop-1", AppliedCoupon(code="X", discount_amount=1.0))
        with pytest.raises(ValidationError):
            transitions.remove_coupon(processing, "shop-1")

    def test_failure_releases_lock_and_stays_on_review(self, processing):
        state = transitions.fail_placement(processing, "Payment failed")

        assert state.processing is False
        assert state.step == CheckoutStep.REVIEW
        assert state.error == "Payment failed"

    def test_completion_releases_lock(self, processing):
        state = transitions.complete_placement(processing)
        assert state.processing is False
        assert state.error is None

    def test_placement_only_from_review(self, filled):
        with pytest.raises(ValidationError) as exc_info:
            transitions.begin_placement(filled)
        assert "step" in exc_info.value.messages


class TestErrorHelpers:
    def test_clear_errors(self):
        state = transitions.advance(CheckoutState())
        state = transitions.clear_errors(state)
        assert dict(state.validation_errors) == {}
        assert state.error is None

    def test_record_errors_releases_processing(self):
        state = transitions.record_errors(CheckoutState(processing=True), {"coupon": "required"}, "Oops")
        assert state.processing is False
        assert state.validation_errors["coupon"] == "required"
        assert state.error == "Oops"


class TestGuardBlocking:
    def test_exactly_one_error_for_missing_shipping(self):
        state = transitions.advance(CheckoutState())
        assert list(state.validation_errors) == ["shipping"]

    def test_two_errors_when_billing_also_missing(self):
        state = transitions.set_billing_same_as_shipping(CheckoutState(), False)
        state = transitions.advance(state)
        assert set(state.validation_errors) == {"shipping", "billing"}

    def test_address_payment_back_keeps_address_ids(self):
        state = transitions.select_shipping_address(CheckoutState(), "addr-home")
        state = transitions.set_billing_same_as_shipping(state, False)
        state = transitions.select_billing_address(state, "addr-office")

        state = transitions.go_back(transitions.advance(state))

        assert state.step == CheckoutStep.ADDRESS
        assert state.shipping_address_id == "addr-home"
        assert state.billing_address_id == "addr-office"
