"""Pure transition functions over ``CheckoutState``.

Steps move strictly linearly:

    address ⇄ payment ⇄ review

Forward moves are gated (a failed gate returns the same step with the
validation map filled in); backward moves are never gated and never clear
anything the shopper entered. While ``processing`` is set, placing the order,
going back, switching payment method and changing coupons are all refused.

Illegal use raises ``ValidationError``; shopper-recoverable problems are
reported through ``validation_errors`` and ``error`` on the returned state.
"""

from dataclasses import replace

from protean.exceptions import ValidationError

from checkout.pricing.coupons import AppliedCoupon
from checkout.session.state import CheckoutState, CheckoutStep, PaymentMethod

REQUIRED_FIELDS_MESSAGE = "Please complete all required fields to continue."
SHIPPING_REQUIRED_MESSAGE = "Please select a shipping address"
BILLING_REQUIRED_MESSAGE = "Please select a billing address"
PAYMENT_METHOD_REQUIRED_MESSAGE = "Please select a payment method"

_FORWARD = {
    CheckoutStep.ADDRESS: CheckoutStep.PAYMENT,
    CheckoutStep.PAYMENT: CheckoutStep.REVIEW,
}
_BACKWARD = {
    CheckoutStep.PAYMENT: CheckoutStep.ADDRESS,
    CheckoutStep.REVIEW: CheckoutStep.PAYMENT,
}


def ensure_idle(state: CheckoutState, action: str) -> None:
    if state.processing:
        raise ValidationError({"processing": [f"Cannot {action} while the order is being placed"]})


def address_errors(state: CheckoutState) -> dict[str, str]:
    """Missing address selections, keyed by field."""
    errors = {}
    if not state.shipping_address_id:
        errors["shipping"] = SHIPPING_REQUIRED_MESSAGE
    if not state.billing_same_as_shipping and not state.billing_address_id:
        errors["billing"] = BILLING_REQUIRED_MESSAGE
    return errors


# ---------------------------------------------------------------------------
# Selections
# ---------------------------------------------------------------------------
def select_shipping_address(state: CheckoutState, address_id: str) -> CheckoutState:
    return replace(state, shipping_address_id=address_id)


def select_billing_address(state: CheckoutState, address_id: str) -> CheckoutState:
    return replace(state, billing_address_id=address_id)


def set_billing_same_as_shipping(state: CheckoutState, same: bool) -> CheckoutState:
    # The billing id is kept even when hidden so unticking restores it
    return replace(state, billing_same_as_shipping=same)


def select_payment_method(state: CheckoutState, method: PaymentMethod) -> CheckoutState:
    ensure_idle(state, "switch payment method")
    return replace(state, payment_method=PaymentMethod(method))


def set_notes(state: CheckoutState, notes: str) -> CheckoutState:
    return replace(state, notes=notes or "")


# ---------------------------------------------------------------------------
# Coupons
# ---------------------------------------------------------------------------
def apply_coupon(state: CheckoutState, seller_id: str, coupon: AppliedCoupon) -> CheckoutState:
    ensure_idle(state, "change coupons")
    return replace(state, coupons={**state.coupons, seller_id: coupon}, error=None)


def remove_coupon(state: CheckoutState, seller_id: str) -> CheckoutState:
    ensure_idle(state, "change coupons")
    coupons = {key: value for key, value in state.coupons.items() if key != seller_id}
    return replace(state, coupons=coupons, error=None)


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------
def advance(state: CheckoutState) -> CheckoutState:
    """Try to move one step forward.

    Previous errors are cleared first. If the gate fails, the step is left
    unchanged and the returned state carries the validation errors.
    """
    if state.step not in _FORWARD:
        raise ValidationError({"step": ["Review is the last step; place the order instead"]})

    state = replace(state, validation_errors={}, error=None)

    if state.step == CheckoutStep.ADDRESS:
        errors = address_errors(state)
        if errors:
            return replace(state, validation_errors=errors, error=REQUIRED_FIELDS_MESSAGE)
    elif state.step == CheckoutStep.PAYMENT and state.payment_method is None:
        return replace(state, error=PAYMENT_METHOD_REQUIRED_MESSAGE)

    return replace(state, step=_FORWARD[state.step])


def go_back(state: CheckoutState) -> CheckoutState:
    """Move one step back, keeping every selection."""
    ensure_idle(state, "go back")
    if state.step not in _BACKWARD:
        raise ValidationError({"step": [f"Cannot go back from the {state.step.value} step"]})
    return replace(state, step=_BACKWARD[state.step])


def clear_errors(state: CheckoutState) -> CheckoutState:
    return replace(state, validation_errors={}, error=None)


def report_error(state: CheckoutState, message: str) -> CheckoutState:
    return replace(state, error=message)


def record_errors(state: CheckoutState, errors: dict[str, str], message: str | None = None) -> CheckoutState:
    """Replace field-level errors; ``processing`` is always released."""
    return replace(state, processing=False, validation_errors=errors, error=message)


# ---------------------------------------------------------------------------
# Order placement lifecycle
# ---------------------------------------------------------------------------
def begin_placement(state: CheckoutState) -> CheckoutState:
    """Enter the processing critical section."""
    ensure_idle(state, "place the order")
    if state.step != CheckoutStep.REVIEW:
        raise ValidationError({"step": ["Orders can only be placed from the review step"]})
    return replace(state, processing=True, validation_errors={}, error=None)


def fail_placement(state: CheckoutState, message: str) -> CheckoutState:
    """Leave the critical section with a shopper-visible error; the shopper stays on review."""
    return replace(state, processing=False, error=message)


def complete_placement(state: CheckoutState) -> CheckoutState:
    return replace(state, processing=False, error=None)
