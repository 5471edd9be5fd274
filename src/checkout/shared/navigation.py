"""Navigation targets produced by checkout."""

CHECKOUT_ROUTE = "/checkout"
CART_ROUTE = "/cart"


def login_route(redirect: str = CHECKOUT_ROUTE) -> str:
    return f"/login?redirect={redirect}"


def confirmation_route(order_ids: list[str]) -> str:
    """Order confirmation page, keyed by the first order; ``multi`` flags a split order."""
    multi = "true" if len(order_ids) > 1 else "false"
    return f"/user/orders/{order_ids[0]}?success=true&multi={multi}"
