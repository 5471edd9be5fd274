"""Gateway payment signatures.

The gateway signs ``"{gateway_order_id}|{payment_id}"`` with HMAC-SHA256 using
the merchant secret. Only the server side (and fakes standing in for it) ever
holds the secret.
"""

import hashlib
import hmac


def sign_payment(gateway_order_id: str, payment_id: str, secret: str) -> str:
    message = f"{gateway_order_id}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def verify_signature(gateway_order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    expected = sign_payment(gateway_order_id, payment_id, secret)
    return hmac.compare_digest(expected, signature or "")
