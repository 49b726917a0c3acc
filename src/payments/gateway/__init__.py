"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing (default)
- PaystackGateway for production (PAYMENT_GATEWAY=paystack)
"""

import os

from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import PaymentGateway

_current_gateway: PaymentGateway | None = None


def _build_gateway() -> PaymentGateway:
    if os.environ.get("PAYMENT_GATEWAY", "fake").lower() == "paystack":
        from payments.gateway.paystack_adapter import PaystackGateway

        return PaystackGateway(secret_key=os.environ.get("PAYSTACK_SECRET_KEY", ""))
    return FakeGateway()


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, built from PAYMENT_GATEWAY on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _build_gateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
