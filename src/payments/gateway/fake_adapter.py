"""Configurable fake payment gateway for development and testing.

Simulates the hosted payment flow without external calls. It can be
configured at runtime to succeed or fail, and records every call it receives
in ``calls``.
"""

from uuid import uuid4

from payments.gateway.port import InitializeResult, PaymentGateway, PaymentRequest, VerifyResult


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Card declined"
        self.calls: list[dict] = []
        self.requests: dict[str, PaymentRequest] = {}

    def configure(self, should_succeed: bool, failure_reason: str = "Card declined") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def initialize(self, request: PaymentRequest) -> InitializeResult:
        self.calls.append(
            {
                "method": "initialize",
                "email": request.email,
                "amount_minor_units": request.amount_minor_units,
                "currency": request.currency,
                "reference": request.reference,
                "metadata": request.metadata,
            }
        )
        self.requests[request.reference] = request
        access_code = uuid4().hex[:12]
        return InitializeResult(
            authorization_url=f"https://checkout.fake-gateway.test/{access_code}",
            access_code=access_code,
        )

    def verify(self, reference: str) -> VerifyResult:
        self.calls.append({"method": "verify", "reference": reference})

        request = self.requests.get(reference)
        if self.should_succeed:
            return VerifyResult(
                success=True,
                gateway_status="success",
                amount_minor_units=request.amount_minor_units if request else None,
                transaction_id=f"fake_txn_{uuid4().hex[:12]}",
            )
        return VerifyResult(
            success=False,
            gateway_status="failed",
            failure_reason=self.failure_reason,
        )

    def verify_webhook_signature(self, payload: str, signature: str) -> bool:  # noqa: ARG002
        return signature == "test-signature"
