"""Payment gateway port (abstract interface).

Checkout sets up a hosted payment with the gateway and gets back a
``PaymentHandle``. Opening the handle starts the hosted payment; completing it
verifies the charge and invokes the checkout's success callback; closing it
(the customer abandoned the payment) invokes the close callback. Each callback
fires at most once per handle.

Adapters: FakeGateway (dev/test) and PaystackGateway (production).
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


class GatewayError(Exception):
    """The gateway could not be reached or returned an unusable response."""


@dataclass(frozen=True)
class PaymentRequest:
    key: str
    email: str
    amount_minor_units: int
    currency: str
    reference: str
    metadata: dict = field(default_factory=dict)


@dataclass(frozen=True)
class InitializeResult:
    authorization_url: str | None = None
    access_code: str | None = None


@dataclass(frozen=True)
class VerifyResult:
    success: bool
    gateway_status: str | None = None
    amount_minor_units: int | None = None
    transaction_id: str | None = None
    failure_reason: str | None = None


@dataclass(frozen=True)
class PaymentResponse:
    """What the success callback receives."""

    reference: str
    status: str
    transaction_id: str | None = None


class HandleState(Enum):
    CREATED = "created"
    OPEN = "open"
    COMPLETED = "completed"
    FAILED = "failed"
    CLOSED = "closed"


class PaymentHandle:
    def __init__(
        self,
        gateway: "PaymentGateway",
        request: PaymentRequest,
        callback: Callable[[PaymentResponse], Any],
        on_close: Callable[[], Any] | None = None,
    ) -> None:
        self.gateway = gateway
        self.request = request
        self.callback = callback
        self.on_close = on_close
        self.state = HandleState.CREATED
        self.authorization_url: str | None = None

    @property
    def reference(self) -> str:
        return self.request.reference

    def open(self) -> str | None:
        """Start the hosted payment; returns the page the customer should visit."""
        result = self.gateway.initialize(self.request)
        self.authorization_url = result.authorization_url
        self.state = HandleState.OPEN
        return self.authorization_url

    def complete(self) -> Any:
        """Verify the charge and, if it succeeded, run the success callback."""
        if self.state in (HandleState.COMPLETED, HandleState.CLOSED):
            return None

        result = self.gateway.verify(self.reference)
        if not result.success:
            self.state = HandleState.FAILED
            logger.warning(
                "Payment verification failed",
                reference=self.reference,
                gateway_status=result.gateway_status,
                failure_reason=result.failure_reason,
            )
            return None

        self.state = HandleState.COMPLETED
        return self.callback(
            PaymentResponse(
                reference=self.reference,
                status="success",
                transaction_id=result.transaction_id,
            )
        )

    def close(self) -> None:
        """The customer dismissed the payment without paying."""
        if self.state in (HandleState.COMPLETED, HandleState.CLOSED):
            return
        self.state = HandleState.CLOSED
        if self.on_close is not None:
            self.on_close()


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    def setup(
        self,
        key: str,
        email: str,
        amount_minor_units: int,
        currency: str,
        reference: str,
        metadata: dict | None,
        callback: Callable[[PaymentResponse], Any],
        on_close: Callable[[], Any] | None = None,
    ) -> PaymentHandle:
        """Prepare a hosted payment. Nothing is sent to the gateway until ``open()``."""
        request = PaymentRequest(
            key=key,
            email=email,
            amount_minor_units=amount_minor_units,
            currency=currency,
            reference=reference,
            metadata=metadata or {},
        )
        return PaymentHandle(self, request, callback, on_close)

    @abstractmethod
    def initialize(self, request: PaymentRequest) -> InitializeResult:
        """Register the payment with the gateway."""
        ...

    @abstractmethod
    def verify(self, reference: str) -> VerifyResult:
        """Look up the outcome of the payment identified by ``reference``."""
        ...

    @abstractmethod
    def verify_webhook_signature(
        self,
        payload: str,
        signature: str,
    ) -> bool:
        """Verify that a webhook payload is authentically from the gateway."""
        ...
