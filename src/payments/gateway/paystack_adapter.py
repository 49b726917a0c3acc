"""Paystack payment gateway adapter.

Talks to the Paystack REST API with ``requests``: transactions are
initialized server-side, verified by reference, and webhooks are
authenticated with an HMAC-SHA512 of the raw body keyed by the secret key.
Amounts are in the currency's minor unit (pesewas for GHS).
"""

import hashlib
import hmac

import requests
import structlog

from payments.gateway.port import GatewayError, InitializeResult, PaymentGateway, PaymentRequest, VerifyResult

logger = structlog.get_logger(__name__)

PAYSTACK_BASE_URL = "https://api.paystack.co"


class PaystackGateway(PaymentGateway):
    def __init__(self, secret_key: str, base_url: str = PAYSTACK_BASE_URL, timeout: float = 10.0) -> None:
        if not secret_key:
            raise ValueError("A Paystack secret key is required")
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {secret_key}",
                "Content-Type": "application/json",
            }
        )

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as exc:
            logger.error("Paystack request failed", method=method, path=path, error=str(exc))
            raise GatewayError(f"Paystack request failed: {exc}") from exc
        except ValueError as exc:
            raise GatewayError("Paystack returned a non-JSON response") from exc

        if not body.get("status"):
            raise GatewayError(body.get("message") or "Paystack rejected the request")
        return body.get("data") or {}

    def initialize(self, request: PaymentRequest) -> InitializeResult:
        data = self._request(
            "POST",
            "/transaction/initialize",
            json={
                "email": request.email,
                "amount": request.amount_minor_units,
                "currency": request.currency,
                "reference": request.reference,
                "metadata": request.metadata,
            },
        )
        return InitializeResult(
            authorization_url=data.get("authorization_url"),
            access_code=data.get("access_code"),
        )

    def verify(self, reference: str) -> VerifyResult:
        data = self._request("GET", f"/transaction/verify/{reference}")
        gateway_status = data.get("status")
        return VerifyResult(
            success=gateway_status == "success",
            gateway_status=gateway_status,
            amount_minor_units=data.get("amount"),
            transaction_id=str(data["id"]) if data.get("id") is not None else None,
            failure_reason=None if gateway_status == "success" else data.get("gateway_response"),
        )

    def verify_webhook_signature(self, payload: str, signature: str) -> bool:
        if not signature:
            return False
        expected = hmac.new(self.secret_key.encode(), payload.encode(), hashlib.sha512).hexdigest()
        return hmac.compare_digest(expected, signature)
