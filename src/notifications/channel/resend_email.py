"""Resend email adapter: delivers email through the Resend HTTP API."""

import requests
import structlog

from notifications.channel.email_port import EmailPort

logger = structlog.get_logger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


class ResendEmailAdapter(EmailPort):
    def __init__(self, api_key: str, api_url: str = RESEND_API_URL, timeout: float = 10.0):
        if not api_key:
            raise ValueError("A Resend API key is required")
        self.api_url = api_url
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {api_key}"})

    def send(
        self,
        from_address: str,
        to: str,
        subject: str,
        html: str | None,
        text: str,
        reply_to: str | None = None,
    ) -> dict:
        payload = {
            "from": from_address,
            "to": [to],
            "subject": subject,
            "text": text,
        }
        if html:
            payload["html"] = html
        if reply_to:
            payload["reply_to"] = reply_to

        try:
            response = self.session.post(self.api_url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Resend request failed", to=to, error=str(exc))
            return {"message_id": None, "status": "failed", "error": str(exc)}

        if response.status_code >= 400:
            logger.warning("Resend rejected email", to=to, status_code=response.status_code, body=response.text[:500])
            return {
                "message_id": None,
                "status": "failed",
                "error": f"Resend returned HTTP {response.status_code}",
            }

        return {"message_id": response.json().get("id"), "status": "sent"}
