import json
from typing import Optional, Protocol
from uuid import uuid4

import httpx
from loguru import logger

from .models import DispatchResult, MailMessage


class Mailer(Protocol):
    def send(self, message: MailMessage) -> DispatchResult:
        ...


class InMemoryMailer:
    """Keeps every message in an outbox. Used in development and tests."""

    def __init__(self, fail: bool = False):
        self.outbox: list[MailMessage] = []
        self.fail = fail

    def send(self, message: MailMessage) -> DispatchResult:
        if self.fail:
            logger.warning("Mail dispatch failed", to=message.to, type=message.type.value)
            return DispatchResult(success=False, error="Mail dispatch disabled")

        self.outbox.append(message)
        message_id = f"local_{uuid4().hex[:12]}"
        logger.info("Mail queued", to=message.to, type=message.type.value, message_id=message_id)
        return DispatchResult(success=True, message_id=message_id)

    def clear(self) -> None:
        self.outbox.clear()


class BrevoMailer:
    def __init__(
        self,
        api_key: str,
        *,
        api_url: str = "https://api.brevo.com/v3/smtp/email",
        sender_email: str = "no-reply@trendies.co",
        sender_name: str = "Trendies",
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.sender = {"email": sender_email, "name": sender_name}
        self.client = client or httpx.Client(timeout=timeout)

    def build_payload(self, message: MailMessage) -> dict:
        payload: dict = {
            "sender": self.sender,
            "to": [{"email": message.to}],
            "subject": message.subject,
            "headers": {
                "X-Mailin-custom": json.dumps({"type": message.type.value, **message.metadata}, default=str),
            },
        }
        if message.template_id is not None:
            payload["templateId"] = message.template_id
            payload["params"] = message.params
        if message.html_content:
            payload["htmlContent"] = message.html_content
        if message.text_content:
            payload["textContent"] = message.text_content
        return payload

    def send(self, message: MailMessage) -> DispatchResult:
        try:
            response = self.client.post(
                self.api_url,
                json=self.build_payload(message),
                headers={"api-key": self.api_key, "accept": "application/json"},
            )
            response.raise_for_status()
            body = response.json() if response.content else {}
            message_id = body.get("messageId") if isinstance(body, dict) else None
        except httpx.HTTPStatusError as e:
            logger.error(
                "Brevo rejected message",
                to=message.to,
                type=message.type.value,
                status_code=e.response.status_code,
            )
            return DispatchResult(success=False, error=f"Brevo returned {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.error("Brevo request failed", to=message.to, type=message.type.value, error=str(e))
            return DispatchResult(success=False, error=str(e))
        except ValueError:
            # Accepted, but without a JSON receipt
            logger.warning("Brevo response had no JSON body", to=message.to, status_code=response.status_code)
            message_id = None

        logger.info("Mail sent", to=message.to, type=message.type.value, message_id=message_id)
        return DispatchResult(success=True, message_id=message_id)

    def close(self) -> None:
        self.client.close()
