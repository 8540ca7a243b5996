"""Outbound delivery of verification secrets.

WebhookNotifier posts each message to a relay (mail/SMS gateway) configured
through NOTIFY_WEBHOOK_URL. LoggingNotifier is the development fallback and
only records that a message would have been sent.

Both are fire-and-forget: a failed delivery is logged, never raised.
WebhookNotifier does not deliver inline. Each send hands an async POST to
``schedule`` (FastAPI's ``BackgroundTasks.add_task`` in the API), so the
request never waits on the relay.
"""

import logging
from typing import Any, Callable

import httpx

logger = logging.getLogger(__name__)

API_TIMEOUT_SECONDS = 5.0

Scheduler = Callable[..., Any]


class WebhookNotifier:
    def __init__(
        self,
        url: str,
        schedule: Scheduler,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self._schedule = schedule
        self._transport = transport

    def send_email_verification(self, email: str, secret: str) -> None:
        self._schedule(self.deliver, {
            "channel": "email",
            "destination": email,
            "template": "email_verification",
            "secret": secret,
        })

    def send_phone_code(self, phone_number: str, code: str) -> None:
        self._schedule(self.deliver, {
            "channel": "sms",
            "destination": phone_number,
            "template": "phone_verification",
            "secret": code,
        })

    async def deliver(self, payload: dict) -> None:
        """POST one message to the relay. Errors are logged and dropped."""
        try:
            async with httpx.AsyncClient(timeout=API_TIMEOUT_SECONDS, transport=self._transport) as client:
                response = await client.post(self.url, json=payload)
                response.raise_for_status()
            logger.info("Notification dispatched", extra={"channel": payload["channel"]})
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Notification relay rejected message",
                extra={"channel": payload["channel"], "status_code": e.response.status_code},
            )
        except httpx.RequestError as e:
            logger.warning(
                "Notification relay unreachable",
                extra={"channel": payload["channel"], "error_type": type(e).__name__},
            )


class LoggingNotifier:
    def send_email_verification(self, email: str, secret: str) -> None:
        logger.info("Email verification would be sent", extra={"destination": email})

    def send_phone_code(self, phone_number: str, code: str) -> None:
        logger.info("Phone verification code would be sent", extra={"destination": phone_number})
