"""Tests for WebhookNotifier scheduling, delivery and failure handling."""

import json
import unittest

import httpx

from adapter.external.notifier import WebhookNotifier

URL = "https://relay.example.com/notify"


class TestWebhookNotifier(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.requests = []
        self.scheduled = []

    def _notifier(self, handler=None) -> WebhookNotifier:
        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return httpx.Response(202)

        return WebhookNotifier(
            URL,
            schedule=lambda func, *args: self.scheduled.append((func, args)),
            transport=httpx.MockTransport(handler or record),
        )

    async def _run_scheduled(self):
        for func, args in self.scheduled:
            await func(*args)

    async def test_send_only_schedules_delivery(self):
        self._notifier().send_email_verification("ada@example.com", "s3cr3t")

        self.assertEqual(len(self.scheduled), 1)
        self.assertEqual(self.requests, [])

    async def test_posts_email_payload(self):
        self._notifier().send_email_verification("ada@example.com", "s3cr3t")
        await self._run_scheduled()

        self.assertEqual(len(self.requests), 1)
        self.assertEqual(str(self.requests[0].url), URL)
        self.assertEqual(json.loads(self.requests[0].content), {
            "channel": "email",
            "destination": "ada@example.com",
            "template": "email_verification",
            "secret": "s3cr3t",
        })

    async def test_posts_sms_payload(self):
        self._notifier().send_phone_code("+15550100", "123456")
        await self._run_scheduled()

        body = json.loads(self.requests[0].content)
        self.assertEqual(body["channel"], "sms")
        self.assertEqual(body["secret"], "123456")

    async def test_relay_error_is_logged_not_raised(self):
        self._notifier(lambda r: httpx.Response(500)).send_email_verification("ada@example.com", "s3cr3t")

        with self.assertLogs('adapter.external.notifier', level='WARNING'):
            await self._run_scheduled()

    async def test_unreachable_relay_is_logged_not_raised(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        self._notifier(handler).send_phone_code("+15550100", "123456")

        with self.assertLogs('adapter.external.notifier', level='WARNING'):
            await self._run_scheduled()


if __name__ == '__main__':
    unittest.main()
