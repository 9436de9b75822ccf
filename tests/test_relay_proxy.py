from __future__ import annotations

import asyncio
import unittest

import aiohttp

from execution.outcomes import FailureKind
from project_settings import RelaySettings
from webapp.relay import (
    CONFIG_ERROR_MESSAGE,
    FORWARD_FALLBACK_MESSAGE,
    UPSTREAM_FALLBACK_MESSAGE,
    RelayProxy,
)

from aiohttp_fakes import FakeSessionFactory

PAYLOAD = {"orders": [{"instrumentId": 1, "side": "b", "size": "2"}], "expiresAfter": 1}


def _backend(url: str | None = "http://backend.local/api/"):
    return lambda: RelaySettings(backend_url=url)


class RelayProxyTestCase(unittest.IsolatedAsyncioTestCase):
    async def test_missing_backend_url_makes_no_network_call(self) -> None:
        factory = FakeSessionFactory()
        proxy = RelayProxy(settings_loader=_backend(None), session_factory=factory)

        result = await proxy.forward(PAYLOAD)

        self.assertEqual(result.status_code, 500)
        self.assertEqual(result.body, {"error": "TRADING_BACKEND_URL is not set on the server."})
        self.assertEqual(result.body["error"], CONFIG_ERROR_MESSAGE)
        self.assertEqual(result.to_outcome().kind, FailureKind.MISCONFIGURED)
        self.assertEqual(factory.calls, 0)

    async def test_payload_forwarded_unmodified_as_json(self) -> None:
        factory = FakeSessionFactory(status=200, body={"ok": True})
        proxy = RelayProxy(settings_loader=_backend(), session_factory=factory)

        await proxy.forward(PAYLOAD)

        request = factory.requests[0]
        self.assertEqual(request["url"], "http://backend.local/place-order")
        self.assertEqual(request["json"], PAYLOAD)
        self.assertEqual(factory.session_kwargs[0]["headers"]["Content-Type"], "application/json")

    async def test_upstream_error_message_propagated(self) -> None:
        factory = FakeSessionFactory(status=400, body=b'{"error":"bad size"}')
        proxy = RelayProxy(settings_loader=_backend(), session_factory=factory)

        result = await proxy.forward(PAYLOAD)

        self.assertEqual(result.status_code, 400)
        self.assertEqual(result.body, {"error": "bad size"})
        self.assertIsNone(result.raw)
        outcome = result.to_outcome()
        self.assertEqual(outcome.kind, FailureKind.UPSTREAM_REJECTED)
        self.assertEqual(outcome.message, "bad size")

    async def test_unparsable_upstream_error_uses_fallback(self) -> None:
        for body in (b"", b"<html>Bad Gateway</html>"):
            with self.subTest(body=body):
                factory = FakeSessionFactory(status=502, body=body)
                proxy = RelayProxy(settings_loader=_backend(), session_factory=factory)
                result = await proxy.forward(PAYLOAD)
                self.assertEqual(result.status_code, 502)
                self.assertEqual(result.body, {"error": UPSTREAM_FALLBACK_MESSAGE})

    async def test_success_passes_upstream_bytes_verbatim(self) -> None:
        raw = b'{"status": "ok",  "oid": 9}'
        factory = FakeSessionFactory(status=200, body=raw)
        proxy = RelayProxy(settings_loader=_backend(), session_factory=factory)

        result = await proxy.forward(PAYLOAD)

        self.assertEqual(result.status_code, 200)
        self.assertEqual(result.raw, raw)
        self.assertEqual(result.body, {"status": "ok", "oid": 9})
        self.assertTrue(result.to_outcome().ok)

    async def test_unparsable_success_body_becomes_empty_object(self) -> None:
        factory = FakeSessionFactory(status=200, body=b"accepted")
        proxy = RelayProxy(settings_loader=_backend(), session_factory=factory)
        result = await proxy.forward(PAYLOAD)
        self.assertEqual(result.status_code, 200)
        self.assertEqual(result.body, {})
        self.assertIsNone(result.raw)

    async def test_empty_success_body_is_answered_as_200(self) -> None:
        for status in (201, 204):
            with self.subTest(status=status):
                factory = FakeSessionFactory(status=status, body=b"")
                proxy = RelayProxy(settings_loader=_backend(), session_factory=factory)
                result = await proxy.forward(PAYLOAD)
                self.assertEqual(result.status_code, 200)
                self.assertEqual(result.body, {})
                self.assertIsNone(result.raw)

    def test_misconfigured_helper(self) -> None:
        refused = RelayProxy(settings_loader=_backend(None)).misconfigured()
        assert refused is not None
        self.assertEqual(refused.status_code, 500)
        self.assertEqual(refused.body, {"error": CONFIG_ERROR_MESSAGE})
        self.assertIsNone(RelayProxy(settings_loader=_backend()).misconfigured())

    async def test_network_failure_becomes_500_envelope(self) -> None:
        factory = FakeSessionFactory(error=aiohttp.ClientConnectionError("backend unreachable"))
        proxy = RelayProxy(settings_loader=_backend(), session_factory=factory)
        result = await proxy.forward(PAYLOAD)
        self.assertEqual(result.status_code, 500)
        self.assertEqual(result.body, {"error": "backend unreachable"})

    async def test_timeout_without_message_uses_fallback(self) -> None:
        factory = FakeSessionFactory(error=asyncio.TimeoutError())
        proxy = RelayProxy(settings_loader=_backend(), session_factory=factory)
        result = await proxy.forward(PAYLOAD)
        self.assertEqual(result.status_code, 500)
        self.assertEqual(result.body, {"error": FORWARD_FALLBACK_MESSAGE})
        self.assertEqual(result.to_outcome().kind, FailureKind.NETWORK_TIMEOUT)


if __name__ == "__main__":
    unittest.main()
