import json
import os
import sys
import unittest

import httpx

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from contact.client import SEND_ERROR, SENT_OK, ContactClient, ContactInfo  # noqa: E402
from db.models import ContactMessage  # noqa: E402
from utils.config import Settings  # noqa: E402

ENDPOINT = "https://script.example.com/contact"

MESSAGE = ContactMessage(
    name="Ana Bravo", email="ana@example.com", phone="", message="¿Tienen quinoa?"
)


class ContactClientTestCase(unittest.IsolatedAsyncioTestCase):
    async def _send(self, handler):
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await ContactClient(ENDPOINT, client=client).send(MESSAGE)

    async def test_posts_json_and_reports_success(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True, "message": "¡Gracias!"})

        result = await self._send(handler)
        self.assertTrue(result.ok)
        self.assertEqual(result.value, "¡Gracias!")
        self.assertEqual(seen["method"], "POST")
        self.assertEqual(seen["body"], MESSAGE.to_dict())

    async def test_endpoint_rejection_uses_its_message(self):
        result = await self._send(
            lambda request: httpx.Response(
                200, json={"success": False, "message": "Quota exceeded"}
            )
        )
        self.assertFalse(result.ok)
        self.assertEqual(result.error, "Quota exceeded")

    async def test_http_and_body_errors(self):
        for response in (
            httpx.Response(500),
            httpx.Response(200, text="<html>oops</html>"),
            httpx.Response(200, json=["unexpected"]),
        ):
            result = await self._send(lambda request, r=response: r)
            self.assertFalse(result.ok)
            self.assertEqual(result.error, SEND_ERROR)

    async def test_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        result = await self._send(handler)
        self.assertEqual(result.error, SEND_ERROR)

    async def test_without_endpoint_only_logs(self):
        result = await ContactClient(None).send(MESSAGE)
        self.assertTrue(result.ok)
        self.assertEqual(result.value, SENT_OK)


class ContactInfoTestCase(unittest.TestCase):
    def test_links(self):
        info = ContactInfo.from_settings(
            Settings(
                phone_number="+57 300 123 4567",
                email="hola@organi.live",
                whatsapp_number="573001234567",
            )
        )
        self.assertEqual(info.tel_link, "tel:+57 300 123 4567")
        self.assertEqual(info.mailto_link, "mailto:hola@organi.live")
        self.assertEqual(
            info.whatsapp_link("Hola mundo"), "https://wa.me/573001234567?text=Hola%20mundo"
        )

    def test_missing_values_give_no_links(self):
        info = ContactInfo()
        self.assertIsNone(info.tel_link)
        self.assertIsNone(info.mailto_link)
        self.assertIsNone(info.whatsapp_link())


if __name__ == "__main__":
    unittest.main()
