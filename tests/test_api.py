"""
Tests for the HTTP lookup endpoints.
"""

import asyncio
import shutil
import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

from emojilist.core.dependencies import get_emoji_service
from emojilist.main import app
from tests.fixtures import FLAG_GERMANY, SAMPLE_GLYPHS, RecordingHandler, make_service


class ApiTestCase(unittest.TestCase):

    def setUp(self):
        self.root = Path(tempfile.mkdtemp())
        self.handler = RecordingHandler()
        self.service = make_service(self.root, self.handler)
        app.dependency_overrides[get_emoji_service] = lambda: self.service
        # No context manager: the startup hook (auto_initialize) must not run
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        shutil.rmtree(self.root, ignore_errors=True)

    def load(self):
        asyncio.run(self.service.refresh())


class TestEndpointsWithoutData(ApiTestCase):

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_lookups_unavailable(self):
        for url in ("/emoji/lookup?glyph=%F0%9F%98%80", "/emoji/check?glyph=x", "/emoji/list", "/emoji/groups"):
            with self.subTest(url=url):
                response = self.client.get(url)
                self.assertEqual(response.status_code, 503)
                self.assertIn("No emoji data", response.json()["detail"])

    def test_status(self):
        response = self.client.get("/emoji/status")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"has_data": False, "last_update": None, "groups": 0, "emoji": 0})


class TestEndpointsWithData(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.load()

    def test_lookup(self):
        response = self.client.get("/emoji/lookup", params={"glyph": FLAG_GERMANY})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {
            "Name": "flag: Germany",
            "Emoji": FLAG_GERMANY,
            "Specification": "E2.0",
            "Qualifier": 1,
            "CodePoints": [0x1F1E9, 0x1F1EA],
        })

    def test_lookup_unknown(self):
        response = self.client.get("/emoji/lookup", params={"glyph": "A"})
        self.assertEqual(response.status_code, 404)

    def test_check(self):
        response = self.client.get("/emoji/check", params={"glyph": FLAG_GERMANY})
        self.assertEqual(response.json(), {"glyph": FLAG_GERMANY, "is_emoji": True})
        response = self.client.get("/emoji/check", params={"glyph": "abc"})
        self.assertEqual(response.json(), {"glyph": "abc", "is_emoji": False})

    def test_list(self):
        self.assertEqual(self.client.get("/emoji/list").json(), SAMPLE_GLYPHS)

    def test_groups(self):
        groups = self.client.get("/emoji/groups").json()
        self.assertEqual([g["Name"] for g in groups], ["Smileys & Emotion", "Flags", "Component"])
        first = groups[0]["Subgroups"][0]
        self.assertEqual(first["Name"], "face-smiling")
        self.assertEqual(first["Emoji"][0]["Name"], "grinning face")

    def test_refresh(self):
        response = self.client.post("/emoji/refresh")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"updated": True, "emoji": 7})
        self.assertEqual(self.handler.requests, 2)
        self.assertTrue(self.service.settings.cache_path().is_file())

    def test_refresh_failure(self):
        self.handler.status_code = 500
        response = self.client.post("/emoji/refresh")
        self.assertEqual(response.status_code, 502)
        # previous data is still served
        self.assertEqual(self.client.get("/emoji/list").json(), SAMPLE_GLYPHS)


if __name__ == "__main__":
    unittest.main()
