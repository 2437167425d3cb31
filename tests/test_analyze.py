# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import httpx
from fastapi.testclient import TestClient


def _gemini_reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class TestModelOutputParsing(unittest.TestCase):
    def setUp(self) -> None:
        from calorie_tracker.analyze import gemini

        self.gemini = gemini

    def test_strips_markdown_fences(self) -> None:
        raw = '```json\n{"items": []}\n```'
        self.assertEqual(self.gemini.strip_code_fences(raw), '{"items": []}')
        self.assertEqual(self.gemini.parse_model_output(raw), {"items": []})

    def test_tolerates_prose_around_object(self) -> None:
        raw = 'Sure! Here you go: {"items": [{"type": "FOOD", "name": "사과", "calories": 95}]} Enjoy.'
        parsed = self.gemini.parse_model_output(raw)
        self.assertEqual(parsed["items"][0]["name"], "사과")

    def test_bare_list_becomes_items(self) -> None:
        parsed = self.gemini.parse_model_output('[{"type": "FOOD", "name": "bread", "calories": 200}]')
        self.assertEqual(len(parsed["items"]), 1)

    def test_unparseable_output_raises(self) -> None:
        for raw in ("not json at all", "{broken", '"just a string"'):
            with self.assertRaises(self.gemini.GeminiError, msg=raw) as ctx:
                self.gemini.parse_model_output(raw)
            self.assertEqual(str(ctx.exception), "Failed to parse AI response")

    def test_normalize_items(self) -> None:
        items = self.gemini.normalize_items(
            {
                "items": [
                    {"type": "food", "name": " 김밥 ", "calories": "350 kcal", "protein": "9g", "category": "lunch"},
                    {"type": "EXERCISE", "name": "수영", "calories": 400, "protein": None, "category": "MORNING_EXERCISE"},
                    {"name": "요가", "calories": -120, "category": "STRETCH"},
                    {"type": "FOOD", "name": "", "calories": -50, "protein": -3},
                    "garbage",
                ]
            }
        )
        self.assertEqual(len(items), 4)

        kimbap, swim, yoga, unnamed = items
        self.assertEqual(kimbap.type.value, "FOOD")
        self.assertEqual(kimbap.name, "김밥")
        self.assertEqual(kimbap.calories, 350.0)
        self.assertEqual(kimbap.protein, 9.0)
        self.assertEqual(kimbap.category.value, "LUNCH")

        self.assertEqual(swim.calories, -400.0)
        self.assertEqual(swim.protein, 0.0)

        self.assertEqual(yoga.type.value, "EXERCISE")
        self.assertEqual(yoga.category.value, "OTHER")

        self.assertEqual(unnamed.name, "unknown")
        self.assertEqual(unnamed.calories, 50.0)
        self.assertEqual(unnamed.protein, 0.0)

    def test_missing_items_key(self) -> None:
        self.assertEqual(self.gemini.normalize_items({"foods": []}), [])

    def test_prompt_embeds_text(self) -> None:
        prompt = self.gemini.build_prompt('ate {two} "eggs"')
        self.assertIn('Text: "ate {two} "eggs""', prompt)
        self.assertIn('"items": [', prompt)


class TestGeminiCall(unittest.TestCase):
    def setUp(self) -> None:
        from calorie_tracker.analyze import gemini

        self.gemini = gemini
        patcher = mock.patch.object(gemini.settings, "gemini_api_key", "test-key")
        patcher.start()
        self.addCleanup(patcher.stop)

    def _client(self, handler) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        self.addCleanup(client.close)
        return client

    def test_successful_call(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            text = '```json\n{"items": [{"type": "FOOD", "name": "라면", "calories": 500, "protein": 10, "category": "DINNER"}]}\n```'
            return httpx.Response(200, json=_gemini_reply(text))

        result = self.gemini.analyze_text("ramen for dinner", client=self._client(handler))

        self.assertIn(":generateContent", seen["url"])
        self.assertIn("key=test-key", seen["url"])
        self.assertIn("ramen for dinner", seen["body"]["contents"][0]["parts"][0]["text"])
        self.assertEqual(len(result.items), 1)
        self.assertEqual(result.items[0].name, "라면")
        self.assertEqual(result.items[0].category.value, "DINNER")

    def test_provider_error_message_is_surfaced(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": {"code": 400, "message": "API key not valid."}})

        with self.assertRaises(self.gemini.GeminiError) as ctx:
            self.gemini.analyze_text("x", client=self._client(handler))
        self.assertEqual(str(ctx.exception), "API key not valid.")

    def test_no_candidates(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"candidates": []})

        with self.assertRaises(self.gemini.GeminiError) as ctx:
            self.gemini.analyze_text("x", client=self._client(handler))
        self.assertIn("No text generated", str(ctx.exception))

    def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with self.assertRaises(self.gemini.GeminiError):
            self.gemini.analyze_text("x", client=self._client(handler))

    def test_missing_api_key(self) -> None:
        with mock.patch.object(self.gemini.settings, "gemini_api_key", None):
            with self.assertRaises(self.gemini.GeminiConfigError):
                self.gemini.analyze_text("x")


class TestAnalyzeEndpoint(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls._tmp = Path(tempfile.mkdtemp(prefix="tracker-test-"))
        os.environ["TRACKER_DATA_ROOT"] = str(cls._tmp)
        os.environ["TRACKER_DB_PATH"] = str(cls._tmp / "tracker.db")
        os.environ["TRACKER_FRONTEND_DIST"] = str(cls._tmp / "no-frontend")
        os.environ["JWT_SECRET"] = "test-secret"
        os.environ.pop("GEMINI_API_KEY", None)

        for name in list(sys.modules.keys()):
            if name == "calorie_tracker" or name.startswith("calorie_tracker."):
                sys.modules.pop(name, None)

        from calorie_tracker.api import app  # noqa: WPS433 (import inside test for env control)
        from calorie_tracker.auth.models import GoogleProfile
        from calorie_tracker.auth.security import create_access_token
        from calorie_tracker.auth.storage import upsert_google_user

        user, _ = upsert_google_user(GoogleProfile(email="eater@example.com"))
        cls.app = app
        cls.client = TestClient(app)
        cls.client.cookies.set("human_verified", "true")
        cls.client.cookies.set("auth_token", create_access_token(user))

    @classmethod
    def tearDownClass(cls) -> None:
        cls.client.close()
        shutil.rmtree(cls._tmp, ignore_errors=True)

    def test_requires_session(self) -> None:
        anon = TestClient(self.app)
        anon.cookies.set("human_verified", "true")
        self.assertEqual(anon.post("/api/analyze", json={"text": "apple"}).status_code, 401)
        anon.close()

    def test_missing_text(self) -> None:
        for body in ({"text": "   "}, {}):
            resp = self.client.post("/api/analyze", json=body)
            self.assertEqual(resp.status_code, 400)
            self.assertEqual(resp.json()["detail"], "Missing text input")

    def test_missing_api_key_is_500(self) -> None:
        resp = self.client.post("/api/analyze", json={"text": "apple"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["detail"], "Server configuration error: Missing Gemini API Key")

    def test_success(self) -> None:
        from calorie_tracker.analyze.models import AnalyzeResponse

        result = AnalyzeResponse.model_validate(
            {"items": [{"type": "FOOD", "name": "사과", "calories": 95, "protein": 0, "category": "SNACK"}]}
        )
        with mock.patch("calorie_tracker.analyze.api.analyze_text", return_value=result) as analyze:
            resp = self.client.post("/api/analyze", json={"text": "  an apple  "})
        analyze.assert_called_once_with("an apple")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["items"][0]["name"], "사과")
        self.assertEqual(resp.json()["items"][0]["category"], "SNACK")

    def test_upstream_failure_is_502(self) -> None:
        from calorie_tracker.analyze.gemini import GeminiError

        with mock.patch(
            "calorie_tracker.analyze.api.analyze_text",
            side_effect=GeminiError("Failed to parse AI response"),
        ):
            resp = self.client.post("/api/analyze", json={"text": "apple"})
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json()["detail"], "Failed to parse AI response")


if __name__ == "__main__":
    unittest.main()
