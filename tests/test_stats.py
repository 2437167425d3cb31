# -*- coding: utf-8 -*-

from __future__ import annotations

import os
import shutil
import sys
import tempfile
import unittest
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from fastapi.testclient import TestClient


class TestResolveRange(unittest.TestCase):
    def setUp(self) -> None:
        from calorie_tracker.stats.storage import resolve_range

        self.resolve_range = resolve_range
        self.today = date(2026, 1, 29)

    def test_numeric_range(self) -> None:
        self.assertEqual(self.resolve_range("7", today=self.today), ("2026-01-22", "2026-01-29"))
        self.assertEqual(self.resolve_range("30", today=self.today), ("2025-12-30", "2026-01-29"))
        self.assertEqual(self.resolve_range("0", today=self.today), ("2026-01-29", "2026-01-29"))

    def test_all_range(self) -> None:
        self.assertEqual(self.resolve_range("ALL", today=self.today), ("2000-01-01", "2026-01-29"))
        self.assertEqual(self.resolve_range("all", today=self.today)[0], "2000-01-01")

    def test_huge_range_clamps_to_all(self) -> None:
        for huge in ("1000000", "99999999999"):
            self.assertEqual(self.resolve_range(huge, today=self.today), ("2000-01-01", "2026-01-29"))

    def test_invalid_range(self) -> None:
        for bad in ("week", "", "-3", "1.5"):
            with self.assertRaises(ValueError, msg=bad):
                self.resolve_range(bad, today=self.today)


class TestStatsSummary(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls._tmp = Path(tempfile.mkdtemp(prefix="tracker-test-"))
        os.environ["TRACKER_DATA_ROOT"] = str(cls._tmp)
        os.environ["TRACKER_DB_PATH"] = str(cls._tmp / "tracker.db")
        os.environ["TRACKER_FRONTEND_DIST"] = str(cls._tmp / "no-frontend")
        os.environ["JWT_SECRET"] = "test-secret"

        for name in list(sys.modules.keys()):
            if name == "calorie_tracker" or name.startswith("calorie_tracker."):
                sys.modules.pop(name, None)

        from calorie_tracker.api import app  # noqa: WPS433 (import inside test for env control)
        from calorie_tracker.auth.models import GoogleProfile
        from calorie_tracker.auth.security import create_access_token
        from calorie_tracker.auth.storage import upsert_google_user

        user, _ = upsert_google_user(GoogleProfile(email="stats@example.com"))
        other, _ = upsert_google_user(GoogleProfile(email="other@example.com"))
        cls.client = TestClient(app)
        cls.client.cookies.set("human_verified", "true")
        cls.client.cookies.set("auth_token", create_access_token(user))

        today = datetime.now(timezone.utc).date()
        cls.today = today.isoformat()
        cls.ten_days_ago = (today - timedelta(days=10)).isoformat()

        from calorie_tracker.app_db import db_conn

        rows = [
            # today: 500 food, 200 exercise stored negative, 100 exercise stored positive
            (user["id"], "FOOD", "lunch", 500, 30, cls.today),
            (user["id"], "EXERCISE", "run", -200, 0, cls.today),
            (user["id"], "EXERCISE", "walk", 100, 0, cls.today),
            (user["id"], "FOOD", "old dinner", 700, 40, cls.ten_days_ago),
            # one ISO week: Mon 2024-01-01 .. Sun 2024-01-07, then the next Monday
            (user["id"], "FOOD", "w1 mon", 1000, 10, "2024-01-01"),
            (user["id"], "FOOD", "w1 sun", 800, 5, "2024-01-07"),
            (user["id"], "FOOD", "w2 mon", 600, 7, "2024-01-08"),
            (other["id"], "FOOD", "not mine", 9999, 99, cls.today),
        ]
        with db_conn() as conn:
            conn.executemany(
                "INSERT INTO activity_logs (user_id, type, content, calories, protein, recorded_date) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                rows,
            )

    @classmethod
    def tearDownClass(cls) -> None:
        cls.client.close()
        shutil.rmtree(cls._tmp, ignore_errors=True)

    def test_daily_net_calories_last_week(self) -> None:
        resp = self.client.get("/api/stats/summary?range=7")
        self.assertEqual(resp.status_code, 200, resp.text)
        payload = resp.json()
        self.assertEqual(payload["end"], self.today)
        self.assertEqual(payload["group"], "day")
        self.assertEqual(len(payload["stats"]), 1)
        bucket = payload["stats"][0]
        self.assertEqual(bucket["recorded_date"], self.today)
        self.assertEqual(bucket["net_calories"], 200)
        self.assertEqual(bucket["food_calories"], 500)
        self.assertEqual(bucket["exercise_calories"], 300)
        self.assertEqual(bucket["total_protein"], 30)
        self.assertEqual(bucket["entry_count"], 3)

    def test_default_range_is_seven_days(self) -> None:
        payload = self.client.get("/api/stats/summary").json()
        self.assertEqual([b["recorded_date"] for b in payload["stats"]], [self.today])

    def test_longer_range_includes_older_days_in_order(self) -> None:
        payload = self.client.get("/api/stats/summary?range=30").json()
        self.assertEqual([b["recorded_date"] for b in payload["stats"]], [self.ten_days_ago, self.today])

    def test_weekly_grouping(self) -> None:
        payload = self.client.get("/api/stats/summary?range=ALL&group=week").json()
        self.assertEqual(payload["start"], "2000-01-01")
        weeks = {b["recorded_date"]: b for b in payload["stats"]}
        self.assertEqual(weeks["2024-01-01"]["food_calories"], 1800)
        self.assertEqual(weeks["2024-01-01"]["entry_count"], 2)
        self.assertEqual(weeks["2024-01-08"]["net_calories"], 600)
        ordered = [b["recorded_date"] for b in payload["stats"]]
        self.assertEqual(ordered, sorted(ordered))

    def test_huge_range_behaves_like_all(self) -> None:
        resp = self.client.get("/api/stats/summary?range=1000000")
        self.assertEqual(resp.status_code, 200, resp.text)
        payload = resp.json()
        self.assertEqual(payload["start"], "2000-01-01")
        self.assertIn("2024-01-01", [b["recorded_date"] for b in payload["stats"]])

    def test_invalid_range_is_400(self) -> None:
        resp = self.client.get("/api/stats/summary?range=forever")
        self.assertEqual(resp.status_code, 400)

    def test_invalid_group_is_422(self) -> None:
        resp = self.client.get("/api/stats/summary?group=month")
        self.assertEqual(resp.status_code, 422)


if __name__ == "__main__":
    unittest.main()
