"""HTTP tests for the Cyclefit API routes."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from cyclefit.config import Settings, get_settings
from cyclefit.main import create_app

PROFILE = {"cycle_length": 28, "period_length": 5, "last_cycle_start": "2026-03-01"}


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(create_app()) as test_client:
        yield test_client


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["planning_config"] == "1.0"


class TestCycleRoutes:
    def test_phase_for_date(self, client: TestClient) -> None:
        response = client.post("/api/v1/cycle/phase", json={"profile": PROFILE, "date": "2026-03-15"})
        assert response.status_code == 200
        body = response.json()
        assert body["phase"] == "ovulatory"
        assert body["cycle_day"] == 15
        assert body["is_moon_based"] is False
        assert body["display_name"] == "Ovulatory"

    def test_phase_without_cycle_start(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/cycle/phase", json={"profile": {"cycle_length": 30}, "date": "2026-03-15"}
        )
        assert response.json()["phase"] == "follicular"
        assert response.json()["cycle_day"] is None

    def test_predictions(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/cycle/predictions",
            json={"profile": {**PROFILE, "is_irregular": True}, "today": "2026-03-10"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["model_used"] == "calendar"
        assert body["predicted_starts"] == ["2026-03-29", "2026-04-26", "2026-05-24"]
        assert len(body["widening_window"]) == 27
        assert len(body["daily_phase_table"]) == 92
        assert body["daily_phase_table"][0] == {
            "date": "2026-03-10",
            "phase": "follicular",
            "is_widening_window": False,
        }

    def test_cycles_ahead_bounds(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/cycle/predictions", json={"profile": PROFILE, "cycles_ahead": 0}
        )
        assert response.status_code == 422


class TestFitnessPlanRoute:
    def test_generates_fourteen_days(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/fitness-plan", json={"profile": PROFILE, "start_date": "2026-03-02"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["start_date"] == "2026-03-02"
        assert len(body["entries"]) == 14
        assert body["summary"] == {"workout": 8, "meditation": 2, "rest": 4}
        first = body["entries"][0]
        assert first["title"] == "Gentle Walk & Stretch"
        assert first["catalog_id"] == "c-002"
        assert first["status"] == "suggested"
        assert first["phase"] == "menstrual"

    def test_tomorrow_choice(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/fitness-plan",
            json={"profile": PROFILE, "plan_start_choice": "tomorrow", "today": "2026-03-01"},
        )
        assert response.json()["start_date"] == "2026-03-02"

    def test_preferences_applied(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/fitness-plan",
            json={
                "profile": PROFILE,
                "start_date": "2026-03-02",
                "preferences": {
                    "workout_frequency": 3,
                    "preferred_rest_days": ["Sunday"],
                    "custom_workouts": [{"name": "Trail Run", "activity_type": "Run"}],
                },
            },
        )
        body = response.json()
        assert body["summary"]["workout"] == 6
        assert body["entries"][6]["day_type"] != "workout"

    @pytest.mark.parametrize(
        "preferences",
        [
            {"workout_frequency": 7},
            {"workout_frequency": 0},
            {"preferred_rest_days": ["Funday"]},
        ],
    )
    def test_invalid_preferences(self, client: TestClient, preferences: dict) -> None:
        response = client.post(
            "/api/v1/fitness-plan", json={"profile": PROFILE, "preferences": preferences}
        )
        assert response.status_code == 422

    def test_missing_catalog_is_503(self, tmp_path: Path) -> None:
        app = create_app()
        app.dependency_overrides[get_settings] = lambda: Settings(catalog_path=tmp_path / "none.json")
        with TestClient(app) as test_client:
            response = test_client.post(
                "/api/v1/fitness-plan", json={"profile": PROFILE, "start_date": "2026-03-02"}
            )
        assert response.status_code == 503


class TestRaceTrainingRoute:
    def test_generates_weekly_blocks(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/race-training-plan",
            json={
                "race_type": "10K",
                "race_date": "2026-05-10",
                "training_start_date": "2026-03-01",
                "goal": "Finish strong",
            },
        )
        assert response.status_code == 200
        body = response.json()
        assert body["total_weeks"] == 10
        assert len(body["weekly_plans"]) == 10
        assert body["weekly_plans"][3]["is_down_week"] is True
        first_day = body["weekly_plans"][0]["daily_plans"][0]
        assert first_day["workout_type"] == "easy_run"
        assert first_day["workout"]["distance_miles"] == 3.0
        assert first_day["cycle_phase"] == "menstrual"

    def test_race_before_start_is_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/race-training-plan",
            json={"race_type": "5K", "race_date": "2026-02-01", "training_start_date": "2026-03-01"},
        )
        assert response.status_code == 422
