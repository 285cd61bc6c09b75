"""
HTTP-level tests: routes wired with a fake model, a fake profile store and a
temp-dir local cache.
"""
import asyncio

import pytest
from fastapi.testclient import TestClient

from conftest import FakeProfileStore
from nextgenfit.core import config
from nextgenfit.dependencies import get_generator, get_local_cache, get_profile_store
from nextgenfit.main import app
from nextgenfit.core.exceptions import GenerationCancelled
from nextgenfit.crud.routine import RoutinePersistence
from nextgenfit.routers.plan import cancel_on_disconnect, generate_plan, resolve_day
from nextgenfit.schemas.plan import GeneratePlanRequest
from nextgenfit.schemas.user import UserProfile
from nextgenfit.utils.jwt_handler import create_access_token
from nextgenfit.utils.local_cache import ROUTINE_KEY


class StatusError(Exception):
    def __init__(self, message, status_code):
        super().__init__(message)
        self.status_code = status_code


class FakeModel:
    """Plays the generation backend: per-model canned text or exception."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    async def __call__(self, model, prompt):
        self.calls.append(model)
        result = self.responses[model]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def store():
    return FakeProfileStore()


@pytest.fixture
def model(plan_json):
    return FakeModel({"gemini-2.0-flash": StatusError("404 Not Found", 404), "gemini-1.5-flash": f"```json\n{plan_json}\n```"})


@pytest.fixture
def client(local_cache, store, model, monkeypatch):
    monkeypatch.setattr(config, "GENERATION_MODELS", ["gemini-2.0-flash", "gemini-1.5-flash"])
    app.dependency_overrides[get_local_cache] = lambda: local_cache
    app.dependency_overrides[get_profile_store] = lambda: store
    app.dependency_overrides[get_generator] = lambda: model
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {create_access_token({'sub': 'u1'})}"}


def test_generate_plan_anonymous(client, model, store, local_cache):
    response = client.post("/plans/generate", json={"preferences": {"training_days": 4, "session_duration": "45 min"}})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["model"] == "gemini-1.5-flash"
    assert [d["day_name"] for d in body["plan"]["days"]][0] == "Montag"
    assert len(body["plan"]["days"]) == 7
    assert body["persistence"] == {"success": True, "local_saved": True, "remote_saved": None, "warning": None}
    assert model.calls == ["gemini-2.0-flash", "gemini-1.5-flash"]
    assert local_cache.get(ROUTINE_KEY)["days"][6]["day_name"] == "Sonntag"
    assert store.calls == []


def test_generate_plan_authenticated_saves_remote(client, store, auth_headers):
    response = client.post("/plans/generate", json={}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["persistence"]["remote_saved"] is True
    assert store.records["u1"]["workout_routine"]["days"][0]["title"] == "Push Day"


def test_generate_plan_remote_failure_still_succeeds(client, store, auth_headers):
    store.fail_writes = True

    response = client.post("/plans/generate", json={}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["persistence"]["warning"] == "Saved locally only"


def test_quota_exhaustion_is_actionable(client, model):
    model.responses = {
        "gemini-2.0-flash": StatusError("429 quota", 429),
        "gemini-1.5-flash": StatusError("429 quota", 429),
    }

    response = client.post("/plans/generate", json={})

    assert response.status_code == 429
    body = response.json()
    assert body["success"] is False
    assert body["kind"] == "quota_exceeded"
    assert "try again later" in body["hint"]
    assert "429 quota" not in body["error"]


def test_malformed_model_output(client, model):
    model.responses["gemini-1.5-flash"] = "Sorry, I can't do that."

    response = client.post("/plans/generate", json={})

    assert response.status_code == 502
    assert response.json()["kind"] == "malformed_response"


def test_invalid_preferences_rejected(client):
    response = client.post("/plans/generate", json={"preferences": {"training_days": 9}})
    assert response.status_code == 422

    response = client.post("/plans/generate", json={"preferences": {"extra_constraints": "x" * 101}})
    assert response.status_code == 422


def test_read_and_delete_plan(client):
    assert client.get("/plans").status_code == 404

    client.post("/plans/generate", json={})
    assert client.get("/plans").json()["workout_routine"]["days"][0]["day_name"] == "Montag"

    response = client.delete("/plans")
    assert response.status_code == 200
    assert response.json()["local_saved"] is True
    assert client.get("/plans").status_code == 404


def test_day_detail(client):
    client.post("/plans/generate", json={})

    response = client.get("/plans/days/2")

    assert response.status_code == 200
    assert response.json()["day_name"] == "Mittwoch"
    assert response.json()["title"] == "Pull Day"


@pytest.mark.parametrize("index", ["9", "-1", "monday"])
def test_day_detail_out_of_range_redirects(client, index):
    client.post("/plans/generate", json={})

    response = client.get(f"/plans/days/{index}", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == config.DAY_DETAIL_FALLBACK_URL


def test_day_detail_without_plan_redirects(client):
    response = client.get("/plans/days/0", follow_redirects=False)
    assert response.status_code == 307


def test_resolve_day_handles_missing_plan():
    assert resolve_day(None, 0) is None
    assert resolve_day(UserProfile(age=25), 0) is None
    assert resolve_day(UserProfile(), "x") is None


def test_onboarding_step_and_submit(client, store, auth_headers):
    response = client.post("/onboarding/step", json={"state": {"step": 1}, "action": "next"})
    assert response.json()["state"]["step"] == 2
    assert response.json()["step_valid"] is False

    response = client.post("/onboarding/step", json={"state": {"step": "9"}, "action": "next"})
    assert response.status_code == 400

    payload = {"units": "metric", "gender": "male", "age": "35", "weight": "80", "height": "182", "goal": "endurance"}
    response = client.post("/onboarding", json=payload, headers=auth_headers)
    assert response.status_code == 200
    assert store.records["u1"]["age"] == 35


def test_plan_selection_requires_login(client, auth_headers, store):
    response = client.post("/onboarding/plan-selection", json={"plan_id": "pro"})
    assert response.status_code == 401
    assert response.json()["kind"] == "not_authenticated"

    response = client.post("/onboarding/plan-selection", json={"plan_id": "pro"}, headers=auth_headers)
    assert response.status_code == 200
    assert store.records["u1"]["selected_plan"] == "pro"


def test_profile_me_requires_token(client):
    assert client.get("/profile/me").status_code == 401
    assert client.get("/profile/me", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401


@pytest.fixture
def per_client_app(tmp_path, store, model, monkeypatch):
    # real get_local_cache: namespaces come from the request
    monkeypatch.setattr(config, "GENERATION_MODELS", ["gemini-2.0-flash", "gemini-1.5-flash"])
    monkeypatch.setattr(config, "LOCAL_CACHE_DIR", str(tmp_path))
    app.dependency_overrides[get_profile_store] = lambda: store
    app.dependency_overrides[get_generator] = lambda: model
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_clients_without_id_do_not_share_a_cache(per_client_app):
    response = per_client_app.post("/plans/generate", json={})
    assert response.status_code == 200
    assert response.json()["persistence"]["local_saved"] is False
    assert response.json()["persistence"]["warning"] == "No local cache for this client"

    # a second anonymous client sees nothing
    assert per_client_app.get("/plans").status_code == 404


def test_authenticated_user_never_gets_another_clients_plan(per_client_app, store, auth_headers):
    per_client_app.post("/plans/generate", json={}, headers={"X-Client-Id": "device-a"})
    assert per_client_app.get("/plans", headers={"X-Client-Id": "device-a"}).status_code == 200
    store.records["u1"] = {"user_id": "u1", "age": 40, "workout_routine": None}

    response = per_client_app.get("/plans", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["age"] == 40
    assert response.json()["workout_routine"] is None
    assert per_client_app.get("/plans", headers={"X-Client-Id": "device-b"}).status_code == 404


def test_logged_in_user_without_client_id_gets_own_cache(per_client_app, store, auth_headers):
    store.fail_writes = True

    response = per_client_app.post("/plans/generate", json={}, headers=auth_headers)

    assert response.json()["persistence"]["local_saved"] is True
    assert per_client_app.get("/plans", headers=auth_headers).json()["workout_routine"]["days"][0]["day_name"] == "Montag"


class GoneRequest:
    """Request whose client has already hung up."""

    async def is_disconnected(self):
        return True


class SlowModel(FakeModel):
    async def __call__(self, model, prompt):
        self.calls.append(model)
        await asyncio.sleep(0.05)
        raise StatusError("404 Not Found", 404)


def test_cancel_on_disconnect_sets_event():
    event = asyncio.Event()

    asyncio.run(cancel_on_disconnect(GoneRequest(), event, interval=0.01))

    assert event.is_set()


def test_disconnect_stops_fallback_before_next_candidate(local_cache, store, monkeypatch):
    monkeypatch.setattr(config, "GENERATION_MODELS", ["gemini-2.0-flash", "gemini-1.5-flash"])
    model = SlowModel({})
    persistence = RoutinePersistence(local_cache, store)

    with pytest.raises(GenerationCancelled) as exc_info:
        asyncio.run(generate_plan(GeneratePlanRequest(), GoneRequest(), persistence, model))

    assert model.calls == ["gemini-2.0-flash"]
    assert exc_info.value.status_code == 499
    assert local_cache.get(ROUTINE_KEY) is None
