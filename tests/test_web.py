import pytest
from fastapi.testclient import TestClient

from dearself.config import AppConfig
from dearself.store import BackendFactory
from dearself.store.local import LocalAuthProvider
from dearself.web.app import EVICT_JOB_ID, create_app
from dearself.web.config import WebSettings

from tests.conftest import FlakyStore

PAGES = ["dashboard", "tasks", "breathe", "hydration", "mood", "steps", "journal"]

@pytest.fixture
def backend_store():
    return FlakyStore()

@pytest.fixture
def app(monkeypatch, backend_store):
    monkeypatch.setenv("DEARSELF_BACKEND", "local")
    monkeypatch.setenv("ENVIRONMENT", "testing")
    config = AppConfig()
    factory = BackendFactory(config, auth_provider=LocalAuthProvider(iterations=1),
                             local_store=backend_store)
    settings = WebSettings(DEBUG=True, ENVIRONMENT="testing")
    return create_app(config, settings, factory)

@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client

@pytest.fixture
def user_client(client):
    response = client.post("/api/auth/register", json={"email": "alice@example.com", "password": "secret123"})
    assert response.status_code == 201
    return client

# ===== SYSTEM =====

def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"

# ===== PAGES =====

def test_root_redirects_to_dashboard(client):
    response = client.get("/", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"

@pytest.mark.parametrize("page", PAGES)
def test_guarded_pages_redirect_to_login(client, page):
    response = client.get(f"/{page}", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/login"

@pytest.mark.parametrize("page", ["login", "register"])
def test_auth_pages_render(client, page):
    response = client.get(f"/{page}")
    assert response.status_code == 200
    assert "auth-form" in response.text

@pytest.mark.parametrize("page", ["login", "register"])
def test_auth_pages_redirect_when_signed_in(user_client, page):
    response = user_client.get(f"/{page}", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"

@pytest.mark.parametrize("page", PAGES)
def test_pages_render_when_signed_in(user_client, page):
    response = user_client.get(f"/{page}")
    assert response.status_code == 200
    assert "alice@example.com" in response.text

def test_journal_page_filters(user_client):
    user_client.post("/api/journal", json={"title": "Gratitude", "content": "friends", "mood": "happy"})
    user_client.post("/api/journal", json={"title": "Worries", "content": "deadline", "mood": "anxious"})
    response = user_client.get("/journal", params={"search": "friends"})
    assert "Gratitude" in response.text
    assert "Worries" not in response.text

# ===== AUTH =====

def test_register_sets_cookie(client):
    response = client.post("/api/auth/register", json={"email": "bob@example.com", "password": "secret123"})
    body = response.json()
    assert body["user"]["email"] == "bob@example.com"
    assert body["confirmation_required"] is False
    assert "dearself_session" in response.cookies

def test_register_duplicate(user_client):
    response = user_client.post("/api/auth/register", json={"email": "alice@example.com", "password": "secret123"})
    assert response.status_code == 400

def test_login(user_client):
    user_client.post("/api/auth/logout")
    response = user_client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret123"})
    assert response.status_code == 200
    assert user_client.get("/api/auth/me").json()["email"] == "alice@example.com"

def test_login_wrong_password(user_client):
    response = user_client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong"})
    assert response.status_code == 401

def test_me_requires_session(client):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/tasks").status_code == 401

def test_bearer_token(client):
    token = client.post(
        "/api/auth/register", json={"email": "carol@example.com", "password": "secret123"}
    ).json()["access_token"]
    client.cookies.clear()
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["email"] == "carol@example.com"

def test_logout(user_client):
    assert user_client.post("/api/auth/logout").json() == {"ok": True}
    assert user_client.get("/api/auth/me").status_code == 401

# ===== PANEL APIS =====

def test_tasks_flow(user_client):
    created = user_client.post("/api/tasks", json={"title": "Stretch", "priority": "high"}).json()
    assert created["ok"] is True
    task_id = created["view"]["tasks"][0]["id"]

    toggled = user_client.post(f"/api/tasks/{task_id}/toggle").json()
    assert toggled["view"]["completed_count"] == 1

    patched = user_client.patch(f"/api/tasks/{task_id}", json={"title": "Stretch more"}).json()
    assert patched["view"]["tasks"][0]["title"] == "Stretch more"

    assert user_client.delete(f"/api/tasks/{task_id}").status_code == 409
    deleted = user_client.delete(f"/api/tasks/{task_id}", params={"confirm": "true"}).json()
    assert deleted["view"]["total_count"] == 0

def test_task_validation(user_client):
    response = user_client.post("/api/tasks", json={"title": "   "})
    assert response.status_code == 422
    assert response.json()["field"] == "title"

def test_unknown_task(user_client):
    assert user_client.post("/api/tasks/missing/toggle").status_code == 404

def test_store_failure_reports_not_ok(user_client, backend_store):
    user_client.post("/api/tasks", json={"title": "Kept"})
    backend_store.fail_writes = True
    response = user_client.post("/api/tasks", json={"title": "Lost"})
    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is False
    assert [task["title"] for task in body["view"]["tasks"]] == ["Kept"]

def test_hydration(user_client):
    view = user_client.post("/api/hydration", json={"amount_ml": 250}).json()["view"]
    assert view["total"] == 250
    assert user_client.post("/api/hydration", json={"amount_ml": 0}).status_code == 422
    log_id = view["logs"][0]["id"]
    assert user_client.delete(f"/api/hydration/{log_id}").json()["view"]["total"] == 0

def test_mood_upsert(user_client):
    user_client.post("/api/mood", json={"mood": "happy", "intensity": 8})
    view = user_client.post("/api/mood", json={"mood": "calm", "intensity": 5}).json()["view"]
    assert len(view["weekly"]) == 1
    assert view["today"]["mood"] == "calm"
    assert user_client.post("/api/mood", json={"mood": "calm", "intensity": 11}).status_code == 422

def test_steps_upsert(user_client):
    user_client.post("/api/steps", json={"steps": 3000})
    view = user_client.post("/api/steps", json={"steps": 5000}).json()["view"]
    assert view["steps_today"] == 5000
    assert len(view["weekly"]) == 1

def test_journal(user_client):
    created = user_client.post("/api/journal", json={"title": "Hello", "content": "first entry"}).json()
    entry_id = created["view"]["entries"][0]["id"]
    assert created["view"]["entries"][0]["word_count"] == 2

    updated = user_client.put(f"/api/journal/{entry_id}",
                              json={"title": "Hi", "content": "edited", "mood": "calm"}).json()
    assert updated["view"]["entries"][0]["title"] == "Hi"

    assert user_client.get("/api/journal", params={"mood": "sad"}).json()["entries"] == []
    assert user_client.delete(f"/api/journal/{entry_id}").status_code == 409
    assert user_client.delete(f"/api/journal/{entry_id}", params={"confirm": "true"}).json()["ok"] is True

def test_dashboard(user_client):
    user_client.post("/api/hydration", json={"amount_ml": 500})
    summary = user_client.get("/api/dashboard").json()["summary"]
    assert summary["hydration_ml"] == 500

# ===== BREATHING =====

def test_breathing_controls(user_client):
    view = user_client.get("/api/breathe").json()
    assert view["selected"] == "4-7-8 Relaxation"

    view = user_client.post("/api/breathe/pattern", json={"name": "Box Breathing"}).json()
    assert view["selected"] == "Box Breathing"
    assert view["timer"]["running"] is False

    assert user_client.post("/api/breathe/record").status_code == 422

    assert user_client.post("/api/breathe/toggle").json()["timer"]["running"] is True
    assert user_client.get("/api/breathe/state").json()["running"] is True
    assert user_client.post("/api/breathe/toggle").json()["timer"]["running"] is False

def test_breathing_unknown_pattern(user_client):
    assert user_client.post("/api/breathe/pattern", json={"name": "Nope"}).status_code == 404

def test_leaving_breathe_drops_timer(user_client, app):
    user_client.post("/api/breathe/toggle")
    assert len(app.state.breathing) == 1
    assert user_client.delete("/api/breathe").json() == {"ok": True}
    assert len(app.state.breathing) == 0
    assert [job.id for job in app.state.scheduler.get_jobs()] == [EVICT_JOB_ID]

def test_logout_drops_timer(user_client, app):
    user_client.post("/api/breathe/toggle")
    user_client.post("/api/auth/logout")
    assert len(app.state.breathing) == 0

def test_polling_does_not_recreate_timer(user_client, app):
    user_client.post("/api/breathe/toggle")
    user_client.delete("/api/breathe")
    state = user_client.get("/api/breathe/state").json()
    assert state["running"] is False
    assert len(app.state.breathing) == 0

def test_leaving_one_tab_keeps_the_other(user_client, app):
    user_client.post("/api/breathe/toggle", params={"page": "tab-a"})
    user_client.post("/api/breathe/toggle", params={"page": "tab-b"})
    assert len(app.state.breathing) == 2

    user_client.delete("/api/breathe", params={"page": "tab-b"})
    assert user_client.get("/api/breathe/state", params={"page": "tab-a"}).json()["running"] is True
    assert len(app.state.breathing) == 1

def test_logout_drops_every_tab(user_client, app):
    for page_id in ("tab-a", "tab-b"):
        user_client.post("/api/breathe/toggle", params={"page": page_id})
    user_client.post("/api/auth/logout")
    assert len(app.state.breathing) == 0

def test_invalid_page_id(user_client):
    assert user_client.get("/api/breathe/state", params={"page": "../x"}).status_code == 422

def test_breathe_page_carries_its_page_id(user_client, app):
    response = user_client.get("/breathe")
    assert response.status_code == 200
    (user_id, page_id), = app.state.breathing._timers.keys()
    assert f'const PAGE = "{page_id}"' in response.text

# ===== STORE LIFECYCLE =====

def test_request_stores_are_released(user_client, app, monkeypatch):
    released = []
    monkeypatch.setattr(app.state.factory, "release", released.append)
    user_client.get("/api/tasks")
    user_client.get("/tasks")
    assert len(released) == 2
