import pytest


class FakeClock:
    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock(client):
    from ironlog.api.timer import get_clock  # noqa: WPS433

    fake = FakeClock()
    client.app.dependency_overrides[get_clock] = lambda: fake
    yield fake
    client.app.dependency_overrides.pop(get_clock, None)


def _post(client, user_id, path, **kwargs):
    return client.post(f"/timer/{path}", params={"user_id": user_id}, **kwargs)


def test_idle_without_session(client, clock, user_id):
    r = client.get("/timer/", params={"user_id": user_id})
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["state"] == "idle"
    assert data["session_id"] is None
    assert data["elapsed"] == 0


def test_actions_need_a_running_timer(client, clock, user_id):
    r = _post(client, user_id, "pause")
    assert r.status_code == 400
    assert r.json()["error"] == "No active workout timer"

    _post(client, user_id, "start")
    r = _post(client, user_id, "sets/end", json={})
    assert r.status_code == 400
    assert r.json()["error"] == "No set in progress"


def test_full_session(client, clock, user_id):
    started = _post(client, user_id, "start").json()["data"]
    assert started["state"] == "running"
    session_id = started["session_id"]

    clock.advance(10)
    r = _post(client, user_id, "sets/start", json={"exercise": "Bench Press"})
    assert r.json()["data"]["current_exercise"] == "Bench Press"

    clock.advance(30)
    r = _post(client, user_id, "sets/end", json={"reps": 8, "weight": 135})
    assert r.json()["data"]["finished_set"]["duration"] == 30

    clock.advance(60)
    view = client.get("/timer/", params={"user_id": user_id}).json()["data"]
    assert view["current_rest"] == 60
    assert view["elapsed_display"] == "1:40"
    assert _post(client, user_id, "rest/end").json()["data"]["rest_duration"] == 60

    clock.advance(10)
    assert _post(client, user_id, "pause").json()["data"]["state"] == "paused"
    clock.advance(50)

    stopped = _post(client, user_id, "stop").json()["data"]
    assert stopped["session_id"] == session_id
    assert stopped["total_duration"] == 110
    assert stopped["summary"]["work_time"] == 30

    # The finished session is closed; a new GET starts from idle
    assert client.get("/timer/", params={"user_id": user_id}).json()["data"]["state"] == "idle"

    analytics = client.get("/timer/analytics", params={"user_id": user_id}).json()["data"]
    assert analytics["metrics"]["total_workouts"] == 1
    assert analytics["metrics"]["total_duration"] == 110


def test_reset_discards_open_session(client, clock, user_id):
    _post(client, user_id, "start")
    clock.advance(45)

    r = _post(client, user_id, "reset")
    assert r.json()["data"]["state"] == "idle"
    assert client.get("/timer/", params={"user_id": user_id}).json()["data"]["session_id"] is None

    analytics = client.get("/timer/analytics", params={"user_id": user_id}).json()["data"]
    assert analytics["metrics"]["total_workouts"] == 0
