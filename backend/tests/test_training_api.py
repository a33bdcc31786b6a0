from datetime import date, timedelta


def _log(client, user_id, exercise, days_ago, reps=8, weight=100, sets=3):
    payload = {
        "exercise": exercise,
        "sets": sets,
        "reps": reps,
        "weight": weight,
        "date": (date.today() - timedelta(days=days_ago)).isoformat(),
    }
    r = client.post("/workouts/", json=payload, params={"user_id": user_id})
    assert r.status_code == 200, r.text


def test_rotation_rejects_bad_requests(client, user_id):
    r = client.get("/rotation/", params={"action": "shuffle", "user_id": user_id})
    assert r.status_code == 400
    assert r.json()["error"].startswith("Invalid action")

    r = client.get("/rotation/", params={"action": "suggestions", "user_id": user_id})
    assert r.status_code == 400
    assert r.json()["error"] == "Exercise parameter required for suggestions"


def test_rotation_check_forces_after_eight_weeks(client, user_id):
    _log(client, user_id, "Bench Press", days_ago=60)
    _log(client, user_id, "Bench Press", days_ago=1)

    r = client.get("/rotation/", params={"action": "rotation-check", "exercise": "Bench Press", "user_id": user_id})
    data = r.json()["data"]
    assert data["rotation_recommendation"]["should_rotate"] is True
    assert data["rotation_recommendation"]["type"] == "TIME_BASED"
    assert data["exercise_category"] == {"category": "CHEST", "tier": "primary"}


def test_rotation_suggestions_and_phase_info(client, user_id):
    r = client.get(
        "/rotation/",
        params={"action": "suggestions", "exercise": "Bench Press", "max_suggestions": 2, "user_id": user_id},
    )
    data = r.json()["data"]
    assert len(data["suggestions"]) == 2
    assert data["total_workouts"] == 0

    start = (date.today() - timedelta(days=30)).isoformat()
    r = client.get("/rotation/", params={"action": "phase-info", "start_date": start, "user_id": user_id})
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["current_phase"]["phase"] == "STRENGTH"
    assert data["periodized_workout"] is None
    assert "DELOAD" in data["available_phases"]


def test_progression_suggestion(client, user_id):
    for week in range(6):
        _log(client, user_id, "Bench Press", days_ago=7 * week)
    _log(client, user_id, "Squat", days_ago=2, weight=225)

    r = client.get("/progression/suggestion", params={"exercise": "Bench Press", "user_id": user_id})
    data = r.json()["data"]
    assert data["workouts_analyzed"] == 6
    assert len(data["recent_workouts"]) == 5
    assert data["suggestion"]["reps"] == 9
    assert data["formatted"]["summary"] == "Reps: 8 → 9 (+1)"

    assert client.get("/progression/suggestion", params={"user_id": user_id}).status_code == 400


def test_progression_analysis(client, user_id):
    for i, weight in enumerate([100, 110, 120, 130]):
        _log(client, user_id, "Squat", days_ago=30 - 7 * i, reps=5, weight=weight)

    r = client.get("/progression/analysis", params={"timeframe": 60, "user_id": user_id})
    data = r.json()["data"]
    assert data["summary"]["exercises_analyzed"] == 1
    assert data["exercises"]["Squat"]["progression_status"] == "progressing"
