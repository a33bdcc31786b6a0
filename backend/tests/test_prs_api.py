from datetime import date, timedelta

from ironlog.api.prs import best_sets


def _log(client, user_id, exercise, reps, weight, days_ago=0):
    payload = {
        "exercise": exercise,
        "sets": 3,
        "reps": reps,
        "weight": weight,
        "date": (date.today() - timedelta(days=days_ago)).isoformat(),
    }
    r = client.post("/workouts/", json=payload, params={"user_id": user_id})
    assert r.status_code == 200, r.text


def test_best_set_is_by_estimated_max():
    workouts = [
        {"id": 1, "exercise": "Bench Press", "reps": 3, "weight": 145},
        {"id": 2, "exercise": "Bench Press", "reps": 8, "weight": 135},
        {"id": 3, "exercise": "Squat", "reps": 1, "weight": 315},
    ]
    best = best_sets(workouts)
    assert best["Bench Press"]["id"] == 2
    assert best["Squat"]["estimated_1rm"] == 315.0


def test_no_recent_workouts(client, user_id):
    _log(client, user_id, "Squat", 5, 225, days_ago=30)
    r = client.post("/prs/detect", params={"user_id": user_id})
    body = r.json()
    assert body["data"] == []
    assert body["total_workouts_checked"] == 0


def test_detect_and_list(client, user_id):
    _log(client, user_id, "Bench Press", 8, 135)
    _log(client, user_id, "Bench Press", 3, 145, days_ago=1)

    first = client.post("/prs/detect", params={"user_id": user_id}).json()
    assert first["total_workouts_checked"] == 2
    assert len(first["data"]) == 1
    assert first["data"][0]["new_pr"] == 135
    assert first["data"][0]["previous_pr"] == 0

    # Nothing heavier since the last run
    assert client.post("/prs/detect", params={"user_id": user_id}).json()["data"] == []

    _log(client, user_id, "Bench Press", 8, 140)
    third = client.post("/prs/detect", params={"user_id": user_id}).json()["data"]
    assert third[0]["improvement"] == 5

    listing = client.get("/prs/", params={"user_id": user_id}).json()["data"]
    assert listing["summary"] == {"total_exercises": 1, "total_prs": 2}
    assert listing["current_prs"][0]["max_weight"] == 140
