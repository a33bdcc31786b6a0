def _log(client, user_id, **overrides):
    payload = {"exercise": "Squat", "sets": 3, "reps": 5, "weight": 225, "date": "2025-02-10"}
    payload.update(overrides)
    r = client.post("/workouts/", json=payload, params={"user_id": user_id})
    assert r.status_code == 200, r.text
    return r.json()["data"]


def test_missing_required_fields_is_400(client, user_id):
    r = client.post("/workouts/", json={"exercise": "Squat", "sets": 3}, params={"user_id": user_id})
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "Missing or invalid parameters"


def test_rejects_non_positive_sets_and_negative_weight(client, user_id):
    r = client.post(
        "/workouts/",
        json={"exercise": "Squat", "sets": 0, "reps": 5, "date": "2025-02-10"},
        params={"user_id": user_id},
    )
    assert r.status_code == 400

    r = client.post(
        "/workouts/",
        json={"exercise": "Squat", "sets": 3, "reps": 5, "weight": -5, "date": "2025-02-10"},
        params={"user_id": user_id},
    )
    assert r.status_code == 400


def test_date_bounds_are_exclusive(client, user_id):
    _log(client, user_id, date="2025-02-10")
    _log(client, user_id, date="2025-02-11")
    _log(client, user_id, date="2025-02-12")

    r = client.get(
        "/workouts/",
        params={"start_date": "2025-02-10", "end_date": "2025-02-12", "user_id": user_id},
    )
    dates = [w["date"] for w in r.json()["data"]]
    assert dates == ["2025-02-11"]


def test_exercise_filter_is_case_insensitive_substring(client, user_id):
    _log(client, user_id, exercise="Bench Press")
    _log(client, user_id, exercise="Incline Bench Press")
    _log(client, user_id, exercise="Squat")

    r = client.get("/workouts/", params={"exercise": "bench", "user_id": user_id})
    names = sorted(w["exercise"] for w in r.json()["data"])
    assert names == ["Bench Press", "Incline Bench Press"]


def test_pagination_and_sorting(client, user_id):
    for i, weight in enumerate([100, 150, 125]):
        _log(client, user_id, weight=weight, date=f"2025-03-0{i + 1}")

    r = client.get(
        "/workouts/",
        params={"sort_by": "weight", "sort_direction": "asc", "limit": 2, "user_id": user_id},
    )
    body = r.json()
    assert [w["weight"] for w in body["data"]] == [100, 125]
    assert body["pagination"] == {"offset": 0, "limit": 2, "total": 3, "has_more": True}

    r = client.get("/workouts/", params={"limit": 2, "offset": 2, "user_id": user_id})
    body = r.json()
    # default sort is date descending, so the oldest is last
    assert [w["date"] for w in body["data"]] == ["2025-03-01"]
    assert body["pagination"]["has_more"] is False


def test_limit_is_capped(client, user_id):
    r = client.get("/workouts/", params={"limit": 500, "user_id": user_id})
    assert r.json()["pagination"]["limit"] == 100


def test_invalid_sort_is_400(client, user_id):
    r = client.get("/workouts/", params={"sort_by": "reps", "user_id": user_id})
    assert r.status_code == 400


def test_delete_workout(client, user_id):
    workout = _log(client, user_id)

    r = client.delete(f"/workouts/{workout['id']}", params={"user_id": user_id})
    assert r.status_code == 200
    assert r.json()["success"] is True

    r = client.delete(f"/workouts/{workout['id']}", params={"user_id": user_id})
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Workout not found"}


def test_cannot_delete_another_users_workout(client, user_id):
    workout = _log(client, user_id)
    r = client.delete(f"/workouts/{workout['id']}", params={"user_id": "someone-else"})
    assert r.status_code == 404
