from datetime import date, timedelta

from ironlog.training.goal_predictions import (
    predict_body_weight,
    predict_exercise_pr,
    predict_frequency,
    predict_generic,
    predict_goal,
    predict_volume,
    progression_rate,
    summarize_predictions,
)

TODAY = date(2025, 6, 2)


def _ago(days):
    return TODAY - timedelta(days=days)


def _goal(goal_type, target_value, target_in=28, created_ago=28, progress=50.0, **extra):
    return {
        "id": 1,
        "goal_title": f"{goal_type} Goal",
        "goal_type": goal_type,
        "target_value": target_value,
        "target_date": TODAY + timedelta(days=target_in),
        "created_at": _ago(created_ago),
        "progress_percentage": progress,
        **extra,
    }


def test_body_weight_needs_three_entries():
    result = predict_body_weight(_goal("Body Weight", 180), [{"date": TODAY, "weight": 185}], 4, TODAY)
    assert result["likelihood"] == "insufficient_data"
    assert result["insights"] == ["Need more weight data points for accurate prediction"]


def test_body_weight_trend_matching_the_required_rate():
    weights = [{"date": _ago(14), "weight": 190}, {"date": _ago(7), "weight": 189}, {"date": TODAY, "weight": 188}]
    result = predict_body_weight(_goal("Body Weight", 180), weights, weeks_remaining=8, today=TODAY)
    assert result["weekly_change_needed"] == -1.0
    assert result["current_weekly_trend"] == -1.0
    assert result["likelihood"] == "very_likely"
    assert result["predicted_date"] == TODAY + timedelta(weeks=8)


def test_exercise_pr_progression():
    workouts = [
        {"exercise": "Squat", "sets": 3, "reps": 5, "weight": w, "date": _ago(days)}
        for w, days in ((100, 14), (105, 7), (110, 0))
    ] + [{"exercise": "Bench Press", "sets": 3, "reps": 5, "weight": 300, "date": TODAY}]

    assert round(progression_rate(workouts[:3]), 3) == 8.333

    goal = _goal("Exercise PR", 120, exercise_name="Squat")
    result = predict_exercise_pr(goal, workouts, weeks_remaining=4, today=TODAY)
    assert result["current_max"] == 110.0
    assert result["weekly_progress_needed"] == 2.5
    assert result["likelihood"] == "very_likely"
    # 10 lbs at 8.33 lbs/week is 1.2 weeks
    assert result["predicted_date"] == TODAY + timedelta(days=8)

    stalled = [dict(w, weight=100) for w in workouts[:3]]
    assert predict_exercise_pr(goal, stalled, 4, TODAY)["likelihood"] == "unlikely"

    missing = predict_exercise_pr(_goal("Exercise PR", 120, exercise_name="Deadlift"), workouts, 4, TODAY)
    assert missing["insights"] == ["Need more Deadlift workout data for accurate prediction"]


def test_frequency_uses_last_four_weeks():
    workouts = [{"exercise": "Squat", "date": _ago(d)} for d in range(0, 28, 3)]
    workouts.append({"exercise": "Squat", "date": _ago(40)})

    result = predict_frequency(_goal("Frequency", 3), workouts, TODAY)
    assert result["current_frequency"] == 2.5
    assert result["likelihood"] == "likely"
    assert result["predicted_date"] is None

    assert predict_frequency(_goal("Frequency", 6), workouts, TODAY)["likelihood"] == "unlikely"


def test_volume_ratio():
    workouts = [{"exercise": "Squat", "sets": 3, "reps": 5, "weight": 200, "date": _ago(d)} for d in range(6)]
    # 18000 lbs over an assumed two weeks
    result = predict_volume(_goal("Volume", 90000), workouts, weeks_remaining=10)
    assert result["current_weekly_volume"] == 9000
    assert result["weekly_volume_needed"] == 9000
    assert result["likelihood"] == "very_likely"

    assert predict_volume(_goal("Volume", 300000), workouts, 10)["likelihood"] == "unlikely"


def test_generic_projection():
    on_pace = predict_generic(progress=60, days_elapsed=10, days_total=20)
    assert on_pace["projected_progress"] == 100
    assert on_pace["likelihood"] == "very_likely"

    behind = predict_generic(progress=20, days_elapsed=10, days_total=20)
    assert behind["projected_progress"] == 40
    assert behind["likelihood"] == "unlikely"


def test_predict_goal_adds_timeline_fields():
    result = predict_goal(_goal("Custom", 10, target_in=28, created_ago=28, progress=50), [], [], today=TODAY)
    assert result["goal_id"] == 1
    assert result["days_remaining"] == 28
    assert result["time_elapsed_ratio"] == 0.5
    assert result["likelihood"] == "very_likely"

    # Target day itself: rates are taken over one day
    due = predict_goal(_goal("Volume", 1000, target_in=0), [], [], today=TODAY)
    assert due["days_remaining"] == 0
    assert due["likelihood"] == "unlikely"


def test_summary_counts():
    predictions = [{"likelihood": value} for value in ("very_likely", "likely", "possible", "unlikely", "insufficient_data")]
    assert summarize_predictions(predictions) == {
        "total_active_goals": 5,
        "predictions_generated": 5,
        "likely_to_succeed": 2,
        "needs_attention": 2,
        "insufficient_data": 1,
    }


def test_predictions_endpoint(client, user_id):
    params = {"user_id": user_id}
    r = client.get("/goals/predictions", params=params)
    assert r.status_code == 200
    assert r.json()["data"] == []

    later = (date.today() + timedelta(days=60)).isoformat()
    sooner = (date.today() + timedelta(days=20)).isoformat()
    client.post(
        "/goals/",
        json={"goal_type": "Exercise PR", "exercise_name": "Squat", "target_value": 315, "target_date": later},
        params=params,
    )
    client.post(
        "/goals/",
        json={"goal_type": "Custom", "title": "Touch toes", "target_value": 10, "current_value": 10, "target_date": sooner},
        params=params,
    )

    r = client.get("/goals/predictions", params=params)
    assert r.status_code == 200, r.text
    body = r.json()
    assert [p["goal_type"] for p in body["data"]] == ["Custom", "Exercise PR"]
    assert body["data"][1]["likelihood"] == "insufficient_data"
    assert body["summary"]["likely_to_succeed"] == 1
    assert body["summary"]["insufficient_data"] == 1
