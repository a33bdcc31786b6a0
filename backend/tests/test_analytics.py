from datetime import date, timedelta

from ironlog.core.constants import estimated_1rm
from ironlog.training.analytics import (
    analyze_goals,
    analyze_progress,
    analyze_weight,
    analyze_workouts,
    build_summary,
    generate_insights,
    strength_progression,
    training_streak,
    weekly_report,
)

D = date(2025, 1, 6)


def _w(exercise, weight, day, sets=3, reps=5, id=None):
    return {"id": id, "exercise": exercise, "sets": sets, "reps": reps, "weight": weight, "date": D + timedelta(days=day)}


def _goal(id, status="Active", goal_type="Volume", progress=50.0, days_remaining=30):
    return {
        "id": id,
        "goal_title": f"Goal {id}",
        "goal_type": goal_type,
        "status": status,
        "target_date": D + timedelta(days=days_remaining),
        "progress_percentage": progress,
        "days_remaining": days_remaining,
    }


def test_workout_analytics_breakdown_and_frequency():
    rows = [_w("Bench Press", 100, 0), _w("Squat", 200, 0), _w("Bench Press", 105, 2)]
    result = analyze_workouts(rows, timeframe_days=7)

    assert result["total_workouts"] == 3
    assert result["training_days"] == 2
    assert result["average_per_week"] == 3.0
    assert result["total_volume"] == 1500 + 3000 + 1575
    assert result["exercise_breakdown"]["Bench Press"] == {"count": 2, "total_volume": 3075.0, "max_weight": 105.0}
    assert result["frequency_trend"] == [{"date": D, "workouts": 2}, {"date": D + timedelta(days=2), "workouts": 1}]

    assert analyze_workouts([], 30)["exercise_breakdown"] == {}


def test_strength_progression_skips_bodyweight_and_rounds_half_up():
    rows = [
        _w("Deadlift", 200, 0),
        _w("Deadlift", 190, 14),
        _w("Deadlift", 225, 14),
        _w("Push Up", 0, 3),
    ]
    result = strength_progression(rows)
    assert list(result) == ["Deadlift"]

    deadlift = result["Deadlift"]
    assert [p["weight"] for p in deadlift["chart_data"]] == [200.0, 225.0]
    assert deadlift["chart_data"][1]["workouts"] == 2
    assert deadlift["chart_data"][0]["one_rm"] == round(estimated_1rm(200, 5), 1)

    metrics = deadlift["metrics"]
    assert metrics["weight_increase"] == 25.0
    assert metrics["timespan"] == 14
    assert metrics["average_weekly_increase"] == 12.5
    # 12.5% rounds up
    assert metrics["progress_percentage"] == 13


def test_weight_analytics_uses_fitted_trend():
    entries = [{"date": D, "weight": 182}, {"date": D + timedelta(days=7), "weight": 181}, {"date": D + timedelta(days=14), "weight": 180}]
    result = analyze_weight(entries)
    assert result["current_weight"] == 180.0
    assert result["weight_change"] == -2.0
    assert result["average_weekly_change"] == -1.0
    assert result["trend"] == "losing"
    assert result["total_entries"] == 3

    assert analyze_weight([])["trend"] == "no data"


def test_goal_analytics():
    goals = [
        _goal(1, progress=20, days_remaining=10),
        _goal(2, progress=60, days_remaining=3, goal_type="Frequency"),
        _goal(3, progress=80, days_remaining=40),
        _goal(4, status="Completed", progress=100, days_remaining=5),
    ]
    result = analyze_goals(goals)
    assert result["total_goals"] == 4
    assert result["active_goals"] == 3
    assert result["completed_goals"] == 1
    assert result["average_progress"] == 53.3
    assert result["goals_by_type"]["Volume"] == {"count": 3, "avg_progress": 66.7}
    assert [g["id"] for g in result["upcoming_deadlines"]] == [2, 1]


def test_progress_analytics():
    prs = [
        {"exercise": "Squat", "max_weight": 225, "previous_pr": 215},
        {"exercise": "Squat", "max_weight": 230, "previous_pr": 225},
        {"exercise": "Bench Press", "max_weight": 185, "previous_pr": None},
    ]
    result = analyze_progress(prs, timeframe_days=14)
    assert result["total_prs"] == 3
    assert result["average_prs_per_week"] == 1.5
    assert result["exercises_improved"] == 2
    assert result["total_improvement"] == 200.0
    assert analyze_progress([], 30)["average_improvement"] == 0


def test_insights_follow_computed_sections():
    analytics = {
        "workout_analytics": {"average_per_week": 1.0, "total_volume": 0},
        "weight_analytics": {"average_weekly_change": -2.5, "trend": "losing"},
        "goal_analytics": {"active_goals": 2, "average_progress": 80},
        "progress_analytics": {"total_prs": 5},
    }
    insights = generate_insights(analytics)
    assert [(i["category"], i["type"]) for i in insights] == [
        ("workout", "suggestion"),
        ("weight", "warning"),
        ("goals", "celebration"),
        ("progress", "celebration"),
    ]
    assert insights[-1]["message"] == "Amazing! You've set 5 personal records recently!"

    summary = build_summary(analytics)
    assert summary["weight_trend"] == "losing"
    assert summary["recent_prs"] == 5

    # Skipped sections produce no insights and summary defaults
    assert generate_insights({"progress_analytics": {"total_prs": 1}}) == []
    assert build_summary({})["weight_trend"] == "no data"


def test_training_streak():
    assert training_streak([]) == 0
    assert training_streak([D, D + timedelta(days=1), D + timedelta(days=2)]) == 3
    assert training_streak([D, D + timedelta(days=1), D + timedelta(days=3)]) == 1


def test_weekly_report_groups_by_day_and_flags_prs():
    rows = [_w("Squat", 200, 0, id=1), _w("Bench Press", 100, 0, id=2), _w("Squat", 210, 1, id=3)]
    prs = [{"exercise": "Squat", "max_weight": 210, "workout_id": 3}]
    weights = [{"date": D + timedelta(days=6), "weight": 180.5}, {"date": D, "weight": 182}]

    report = weekly_report(rows, weights, prs, goals_achieved=[], durations=[3000, 3600, 0])
    summary = report["summary"]
    assert summary["total_workouts"] == 2
    assert summary["total_exercises"] == 3
    assert summary["total_sets"] == 9
    assert summary["total_reps"] == 45
    assert summary["total_weight"] == 3000 + 1500 + 3150
    assert summary["avg_workout_duration"] == 3300
    assert summary["streak"] == 2

    assert [d["date"] for d in report["workouts"]] == [D, D + timedelta(days=1)]
    assert [e["is_pr"] for e in report["workouts"][1]["exercises"]] == [True]
    assert report["weight"]["start_weight"] == 182.0
    assert report["weight"]["change"] == -1.5


def _log(client, user_id, exercise, weight, days_ago):
    day = (date.today() - timedelta(days=days_ago)).isoformat()
    r = client.post(
        "/workouts/",
        json={"exercise": exercise, "sets": 3, "reps": 5, "weight": weight, "date": day},
        params={"user_id": user_id},
    )
    assert r.status_code == 200, r.text


def test_analytics_endpoint(client, user_id):
    params = {"user_id": user_id}
    _log(client, user_id, "Bench Press", 135, 10)
    _log(client, user_id, "Bench Press", 145, 3)
    _log(client, user_id, "Bench Press", 95, 60)
    client.post("/weights/", json={"weight": 181, "date": (date.today() - timedelta(days=7)).isoformat()}, params=params)
    client.post("/weights/", json={"weight": 180, "date": date.today().isoformat()}, params=params)

    r = client.get("/analytics/", params=params)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["timeframe"] == 30

    data = body["data"]
    assert data["workout_analytics"]["total_workouts"] == 2
    assert data["strength_progression"]["Bench Press"]["metrics"]["weight_increase"] == 10.0
    assert data["weight_analytics"]["trend"] == "losing"
    assert data["summary"]["weight_trend"] == "losing"
    assert data["progress_analytics"]["total_prs"] == 0

    r = client.get("/analytics/", params={**params, "include_weight": "false", "include_goals": "false", "timeframe": 90})
    data = r.json()["data"]
    assert "weight_analytics" not in data
    assert "goal_analytics" not in data
    assert data["workout_analytics"]["total_workouts"] == 3


def test_weekly_report_requires_bounds(client, user_id):
    r = client.get("/analytics/weekly-report", params={"user_id": user_id, "week_start": "2025-01-06"})
    assert r.status_code == 400
    assert r.json()["error"] == "week_start and week_end parameters are required"

    r = client.get(
        "/analytics/weekly-report",
        params={"user_id": user_id, "week_start": "2025-01-12", "week_end": "2025-01-06"},
    )
    assert r.status_code == 400


def test_weekly_report_endpoint(client, user_id):
    params = {"user_id": user_id}
    _log(client, user_id, "Squat", 225, 2)
    _log(client, user_id, "Squat", 235, 1)
    _log(client, user_id, "Squat", 200, 20)
    client.post("/prs/detect", params=params)

    start = (date.today() - timedelta(days=6)).isoformat()
    end = date.today().isoformat()
    r = client.get("/analytics/weekly-report", params={**params, "week_start": start, "week_end": end})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["week_start"] == start

    report = body["data"]
    assert report["summary"]["total_workouts"] == 2
    assert report["summary"]["streak"] == 2
    assert [e["is_pr"] for day in report["workouts"] for e in day["exercises"]] == [False, True]
    assert [p["max_weight"] for p in report["personal_records"]] == [235.0]
