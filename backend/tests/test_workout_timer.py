from datetime import date

import pytest

from ironlog.training.workout_timer import (
    COMPLETED,
    IDLE,
    PAUSED,
    RUNNING,
    TimerStateError,
    WorkoutTimer,
    calculate_workout_metrics,
    generate_duration_recommendations,
)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def test_pause_time_is_excluded(clock):
    timer = WorkoutTimer(clock=clock)
    timer.start()
    clock.advance(60)
    timer.pause()
    assert timer.state == PAUSED
    clock.advance(300)
    assert timer.elapsed() == 60

    timer.start()
    clock.advance(40)
    assert timer.state == RUNNING
    assert timer.elapsed() == 100


def test_stop_while_paused_closes_the_pause(clock):
    timer = WorkoutTimer(clock=clock)
    timer.start()
    clock.advance(50)
    timer.pause()
    clock.advance(30)

    result = timer.stop()
    assert timer.state == COMPLETED
    assert result["total_duration"] == 50
    clock.advance(100)
    assert timer.total_duration() == 50


def test_total_is_independent_of_pause_count(clock):
    timer = WorkoutTimer(clock=clock)
    timer.start()
    for running, paused in [(20, 15), (30, 100), (25, 5)]:
        clock.advance(running)
        timer.pause()
        clock.advance(paused)
        timer.start()
    clock.advance(25)
    timer.pause()
    clock.advance(60)

    result = timer.stop()
    assert result["total_duration"] == 100
    assert timer.total_paused == 180


def test_noops_and_completed_guard(clock):
    timer = WorkoutTimer(clock=clock)
    timer.pause()
    assert timer.state == IDLE
    assert timer.elapsed() == 0
    assert timer.end_set() is None

    timer.start()
    clock.advance(5)
    timer.start()
    assert timer.elapsed() == 5

    timer.stop()
    with pytest.raises(TimerStateError):
        timer.start()

    timer.reset()
    assert timer.state == IDLE
    assert timer.sets == []
    timer.start()
    assert timer.state == RUNNING


def test_sets_and_rest_timeline(clock):
    timer = WorkoutTimer(clock=clock)
    timer.start()
    clock.advance(10)
    timer.start_set("Bench Press", 1)
    clock.advance(30)
    timer.end_set(reps=8, weight=135)
    clock.advance(90)
    assert timer.current_rest() == 90
    timer.start_set("Bench Press", 2)
    clock.advance(30)
    timer.end_set(reps=7, weight=135)
    clock.advance(40)

    summary = timer.stop()["summary"]
    assert summary["total_duration"] == 200
    assert summary["work_time"] == 60
    assert summary["rest_time"] == 90
    assert summary["other_time"] == 50
    assert summary["efficiency"] == 30
    assert summary["avg_set_duration"] == 30
    assert summary["avg_rest_duration"] == 90
    assert summary["set_count"] == 2
    assert summary["exercise_count"] == 1
    assert [s["reps"] for s in summary["sets"]] == [8, 7]


def test_switching_exercise_closes_the_previous_one(clock):
    timer = WorkoutTimer(clock=clock)
    timer.start()
    timer.start_set("Squat", 1)
    clock.advance(20)
    timer.start_set("Leg Press", 1)

    assert [s["exercise"] for s in timer.sets] == ["Squat"]
    assert [e["name"] for e in timer.exercises] == ["Squat"]
    assert timer.exercises[0]["duration"] == 20
    assert timer.current_exercise["name"] == "Leg Press"


def test_state_survives_serialisation(clock):
    timer = WorkoutTimer(clock=clock)
    timer.start()
    clock.advance(10)
    timer.start_set("Row", 1)
    clock.advance(25)

    data = timer.to_dict()
    restored = WorkoutTimer.from_dict(data, clock=clock)
    restored.end_set(reps=10, weight=95)

    assert restored.sets[0]["duration"] == 25
    assert restored.elapsed() == 35
    # Original dict is left untouched
    assert data["sets"] == []
    assert data["current_set"]["reps"] is None


def test_unknown_state_is_rejected():
    with pytest.raises(TimerStateError):
        WorkoutTimer.from_dict({"state": "sprinting"})
    assert WorkoutTimer.from_dict(None).state == IDLE


def test_metrics_from_sessions():
    sessions = [
        {"date": date(2025, 3, 1), "total_duration": 3600, "work_time": 1800, "rest_time": 1200, "efficiency": 50},
        {"date": date(2025, 3, 8), "total_duration": 1200, "work_time": 600, "rest_time": 300},
    ]
    metrics = calculate_workout_metrics(sessions)

    assert metrics["total_workouts"] == 2
    assert metrics["average_duration"] == 2400
    assert metrics["shortest_workout"] == 1200
    assert metrics["longest_workout"] == 3600
    assert metrics["average_rest_time"] == 750
    assert metrics["workout_frequency"] == 2.0
    assert metrics["average_efficiency"] == 50
    assert generate_duration_recommendations(metrics) == []


def test_recommendations_sorted_by_priority():
    metrics = calculate_workout_metrics(
        [{"date": date(2025, 3, 1), "total_duration": 2400, "work_time": 1200, "rest_time": 600}]
    )
    recs = generate_duration_recommendations(metrics, {"total_duration": 6000, "efficiency": 35})
    priorities = [r["priority"] for r in recs]
    assert priorities == sorted(priorities, key={"high": 0, "medium": 1, "low": 2}.get)
    titles = [r["title"] for r in recs]
    assert "Long Current Session" in titles
    assert "Focus on Efficiency" in titles


def test_welcome_when_nothing_logged():
    recs = generate_duration_recommendations(calculate_workout_metrics([]))
    assert recs[0]["title"] == "Welcome to Workout Tracking!"
