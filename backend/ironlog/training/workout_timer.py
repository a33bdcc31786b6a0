"""Workout stopwatch with set, rest and exercise sub-timers.

States move idle -> running <-> paused -> completed; `reset()` goes back
to idle. All times are wall-clock seconds from an injectable clock so the
state can be serialised to JSON and rehydrated in a later request.
"""

import copy
import math
import time
from typing import Callable, Optional

from ironlog.core.errors import ValidationFailed
from ironlog.core.time_utils import format_duration

IDLE = "idle"
RUNNING = "running"
PAUSED = "paused"
COMPLETED = "completed"

TIMER_STATES = (IDLE, RUNNING, PAUSED, COMPLETED)


class TimerStateError(ValidationFailed):
    """Operation not valid in the timer's current state."""


def _secs(delta: float) -> int:
    return max(0, math.floor(delta))


class WorkoutTimer:
    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self.clock = clock or time.time
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.paused_at: Optional[float] = None
        self.total_paused = 0.0
        self.state = IDLE

        self.sets: list[dict] = []
        self.current_set: Optional[dict] = None
        self.rest_start: Optional[float] = None

        self.exercises: list[dict] = []
        self.current_exercise: Optional[dict] = None

    # --- session ---------------------------------------------------------

    def start(self) -> None:
        if self.state == RUNNING:
            return
        if self.state == COMPLETED:
            raise TimerStateError("Timer already completed; reset it first")

        now = self.clock()
        if self.state == IDLE:
            self.start_time = now
        elif self.state == PAUSED:
            self.total_paused += now - self.paused_at
            self.paused_at = None
        self.state = RUNNING

    def pause(self) -> None:
        if self.state != RUNNING:
            return
        self.paused_at = self.clock()
        self.state = PAUSED

    def stop(self) -> dict:
        now = self.clock()
        if self.state == PAUSED:
            # Close the open pause so it is not counted as workout time
            self.total_paused += now - self.paused_at
            self.paused_at = None
        self.end_time = now
        self.state = COMPLETED
        return {"total_duration": self.total_duration(), "summary": self.summary()}

    def reset(self) -> None:
        clock = self.clock
        self.__init__(clock=clock)

    def elapsed(self) -> int:
        if self.start_time is None:
            return 0
        now = self.paused_at if self.state == PAUSED else self.clock()
        return _secs(now - self.start_time - self.total_paused)

    def total_duration(self) -> int:
        if self.start_time is None or self.end_time is None:
            return self.elapsed()
        return _secs(self.end_time - self.start_time - self.total_paused)

    # --- sets / rest ----------------------------------------------------

    def start_set(self, exercise: str, set_number: int) -> dict:
        if self.current_set is not None:
            self.end_set()

        if self.current_exercise is None or self.current_exercise["name"] != exercise:
            self.start_exercise(exercise)

        now = self.clock()
        self.current_set = {
            "exercise": exercise,
            "set_number": set_number,
            "start_time": now,
            "end_time": None,
            "duration": 0,
            "rest_before": _secs(now - self.rest_start) if self.rest_start is not None else 0,
            "reps": None,
            "weight": None,
        }
        self.rest_start = None
        return self.current_set

    def end_set(self, reps: Optional[int] = None, weight: Optional[float] = None) -> Optional[dict]:
        if self.current_set is None:
            return None

        now = self.clock()
        finished = dict(self.current_set)
        finished.update(
            end_time=now,
            duration=_secs(now - finished["start_time"]),
            reps=reps,
            weight=weight,
        )
        self.sets.append(finished)
        if self.current_exercise is not None:
            self.current_exercise["sets"].append(dict(finished))

        self.current_set = None
        self.start_rest()
        return finished

    def start_rest(self) -> None:
        self.rest_start = self.clock()

    def end_rest(self) -> None:
        self.rest_start = None

    def current_rest(self) -> int:
        if self.rest_start is None:
            return 0
        return _secs(self.clock() - self.rest_start)

    # --- exercises ------------------------------------------------------

    def start_exercise(self, name: str) -> None:
        if self.current_exercise is not None:
            self.end_exercise()
        self.current_exercise = {
            "name": name,
            "start_time": self.clock(),
            "end_time": None,
            "duration": 0,
            "sets": [],
        }

    def end_exercise(self) -> None:
        if self.current_exercise is None:
            return
        now = self.clock()
        finished = dict(self.current_exercise)
        finished["end_time"] = now
        finished["duration"] = _secs(now - finished["start_time"])
        self.exercises.append(finished)
        self.current_exercise = None

    # --- reporting ------------------------------------------------------

    def summary(self) -> dict:
        total = self.total_duration()
        set_count = len(self.sets)
        work = sum(s["duration"] for s in self.sets)
        rest = sum(s["rest_before"] for s in self.sets)

        return {
            "total_duration": total,
            "work_time": work,
            "rest_time": rest,
            "other_time": total - work - rest,
            "set_count": set_count,
            "exercise_count": len(self.exercises) + (1 if self.current_exercise else 0),
            "avg_set_duration": round(work / set_count) if set_count else 0,
            "avg_rest_duration": round(rest / (set_count - 1)) if set_count > 1 else 0,
            "exercises": list(self.exercises),
            "sets": list(self.sets),
            "efficiency": round(work / total * 100) if total > 0 else 0,
        }

    def to_dict(self) -> dict:
        return {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "paused_at": self.paused_at,
            "total_paused": self.total_paused,
            "state": self.state,
            "sets": self.sets,
            "exercises": self.exercises,
            "current_set": self.current_set,
            "current_exercise": self.current_exercise,
            "rest_start": self.rest_start,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict], clock: Optional[Callable[[], float]] = None) -> "WorkoutTimer":
        timer = cls(clock=clock)
        if not data:
            return timer
        # Never alias the caller's dict; sub-timers mutate nested lists
        data = copy.deepcopy(data)
        state = data.get("state") or IDLE
        if state not in TIMER_STATES:
            raise TimerStateError(f"Unknown timer state: {state}")
        timer.start_time = data.get("start_time")
        timer.end_time = data.get("end_time")
        timer.paused_at = data.get("paused_at")
        timer.total_paused = data.get("total_paused") or 0.0
        timer.state = state
        timer.sets = list(data.get("sets") or [])
        timer.exercises = list(data.get("exercises") or [])
        timer.current_set = data.get("current_set")
        timer.current_exercise = data.get("current_exercise")
        timer.rest_start = data.get("rest_start")
        return timer


# --- duration analytics -------------------------------------------------


def calculate_workout_metrics(sessions: list[dict]) -> dict:
    """Aggregate completed session summaries.

    Each session needs `date` plus the `summary()` fields it has.
    """
    if not sessions:
        return {
            "total_workouts": 0,
            "total_duration": 0,
            "average_duration": 0,
            "shortest_workout": 0,
            "longest_workout": 0,
            "total_work_time": 0,
            "total_rest_time": 0,
            "average_rest_time": 0,
            "workout_frequency": 0,
            "efficiency_trend": [],
            "average_efficiency": 0,
        }

    durations = [d for d in (s.get("total_duration") or 0 for s in sessions) if d > 0]
    work_times = [d for d in (s.get("work_time") or 0 for s in sessions) if d > 0]
    rest_times = [d for d in (s.get("rest_time") or 0 for s in sessions) if d > 0]

    total_duration = sum(durations)
    total_rest = sum(rest_times)

    ordered = sorted(sessions, key=lambda s: s["date"])
    span_days = max(1, (ordered[-1]["date"] - ordered[0]["date"]).days)
    frequency = len(sessions) / span_days * 7

    trend = []
    for s in ordered[-10:]:
        efficiency = s.get("efficiency")
        if not efficiency:
            total = s.get("total_duration") or 0
            efficiency = round((s.get("work_time") or 0) / total * 100) if total > 0 else 0
        trend.append({"date": s["date"], "efficiency": efficiency})

    return {
        "total_workouts": len(sessions),
        "total_duration": total_duration,
        "average_duration": round(total_duration / len(durations)) if durations else 0,
        "shortest_workout": min(durations) if durations else 0,
        "longest_workout": max(durations) if durations else 0,
        "total_work_time": sum(work_times),
        "total_rest_time": total_rest,
        "average_rest_time": round(total_rest / len(rest_times)) if rest_times else 0,
        "workout_frequency": round(frequency, 1),
        "efficiency_trend": trend,
        "average_efficiency": round(sum(e["efficiency"] for e in trend) / len(trend)) if trend else 0,
    }


PRIORITY_ORDER = {"high": 3, "medium": 2, "low": 1}


def generate_duration_recommendations(metrics: dict, current: Optional[dict] = None) -> list[dict]:
    if metrics["total_workouts"] == 0:
        return [
            {
                "type": "info",
                "title": "Welcome to Workout Tracking!",
                "message": "Start timing your workouts to get personalized insights and recommendations.",
                "priority": "low",
            }
        ]

    recs = []
    avg = metrics["average_duration"]
    if avg > 5400:
        recs.append(
            {
                "type": "warning",
                "title": "Long Workout Duration",
                "message": f"Your average workout is {format_duration(avg)}. Consider shortening sessions to maintain intensity.",
                "priority": "medium",
            }
        )
    elif 0 < avg < 1800:
        recs.append(
            {
                "type": "info",
                "title": "Short Workout Duration",
                "message": f"Your average workout is {format_duration(avg)}. You might benefit from longer sessions.",
                "priority": "low",
            }
        )

    eff = metrics["average_efficiency"]
    if 0 < eff < 30:
        recs.append(
            {
                "type": "tip",
                "title": "Improve Workout Efficiency",
                "message": f"Your workouts are {eff}% efficient. Try reducing rest times or eliminating distractions.",
                "priority": "medium",
            }
        )
    elif eff > 70:
        recs.append(
            {
                "type": "success",
                "title": "Great Workout Efficiency!",
                "message": f"Your workouts are {eff}% efficient. You're making great use of your time.",
                "priority": "low",
            }
        )

    freq = metrics["workout_frequency"]
    if 0 < freq < 2:
        recs.append(
            {
                "type": "info",
                "title": "Increase Workout Frequency",
                "message": f"You're averaging {freq} workouts per week. Aim for 3-4 sessions for optimal results.",
                "priority": "medium",
            }
        )
    elif freq > 6:
        recs.append(
            {
                "type": "warning",
                "title": "High Workout Frequency",
                "message": f"You're averaging {freq} workouts per week. Make sure to include rest days for recovery.",
                "priority": "high",
            }
        )

    if current:
        duration = current.get("total_duration") or current.get("elapsed") or 0
        if duration > 5400:
            recs.append(
                {
                    "type": "warning",
                    "title": "Long Current Session",
                    "message": f"Current workout: {format_duration(duration)}. Consider wrapping up to maintain quality.",
                    "priority": "high",
                }
            )
        if current.get("efficiency") and current["efficiency"] < 40:
            recs.append(
                {
                    "type": "tip",
                    "title": "Focus on Efficiency",
                    "message": f"Current efficiency: {current['efficiency']}%. Try to minimize rest times between sets.",
                    "priority": "medium",
                }
            )

    return sorted(recs, key=lambda r: PRIORITY_ORDER[r["priority"]], reverse=True)
