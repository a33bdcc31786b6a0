#!/usr/bin/env python3
"""
Seed one 12-week training cycle into the IronLog API.

Pattern per week (Mon–Sun):
  - Mon: Bench Press, Bent Over Row
  - Wed: Squat, Overhead Press
  - Fri: Deadlift, Incline Bench Press
  - Sat: body-weight check-in

Sets and reps follow the cycle (hypertrophy 4 wk, strength 4, power 3,
deload 1) and the working weight climbs a little every week.

Usage examples:
  - Against a local backend:
      python scripts/seed_12_weeks.py --base-url http://localhost:8000
  - For a specific user:
      python scripts/seed_12_weeks.py --base-url http://localhost:8000 --user-id alice
"""

from __future__ import annotations

import argparse
import datetime as dt

import httpx


# (sets, reps, weekly load multiplier) per week of the cycle
CYCLE = (
    [(4, 10, 1.00 + 0.02 * w) for w in range(4)]      # hypertrophy
    + [(5, 5, 1.10 + 0.025 * w) for w in range(4)]    # strength
    + [(5, 3, 1.20 + 0.02 * w) for w in range(3)]     # power
    + [(3, 8, 0.70)]                                  # deload
)

DAYS = {
    0: [("Bench Press", 135), ("Bent Over Row", 115)],
    2: [("Squat", 185), ("Overhead Press", 85)],
    4: [("Deadlift", 225), ("Incline Bench Press", 115)],
}

START_BODY_WEIGHT = 185.0


def monday_of_week(d: dt.date) -> dt.date:
    return d - dt.timedelta(days=d.weekday())


def round_to_plate(x: float) -> float:
    # Smallest common plate pair is 2 x 2.5 lbs
    return round(x / 5) * 5


def post_json(client: httpx.Client, path: str, payload: dict, user_id: str) -> None:
    r = client.post(path, json=payload, params={"user_id": user_id})
    if r.status_code >= 300:
        raise RuntimeError(f"{path} -> HTTP {r.status_code}: {r.text}")


def seed_week(client: httpx.Client, week_start: dt.date, week_idx: int, user_id: str) -> None:
    sets, reps, load = CYCLE[week_idx]
    today = dt.date.today()

    for dow, lifts in DAYS.items():
        day = week_start + dt.timedelta(days=dow)
        if day > today:
            continue
        for exercise, base in lifts:
            post_json(
                client,
                "/workouts/",
                {
                    "exercise": exercise,
                    "sets": sets,
                    "reps": reps,
                    "weight": round_to_plate(base * load),
                    "date": day.isoformat(),
                    "notes": "seed",
                },
                user_id,
            )

    check_in = week_start + dt.timedelta(days=5)
    if check_in <= today:
        post_json(
            client,
            "/weights/",
            {"weight": round(START_BODY_WEIGHT - 0.4 * week_idx, 1), "date": check_in.isoformat(), "notes": "seed"},
            user_id,
        )


def main() -> None:
    ap = argparse.ArgumentParser(description="Seed a 12-week training cycle of workouts and weigh-ins")
    ap.add_argument("--base-url", required=True, help="API base URL (e.g., http://localhost:8000)")
    ap.add_argument("--user-id", default="default-user", help="User to seed (default: default-user)")
    args = ap.parse_args()

    this_monday = monday_of_week(dt.date.today())
    # 12 week starts ending with the current week
    week_starts = [this_monday - dt.timedelta(weeks=11 - i) for i in range(12)]

    with httpx.Client(base_url=args.base_url.rstrip("/"), timeout=15) as client:
        for idx, ws in enumerate(week_starts):
            seed_week(client, ws, idx, args.user_id)

    print("Seed complete: 12 weeks created.")


if __name__ == "__main__":
    main()
