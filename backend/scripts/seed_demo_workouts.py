from datetime import date, timedelta
import random

from ironlog.core.config import settings
from ironlog.db import Base, SessionLocal, engine
from ironlog.models.body_weight import BodyWeight
from ironlog.models.workout import Workout


def clear_recent(db, user_id: str, days: int = 120) -> None:
    """Delete workouts and weigh-ins in the last N days so we can reseed cleanly."""
    cutoff = date.today() - timedelta(days=days)
    db.query(Workout).filter(Workout.user_id == user_id, Workout.date >= cutoff).delete()
    db.query(BodyWeight).filter(BodyWeight.user_id == user_id, BodyWeight.date >= cutoff).delete()
    db.commit()


def seed_demo_workouts(db, user_id: str) -> None:
    """Insert a 12-week push/pull/legs block with a slow linear progression."""
    today = date.today()
    # Go back 11 full weeks + current week (12 total)
    start_day = today - timedelta(weeks=11)

    rows = []
    body_weight = 182.0

    for week in range(12):
        week_start = start_day + timedelta(weeks=week)

        # Mon push, Wed pull, Fri legs
        plan = [
            (week_start, "Bench Press", 135, 8),
            (week_start, "Overhead Press", 85, 8),
            (week_start + timedelta(days=2), "Bent Over Row", 115, 10),
            (week_start + timedelta(days=2), "Bicep Curls", 30, 12),
            (week_start + timedelta(days=4), "Squat", 185, 6),
            (week_start + timedelta(days=4), "Romanian Deadlift", 155, 8),
        ]

        for d, exercise, base, reps in plan:
            # Skip future days
            if d > today:
                continue
            rows.append(
                Workout(
                    user_id=user_id,
                    exercise=exercise,
                    sets=3,
                    reps=reps + random.choice([0, 0, 1]),
                    weight=base + 2.5 * week,
                    date=d,
                    notes="demo",
                )
            )

        weigh_in = week_start + timedelta(days=6)
        if weigh_in <= today:
            body_weight += random.uniform(-0.6, 0.3)
            rows.append(
                BodyWeight(
                    user_id=user_id,
                    weight=round(body_weight, 1),
                    unit=settings.weight_unit,
                    date=weigh_in,
                )
            )

    if rows:
        db.add_all(rows)
        db.commit()

    print(f"Seeded {len(rows)} demo rows for {user_id}")


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        clear_recent(db, settings.default_user_id, days=150)
        seed_demo_workouts(db, settings.default_user_id)
    finally:
        db.close()


if __name__ == "__main__":
    main()
