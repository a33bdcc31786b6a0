"""Shared application constants.

Centralizes repeat values used across logging, goals and analytics so we
can document and adjust them in one place.
"""

# Body weight entries outside (0, MAX_BODY_WEIGHT] are rejected
MAX_BODY_WEIGHT = 1000

# Brzycki one-rep-max estimate: weight / (BRZYCKI_A - BRZYCKI_B * reps)
BRZYCKI_A = 1.0278
BRZYCKI_B = 0.0278

# Paging limits shared by list endpoints
MAX_PAGE_SIZE = 100
DEFAULT_GOAL_LIMIT = 50
# Recent workouts and weigh-ins read when predicting goal outcomes
PREDICTION_HISTORY = 100

# Allowed goal status moves. Archived and Cancelled are terminal.
GOAL_TRANSITIONS = {
    "Active": {"Paused", "Completed", "Cancelled"},
    "Paused": {"Active", "Cancelled"},
    "Completed": {"Archived"},
    "Cancelled": set(),
    "Archived": set(),
}

BUDDY_PENDING = "pending"
BUDDY_ACCEPTED = "accepted"
BUDDY_REMOVED = "removed"


def estimated_1rm(weight: float, reps: int) -> float:
    """Brzycki estimate; a single rep is its own max."""
    if reps == 1:
        return float(weight)
    # Formula diverges at 37 reps
    reps = min(reps, 36)
    return weight / (BRZYCKI_A - BRZYCKI_B * reps)
