"""Exercise catalogue: movement categories split into rotation tiers."""

EXERCISE_CATEGORIES = {
    "CHEST": {
        "primary": ["Bench Press", "Incline Bench Press", "Decline Bench Press"],
        "secondary": ["Dumbbell Press", "Dumbbell Flyes", "Push-ups", "Dips"],
        "accessory": ["Cable Flyes", "Pec Deck", "Chest Dips"],
    },
    "BACK": {
        "primary": ["Deadlift", "Bent Over Row", "Pull-ups"],
        "secondary": ["T-Bar Row", "Lat Pulldown", "Seated Cable Row"],
        "accessory": ["Face Pulls", "Reverse Flyes", "Shrugs"],
    },
    "LEGS": {
        "primary": ["Squat", "Front Squat", "Romanian Deadlift"],
        "secondary": ["Leg Press", "Bulgarian Split Squat", "Lunges"],
        "accessory": ["Leg Curls", "Leg Extensions", "Calf Raises"],
    },
    "SHOULDERS": {
        "primary": ["Overhead Press", "Push Press"],
        "secondary": ["Dumbbell Shoulder Press", "Arnold Press"],
        "accessory": ["Shoulder Raises", "Lateral Raises", "Rear Delt Flyes"],
    },
    "ARMS": {
        "primary": ["Close-Grip Bench Press", "Weighted Dips"],
        "secondary": ["Bicep Curls", "Tricep Extensions", "Hammer Curls"],
        "accessory": ["Cable Curls", "Overhead Tricep Extension", "Preacher Curls"],
    },
}

TIERS = ("primary", "secondary", "accessory")


def get_exercise_category(exercise: str) -> dict:
    """Category and tier for a catalogue exercise (exact name match).

    Anything not in the catalogue is treated as a primary lift in OTHER.
    """
    for category, tiers in EXERCISE_CATEGORIES.items():
        for tier in TIERS:
            if exercise in tiers[tier]:
                return {"category": category, "tier": tier}
    return {"category": "OTHER", "tier": "primary"}


def exercises_in(categories, include_accessory: bool = False) -> list[str]:
    """Flatten the catalogue for the given categories, in catalogue order."""
    names: list[str] = []
    for category in categories:
        tiers = EXERCISE_CATEGORIES[category]
        names.extend(tiers["primary"])
        names.extend(tiers["secondary"])
        if include_accessory:
            names.extend(tiers["accessory"])
    return names
