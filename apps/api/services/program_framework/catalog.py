"""
Exercise Catalog

The fixed set of exercises the generator can prescribe.
Read-only: the catalog is a tuple of frozen dataclasses, so filtering
always produces new collections and nothing leaks between requests.

Usage:
    squat = get_exercise("Barbell Squat")
    lifts = main_lifts()
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple

from .constants import Equipment, ExerciseCategory, MuscleGroup

BD = Equipment.BARBELL_DUMBBELL
GM = Equipment.GUIDED_MACHINES
BW = Equipment.BODYWEIGHT


@dataclass(frozen=True)
class Exercise:
    """A catalog exercise."""
    name: str
    category: ExerciseCategory
    muscle_group: MuscleGroup
    muscles: Tuple[str, ...]  # descriptive only
    equipment: FrozenSet[Equipment] = frozenset()  # empty = always available


def _ex(name, category, group, muscles, equipment=()) -> Exercise:
    return Exercise(
        name=name,
        category=category,
        muscle_group=group,
        muscles=tuple(muscles),
        equipment=frozenset(equipment),
    )


P = ExerciseCategory.PRIMARY_LIFT
S = ExerciseCategory.SECONDARY_COMPOUND
H = ExerciseCategory.HEAVY_ISOLATION
L = ExerciseCategory.LIGHT_ISOLATION

EXERCISE_CATALOG: Tuple[Exercise, ...] = (
    # Primary lifts
    _ex("Barbell Squat", P, MuscleGroup.LEGS, ["quadriceps", "glutes", "lower back"], [BD]),
    _ex("Bench Press", P, MuscleGroup.CHEST, ["chest", "triceps", "front delts"], [BD]),
    _ex("Deadlift", P, MuscleGroup.BACK, ["hamstrings", "glutes", "lower back", "lats", "traps"], [BD]),
    _ex("Overhead Press", P, MuscleGroup.SHOULDERS, ["shoulders", "triceps"], [BD]),

    # Secondary compounds
    _ex("Incline Dumbbell Press", S, MuscleGroup.CHEST, ["upper chest", "triceps", "shoulders"], [BD]),
    _ex("Barbell Row", S, MuscleGroup.BACK, ["lats", "traps", "biceps"], [BD]),
    _ex("Pull-Ups", S, MuscleGroup.BACK, ["lats", "biceps"], [BW]),
    _ex("Dips", S, MuscleGroup.CHEST, ["chest", "triceps", "shoulders"], [BW]),
    _ex("Leg Press", S, MuscleGroup.LEGS, ["quadriceps", "glutes"], [GM]),
    _ex("Dumbbell Lunges", S, MuscleGroup.LEGS, ["quadriceps", "glutes", "hamstrings"], [BD]),
    _ex("Lat Pulldown", S, MuscleGroup.BACK, ["lats", "biceps"], [GM]),
    _ex("Push-Ups", S, MuscleGroup.CHEST, ["chest", "triceps", "shoulders"]),
    _ex("Inverted Rows", S, MuscleGroup.BACK, ["lats", "biceps", "traps"], [BW]),
    _ex("Bulgarian Split Squat", S, MuscleGroup.LEGS, ["quadriceps", "glutes", "hamstrings"], [BD]),
    _ex("Romanian Deadlift", S, MuscleGroup.BACK, ["hamstrings", "glutes", "lower back"], [BD]),

    # Heavy isolation
    _ex("Leg Extension", H, MuscleGroup.LEGS, ["quadriceps"], [GM]),
    _ex("Leg Curl", H, MuscleGroup.LEGS, ["hamstrings"], [GM]),
    _ex("Barbell Curl", H, MuscleGroup.BICEPS, ["biceps"], [BD]),
    _ex("Overhead Cable Triceps Extension", H, MuscleGroup.TRICEPS, ["triceps"], [GM]),
    _ex("Incline Dumbbell Curl", H, MuscleGroup.BICEPS, ["biceps (long head)"], [BD]),
    _ex("Preacher Curl", H, MuscleGroup.BICEPS, ["biceps (short head)"], [BD, GM]),
    _ex("Reverse Curl", H, MuscleGroup.BICEPS, ["brachialis", "forearms"], [BD]),

    # Light isolation
    _ex("Dumbbell Lateral Raise", L, MuscleGroup.SHOULDERS, ["side delts"], [BD]),
    _ex("Crunches", L, MuscleGroup.ABS, ["abs"]),
    _ex("Leg Raises", L, MuscleGroup.ABS, ["lower abs", "hip flexors"]),
    _ex("Calf Raises", L, MuscleGroup.LEGS, ["calves"]),
    _ex("Face Pulls", L, MuscleGroup.BACK, ["rear delts", "traps", "external rotators"], [GM]),
    _ex("Rope Pushdown", L, MuscleGroup.TRICEPS, ["triceps"], [GM]),
    _ex("Cable Lateral Raise", L, MuscleGroup.SHOULDERS, ["side delts"], [GM]),
)

_BY_NAME: Dict[str, Exercise] = {ex.name: ex for ex in EXERCISE_CATALOG}


def get_exercise(name: str) -> Optional[Exercise]:
    """Look up a catalog exercise by exact name."""
    return _BY_NAME.get(name)


def exercise_names() -> Tuple[str, ...]:
    return tuple(_BY_NAME)


def main_lifts() -> Tuple[Exercise, ...]:
    """Primary lifts in catalog order (squat, bench, deadlift, overhead press)."""
    return tuple(ex for ex in EXERCISE_CATALOG if ex.category == ExerciseCategory.PRIMARY_LIFT)


def main_lift_names() -> Tuple[str, ...]:
    return tuple(ex.name for ex in main_lifts())
