"""
Constants for program generation.

These are DEFAULTS that can be overridden by config (program_rules.yaml).
They exist here for type safety and documentation.
"""

from enum import Enum
from typing import Any, Dict, List, Tuple


class Objective(str, Enum):
    """Training goal selected by the user."""
    MASS_GAIN = "mass_gain"
    FAT_LOSS = "fat_loss"
    POWERLIFTING = "powerlifting"
    POWERBUILDING = "powerbuilding"


class ExperienceLevel(str, Enum):
    """Self-reported training age."""
    BEGINNER = "beginner"          # < 1 year
    INTERMEDIATE = "intermediate"  # 1-3 years
    ADVANCED = "advanced"          # 3+ years


class ProgrammingStyle(str, Enum):
    """How a day's exercises get prescribed."""
    ACCESSORY = "accessory"            # RPE-driven constrained selection
    TRAINING_MAX = "training_max"      # 5/3/1 percentages off a training max


class ExerciseCategory(str, Enum):
    """Exercise tiers, heaviest first."""
    PRIMARY_LIFT = "primary_lift"
    SECONDARY_COMPOUND = "secondary_compound"
    HEAVY_ISOLATION = "heavy_isolation"
    LIGHT_ISOLATION = "light_isolation"


class MuscleGroup(str, Enum):
    """Coarse muscle groups used for filtering and daily caps."""
    LEGS = "legs"
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    ABS = "abs"
    CALVES = "calves"
    FOREARMS = "forearms"


class Equipment(str, Enum):
    """Equipment tags a user can tick."""
    BARBELL_DUMBBELL = "barbell-dumbbell"
    GUIDED_MACHINES = "guided-machines"
    BODYWEIGHT = "bodyweight"


class SplitType(str, Enum):
    """Weekly split, derived from training days."""
    FULL_BODY = "full_body"
    UPPER_LOWER = "upper_lower"
    PUSH_PULL_LEGS = "push_pull_legs"


# Every objective maps to exactly one programming style.
PROGRAMMING_STYLES: Dict[Objective, ProgrammingStyle] = {
    Objective.MASS_GAIN: ProgrammingStyle.ACCESSORY,
    Objective.FAT_LOSS: ProgrammingStyle.ACCESSORY,
    Objective.POWERLIFTING: ProgrammingStyle.TRAINING_MAX,
    Objective.POWERBUILDING: ProgrammingStyle.TRAINING_MAX,
}

OBJECTIVE_LABELS = {
    Objective.MASS_GAIN: "Mass Gain",
    Objective.FAT_LOSS: "Fat Loss",
    Objective.POWERLIFTING: "Powerlifting",
    Objective.POWERBUILDING: "Powerbuilding",
}

EQUIPMENT_LABELS = {
    Equipment.BARBELL_DUMBBELL: "Barbells & dumbbells",
    Equipment.GUIDED_MACHINES: "Guided machines",
    Equipment.BODYWEIGHT: "Bodyweight stations (bar, dip station)",
}

EXPERIENCE_LABELS = {
    ExperienceLevel.BEGINNER: "Beginner (< 1 year)",
    ExperienceLevel.INTERMEDIATE: "Intermediate (1-3 years)",
    ExperienceLevel.ADVANCED: "Advanced (3+ years)",
}

# Sort order within a day
CATEGORY_PRIORITY = {
    ExerciseCategory.PRIMARY_LIFT: 1,
    ExerciseCategory.SECONDARY_COMPOUND: 2,
    ExerciseCategory.HEAVY_ISOLATION: 3,
    ExerciseCategory.LIGHT_ISOLATION: 4,
}

ISOLATION_CATEGORIES = frozenset({
    ExerciseCategory.HEAVY_ISOLATION,
    ExerciseCategory.LIGHT_ISOLATION,
})

# Groups limited to LARGE_GROUP_DAILY_CAP exercises per day and to the weekly set cap
LARGE_MUSCLE_GROUPS = frozenset({
    MuscleGroup.LEGS,
    MuscleGroup.CHEST,
    MuscleGroup.BACK,
})

ARM_GROUPS = (MuscleGroup.BICEPS, MuscleGroup.TRICEPS)

PROGRAM_WEEKS = 4

MAX_EXERCISES_PER_DAY = 8
LARGE_GROUP_DAILY_CAP = 2
WEEKLY_VOLUME_CAP = 15          # sets per large group per week

# Cascade limits
MAX_PRIMARY_LIFTS_PER_DAY = 2
MAX_SECONDARY_COMPOUNDS_PER_DAY = 3

# Session budget
MINUTES_PER_SET = 2.5           # work set + rest
SHORT_SESSION_THRESHOLD_MINUTES = 45
SHORT_SESSION_SETS = 2
STANDARD_SETS = 3

REPS_FAT_LOSS = "12-15"
REPS_DEFAULT = "8-12"

# Training max
TRAINING_MAX_FACTOR = 0.9
WEIGHT_INCREMENT = 2.5
WEIGHT_UNIT = "kg"

# RPE progression per tier, indexed by week number
RPE_PROGRESSION: Dict[ExerciseCategory, Dict[int, float]] = {
    ExerciseCategory.PRIMARY_LIFT: {1: 6, 2: 7, 3: 8, 4: 10},
    ExerciseCategory.SECONDARY_COMPOUND: {1: 7, 2: 7.5, 3: 8, 4: 9},
    ExerciseCategory.HEAVY_ISOLATION: {1: 8, 2: 8.5, 3: 9, 4: 10},
    ExerciseCategory.LIGHT_ISOLATION: {1: 10, 2: 10, 3: 10, 4: 10},  # to failure
}

# 5/3/1 cycle. amrap_set_index is 0-based; None means no AMRAP set.
CYCLE_WEEKS: List[Dict[str, Any]] = [
    {"week": 1, "percentages": [0.65, 0.75, 0.85], "reps": ["5", "5", "5+"], "amrap_set_index": 2},
    {"week": 2, "percentages": [0.70, 0.80, 0.90], "reps": ["3", "3", "3+"], "amrap_set_index": 2},
    {"week": 3, "percentages": [0.75, 0.85, 0.95], "reps": ["5", "3", "1+"], "amrap_set_index": 2},
    {"week": 4, "percentages": [0.40, 0.50, 0.60], "reps": ["5", "5", "5"], "amrap_set_index": None},  # deload
]

# Split tables. Day index wraps modulo the number of split days.
SPLIT_DAYS: Dict[SplitType, List[Tuple[str, Tuple[MuscleGroup, ...]]]] = {
    SplitType.FULL_BODY: [
        ("Full Body", tuple(MuscleGroup)),
    ],
    SplitType.UPPER_LOWER: [
        ("Upper", (
            MuscleGroup.CHEST,
            MuscleGroup.BACK,
            MuscleGroup.SHOULDERS,
            MuscleGroup.BICEPS,
            MuscleGroup.TRICEPS,
        )),
        ("Lower", (
            MuscleGroup.LEGS,
            MuscleGroup.ABS,
            MuscleGroup.CALVES,
            MuscleGroup.FOREARMS,
        )),
    ],
    SplitType.PUSH_PULL_LEGS: [
        ("Push", (MuscleGroup.CHEST, MuscleGroup.SHOULDERS, MuscleGroup.TRICEPS)),
        ("Pull", (MuscleGroup.BACK, MuscleGroup.BICEPS, MuscleGroup.FOREARMS)),
        ("Legs", (MuscleGroup.LEGS, MuscleGroup.ABS, MuscleGroup.CALVES)),
    ],
}

SPLIT_LABELS = {
    SplitType.FULL_BODY: "Full Body",
    SplitType.UPPER_LOWER: "Upper / Lower",
    SplitType.PUSH_PULL_LEGS: "Push Pull Legs",
}

MIN_DAYS_PER_WEEK = 1
MAX_DAYS_PER_WEEK = 6
MIN_SESSION_MINUTES = 15
MAX_SESSION_MINUTES = 180
