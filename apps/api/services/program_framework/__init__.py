# Program Generation Framework
#
# Builds 4-week strength and hypertrophy programs from a user's goals,
# constraints and (for strength goals) measured lifts.
#
# Architecture:
# - Read-only exercise catalog
# - Pure eligibility filters (equipment, muscle groups)
# - Split planner (days/week -> per-day muscle targets)
# - Day composer (priority cascade, caps, arm pairing, 5/3/1 main lifts)
# - Config-driven limits (program_rules.yaml)
# - Stateless generator; randomness comes from an injected source

from .config import ConfigService, ProgramRules
from .catalog import EXERCISE_CATALOG, Exercise, get_exercise, main_lift_names, main_lifts
from .eligibility import filter_by_equipment, filter_by_muscle_groups
from .split_planner import SplitPlanner, SplitDay
from .training_max import (
    LiftObservation,
    SetDetail,
    calculate_training_max,
    estimate_one_rep_max,
    round_to_increment,
)
from .day_composer import DayComposer, PlannedExercise
from .generator import (
    ProgramGenerator,
    ProgramRequest,
    GeneratedProgram,
    GeneratedWeek,
    GeneratedDay,
    generate_program,
)
from .constants import (
    Objective,
    ExperienceLevel,
    ExerciseCategory,
    MuscleGroup,
    Equipment,
    SplitType,
)

__all__ = [
    # Core services
    'ConfigService',
    'ProgramRules',

    # Catalog + filters
    'EXERCISE_CATALOG',
    'Exercise',
    'get_exercise',
    'main_lifts',
    'main_lift_names',
    'filter_by_equipment',
    'filter_by_muscle_groups',

    # Generator components
    'SplitPlanner',
    'SplitDay',
    'LiftObservation',
    'SetDetail',
    'calculate_training_max',
    'estimate_one_rep_max',
    'round_to_increment',
    'DayComposer',
    'PlannedExercise',

    # Main generator
    'ProgramGenerator',
    'ProgramRequest',
    'GeneratedProgram',
    'GeneratedWeek',
    'GeneratedDay',
    'generate_program',

    # Constants
    'Objective',
    'ExperienceLevel',
    'ExerciseCategory',
    'MuscleGroup',
    'Equipment',
    'SplitType',
]
