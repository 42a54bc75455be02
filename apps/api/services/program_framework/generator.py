"""
Program Generator

Main orchestrator for program generation.
Coordinates all components to produce a complete 4-week program.

Usage:
    generator = ProgramGenerator()

    # Hypertrophy program
    program = generator.generate(ProgramRequest(
        objective="mass_gain",
        days_per_week=4,
        max_session_minutes=60,
        equipment=["barbell-dumbbell", "guided-machines"],
    ))

    # 5/3/1 program
    program = generator.generate(ProgramRequest(
        objective="powerlifting",
        days_per_week=3,
        equipment=["barbell-dumbbell"],
        selected_main_lifts=["Barbell Squat", "Bench Press"],
        lift_observations={
            "Barbell Squat": LiftObservation(weight=140, reps=3),
            "Bench Press": LiftObservation(weight=100, reps=5),
        },
    ))

Each call is stateless: the catalog is read-only and every selection
structure is built fresh for the request.
"""

import logging
import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .catalog import EXERCISE_CATALOG, Exercise
from .config import ProgramRules
from .constants import (
    EXPERIENCE_LABELS,
    OBJECTIVE_LABELS,
    PROGRAM_WEEKS,
    PROGRAMMING_STYLES,
    REPS_DEFAULT,
    REPS_FAT_LOSS,
    SPLIT_LABELS,
    Equipment,
    ExerciseCategory,
    ExperienceLevel,
    MuscleGroup,
    Objective,
    ProgrammingStyle,
)
from .day_composer import DayComposer, DaySelection, PlannedExercise
from .eligibility import filter_by_equipment, filter_by_muscle_groups, is_equipment_compatible
from .split_planner import SplitPlanner
from .training_max import LiftObservation, calculate_training_max, get_cycle_week

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgramRequest:
    """
    Input to the generator. Assumed pre-validated by the caller.

    Strings are accepted for enum fields and coerced.
    """
    objective: Objective
    days_per_week: int
    experience: ExperienceLevel = ExperienceLevel.INTERMEDIATE
    max_session_minutes: Optional[int] = None
    equipment: Tuple[Equipment, ...] = ()
    selected_main_lifts: Tuple[str, ...] = ()
    lift_observations: Mapping[str, LiftObservation] = field(default_factory=dict)
    priority_muscles: Tuple[MuscleGroup, ...] = ()
    priority_exercises: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "objective", Objective(self.objective))
        object.__setattr__(self, "experience", ExperienceLevel(self.experience))
        object.__setattr__(self, "equipment", tuple(Equipment(e) for e in self.equipment or ()))
        object.__setattr__(self, "priority_muscles", tuple(MuscleGroup(m) for m in self.priority_muscles or ()))
        object.__setattr__(self, "selected_main_lifts", tuple(self.selected_main_lifts or ()))
        object.__setattr__(self, "priority_exercises", tuple(self.priority_exercises or ()))
        object.__setattr__(self, "lift_observations", dict(self.lift_observations or {}))

    @property
    def programming_style(self) -> ProgrammingStyle:
        return PROGRAMMING_STYLES[self.objective]


@dataclass
class GeneratedDay:
    """One training day."""
    day_number: int
    split_day: str
    exercises: List[PlannedExercise]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day_number": self.day_number,
            "split_day": self.split_day,
            "exercises": [ex.to_dict() for ex in self.exercises],
        }


@dataclass
class GeneratedWeek:
    """One week of the program. Week 4 is always a deload."""
    week_number: int
    days: List[GeneratedDay]

    @property
    def is_deload(self) -> bool:
        return self.week_number == PROGRAM_WEEKS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "week_number": self.week_number,
            "is_deload": self.is_deload,
            "days": [d.to_dict() for d in self.days],
        }


@dataclass
class GeneratedProgram:
    """Complete generated program."""
    title: str
    description: str
    is531: bool
    weeks: List[GeneratedWeek]

    # Summary
    objective: Objective
    days_per_week: int
    split: str
    training_maxes: Dict[str, float] = field(default_factory=dict)

    def get_week(self, week_num: int) -> Optional[GeneratedWeek]:
        """Get a specific week."""
        for week in self.weeks:
            if week.week_number == week_num:
                return week
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "description": self.description,
            "is531": self.is531,
            "objective": self.objective.value,
            "days_per_week": self.days_per_week,
            "split": self.split,
            "training_maxes": dict(self.training_maxes),
            "weeks": [w.to_dict() for w in self.weeks],
        }


class ProgramGenerator:
    """
    Builds 4-week programs.

    - Mass gain / fat loss: RPE-driven accessory selection per split day
    - Powerlifting / powerbuilding: 5/3/1 main lifts off a training max,
      plus accessory fill
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        rules: Optional[ProgramRules] = None,
        catalog: Tuple[Exercise, ...] = EXERCISE_CATALOG,
    ):
        self.rng = rng or random.Random()
        self.rules = rules or ProgramRules.from_config()
        self.catalog = catalog
        self.split_planner = SplitPlanner()
        self.composer = DayComposer(rules=self.rules, rng=self.rng)

    def generate(self, request: ProgramRequest) -> GeneratedProgram:
        """Generate a program for a validated request."""
        builders = {
            ProgrammingStyle.ACCESSORY: self._generate_accessory_program,
            ProgrammingStyle.TRAINING_MAX: self._generate_training_max_program,
        }
        program = builders[request.programming_style](request)

        logger.info(
            f"Generated {request.objective.value} program: "
            f"{request.days_per_week} days/week, {len(program.weeks)} weeks, "
            f"split={program.split}, is531={program.is531}",
            extra={
                "extra_fields": {
                    "objective": request.objective.value,
                    "days_per_week": request.days_per_week,
                    "weeks": len(program.weeks),
                    "split": program.split,
                    "is531": program.is531,
                    "main_lifts": list(program.training_maxes),
                }
            },
        )
        return program

    def calculate_training_maxes(self, request: ProgramRequest) -> Dict[str, float]:
        """
        Training max per selected main lift, in catalog order.

        Lifts without an observation get 0. Lifts the user has no
        equipment for are left out entirely.
        """
        selected = set(request.selected_main_lifts)
        maxes = {}
        primary_lifts = [ex for ex in self.catalog if ex.category == ExerciseCategory.PRIMARY_LIFT]
        for lift in primary_lifts:
            if lift.name not in selected:
                continue
            if not is_equipment_compatible(lift, request.equipment):
                logger.debug(f"Skipping {lift.name}: equipment not available")
                continue
            obs = request.lift_observations.get(lift.name)
            maxes[lift.name] = calculate_training_max(
                obs.weight,
                obs.reps,
                factor=self.rules.training_max_factor,
                increment=self.rules.weight_increment,
            ) if obs else 0.0
        return maxes

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def _generate_accessory_program(self, request: ProgramRequest) -> GeneratedProgram:
        split = self.split_planner.determine_split(request.days_per_week)
        split_week = self.split_planner.build_week(request.days_per_week)
        available = filter_by_equipment(self.catalog, request.equipment)
        sets = self.rules.sets_for_session(request.max_session_minutes)
        reps = self._reps_for(request.objective)

        weeks = []
        for week_number in range(1, PROGRAM_WEEKS + 1):
            weekly_volume = Counter()
            days = []
            for day_index, split_day in enumerate(split_week):
                pool = filter_by_muscle_groups(available, split_day.muscle_groups)
                selection = DaySelection(
                    self.rules, sets, weekly_volume, request.max_session_minutes
                )
                exercises = self.composer.compose_accessory_day(
                    week_number,
                    pool,
                    selection,
                    reps,
                    priority_exercises=request.priority_exercises,
                    priority_muscles=request.priority_muscles,
                )
                logger.debug(f"Week {week_number} day {day_index + 1} ({split_day.name}): {len(exercises)} exercises")
                days.append(GeneratedDay(day_index + 1, split_day.name, exercises))
            weeks.append(GeneratedWeek(week_number, days))

        label = OBJECTIVE_LABELS[request.objective]
        return GeneratedProgram(
            title=f"{label} Program - {request.days_per_week} days/week",
            description=(
                f"Personalized {SPLIT_LABELS[split]} program for your {label.lower()} goal "
                f"({EXPERIENCE_LABELS[request.experience]})."
            ),
            is531=False,
            weeks=weeks,
            objective=request.objective,
            days_per_week=request.days_per_week,
            split=split.value,
        )

    def _generate_training_max_program(self, request: ProgramRequest) -> GeneratedProgram:
        split = self.split_planner.determine_split(request.days_per_week)
        split_week = self.split_planner.build_week(request.days_per_week)
        available = filter_by_equipment(self.catalog, request.equipment)
        sets = self.rules.sets_for_session(request.max_session_minutes)
        reps = self._reps_for(request.objective)

        training_maxes = self.calculate_training_maxes(request)
        lifts_by_day = self._distribute_main_lifts(training_maxes, request.days_per_week)

        weeks = []
        for week_number in range(1, PROGRAM_WEEKS + 1):
            cycle_week = get_cycle_week(week_number)
            weekly_volume = Counter()
            days = []
            for day_index, split_day in enumerate(split_week):
                pool = filter_by_muscle_groups(available, split_day.muscle_groups)
                selection = DaySelection(
                    self.rules, sets, weekly_volume, request.max_session_minutes
                )
                exercises = self.composer.compose_training_max_day(
                    cycle_week,
                    lifts_by_day[day_index],
                    pool,
                    selection,
                    reps,
                    priority_exercises=request.priority_exercises,
                    priority_muscles=request.priority_muscles,
                )
                days.append(GeneratedDay(day_index + 1, split_day.name, exercises))
            weeks.append(GeneratedWeek(week_number, days))

        label = OBJECTIVE_LABELS[request.objective]
        return GeneratedProgram(
            title=f"5/3/1 Program - {label}",
            description=(
                f"Program based on Jim Wendler's 5/3/1 method for "
                f"{request.days_per_week} days/week ({EXPERIENCE_LABELS[request.experience]})."
            ),
            is531=True,
            weeks=weeks,
            objective=request.objective,
            days_per_week=request.days_per_week,
            split=split.value,
            training_maxes={name: tm for name, tm in training_maxes.items() if tm > 0},
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _distribute_main_lifts(
        self,
        training_maxes: Dict[str, float],
        days_per_week: int,
    ) -> List[List[Tuple[Exercise, float]]]:
        """Round-robin: lift i goes to day i % days_per_week."""
        by_name = {ex.name: ex for ex in self.catalog}
        lifts_by_day: List[List[Tuple[Exercise, float]]] = [[] for _ in range(days_per_week)]
        for index, (name, tm) in enumerate(training_maxes.items()):
            lifts_by_day[index % days_per_week].append((by_name[name], tm))
        return lifts_by_day

    def _reps_for(self, objective: Objective) -> str:
        return REPS_FAT_LOSS if objective == Objective.FAT_LOSS else REPS_DEFAULT


def generate_program(request: ProgramRequest, rng: Optional[random.Random] = None) -> GeneratedProgram:
    """Single entry point for callers."""
    return ProgramGenerator(rng=rng).generate(request)
