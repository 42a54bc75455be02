"""
Day Composer

Selects and orders the exercises for one training day.

Selection runs a priority cascade over the day-eligible pool:
    1. user priority exercises
    2. user priority muscle groups
    3. primary lifts (accessory path only)
    4. secondary compounds
    5. biceps/triceps isolation, strictly in pairs
    6. random fill from the remaining accessories

Every addition must fit the day: exercise cap, large-group daily cap,
weekly set cap for large groups, and the session time budget.

On the training-max path the main lifts are placed first with their
5/3/1 set details, then the cascade fills the rest.
"""

import logging
import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .catalog import Exercise
from .config import ProgramRules
from .constants import (
    CATEGORY_PRIORITY,
    LARGE_MUSCLE_GROUPS,
    RPE_PROGRESSION,
    WEIGHT_UNIT,
    ExerciseCategory,
    MuscleGroup,
)
from .eligibility import is_arm_isolation
from .training_max import CycleWeek, SetDetail, build_set_details

logger = logging.getLogger(__name__)


@dataclass
class PlannedExercise:
    """An exercise as prescribed on a given day."""
    name: str
    category: ExerciseCategory
    sets: str
    reps: str
    notes: Optional[str] = None
    muscles: List[str] = field(default_factory=list)
    sets_details: Optional[List[SetDetail]] = None

    @property
    def is_main_lift(self) -> bool:
        return self.sets_details is not None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "category": self.category.value,
            "sets": self.sets,
            "reps": self.reps,
            "notes": self.notes,
            "muscles": list(self.muscles),
        }
        if self.sets_details is not None:
            data["sets_details"] = [s.to_dict() for s in self.sets_details]
        return data


def format_number(value: float) -> str:
    """8.0 -> '8', 7.5 -> '7.5'."""
    return str(int(value)) if float(value).is_integer() else str(value)


def rpe_note(category: ExerciseCategory, week_number: int) -> Optional[str]:
    rpe = RPE_PROGRESSION.get(category, {}).get(week_number)
    if rpe is None:
        return None
    return f"RPE {format_number(rpe)}"


def sort_by_category(exercises: Iterable[PlannedExercise]) -> List[PlannedExercise]:
    """Primary lifts first, light isolation last. Stable within a tier."""
    return sorted(exercises, key=lambda ex: CATEGORY_PRIORITY.get(ex.category, 99))


class DaySelection:
    """
    Mutable selection state for a single day.

    `weekly_volume` is shared by every day of the same week so the
    weekly set cap holds across days.
    """

    def __init__(
        self,
        rules: ProgramRules,
        sets_per_exercise: int,
        weekly_volume: Counter,
        minutes_budget: Optional[float] = None,
    ):
        self.rules = rules
        self.sets_per_exercise = sets_per_exercise
        self.weekly_volume = weekly_volume
        self.minutes_budget = minutes_budget
        self.exercises: List[Exercise] = []
        self.main_lifts: List[Tuple[Exercise, int]] = []
        self.names = set()
        self.group_counts: Counter = Counter()
        self.minutes_used = 0.0

    @property
    def count(self) -> int:
        return len(self.main_lifts) + len(self.exercises)

    @property
    def is_full(self) -> bool:
        return self.count >= self.rules.max_exercises_per_day

    def has(self, name: str) -> bool:
        return name in self.names

    def category_count(self, category: ExerciseCategory) -> int:
        placed = [ex for ex, _ in self.main_lifts] + self.exercises
        return sum(1 for ex in placed if ex.category == category)

    def fits(self, *candidates: Exercise) -> bool:
        """Whether all candidates can be added together."""
        if self.count + len(candidates) > self.rules.max_exercises_per_day:
            return False

        names = [ex.name for ex in candidates]
        if len(set(names)) != len(names) or any(self.has(n) for n in names):
            return False

        added_per_group = Counter(
            ex.muscle_group for ex in candidates if ex.muscle_group in LARGE_MUSCLE_GROUPS
        )
        for group, added in added_per_group.items():
            if self.group_counts[group] + added > self.rules.large_group_daily_cap:
                return False
            weekly = self.weekly_volume[group] + added * self.sets_per_exercise
            if weekly > self.rules.weekly_volume_cap:
                return False

        if self.minutes_budget is not None:
            cost = len(candidates) * self._minutes_for(self.sets_per_exercise)
            if self.minutes_used + cost > self.minutes_budget:
                return False

        return True

    def add(self, exercise: Exercise):
        self.exercises.append(exercise)
        self._account(exercise, self.sets_per_exercise)

    def place_main_lift(self, exercise: Exercise, sets: int):
        """Main lifts are placed unconditionally but still count toward caps."""
        self.main_lifts.append((exercise, sets))
        self._account(exercise, sets)

    def _account(self, exercise: Exercise, sets: int):
        self.names.add(exercise.name)
        if exercise.muscle_group in LARGE_MUSCLE_GROUPS:
            self.group_counts[exercise.muscle_group] += 1
            self.weekly_volume[exercise.muscle_group] += sets
        self.minutes_used += self._minutes_for(sets)

    def _minutes_for(self, sets: int) -> float:
        return sets * self.rules.minutes_per_set


class DayComposer:
    """
    Composes single training days.

    The random source is injected so callers can make selection
    reproducible; it is only used to shuffle candidates.
    """

    def __init__(self, rules: Optional[ProgramRules] = None, rng: Optional[random.Random] = None):
        self.rules = rules or ProgramRules()
        self.rng = rng or random.Random()

    def compose_accessory_day(
        self,
        week_number: int,
        pool: Sequence[Exercise],
        selection: DaySelection,
        reps: str,
        priority_exercises: Iterable[str] = (),
        priority_muscles: Iterable[MuscleGroup] = (),
    ) -> List[PlannedExercise]:
        """RPE-prescribed day built from the day-eligible pool."""
        self._run_cascade(
            selection,
            pool,
            priority_exercises=priority_exercises,
            priority_muscles=priority_muscles,
            include_primary_lifts=True,
        )
        planned = [
            self._prescribe_accessory(ex, selection.sets_per_exercise, reps, week_number)
            for ex in selection.exercises
        ]
        return self._finalize(planned)

    def compose_training_max_day(
        self,
        cycle_week: CycleWeek,
        main_lifts: Sequence[Tuple[Exercise, float]],
        pool: Sequence[Exercise],
        selection: DaySelection,
        reps: str,
        priority_exercises: Iterable[str] = (),
        priority_muscles: Iterable[MuscleGroup] = (),
    ) -> List[PlannedExercise]:
        """
        5/3/1 day: main lifts with set details, then accessory fill.

        Main lifts without a usable training max are left out.
        """
        planned = []
        for exercise, training_max in main_lifts:
            if training_max <= 0:
                logger.debug(f"Skipping {exercise.name}: no usable training max")
                continue
            sets_details = build_set_details(training_max, cycle_week, self.rules.weight_increment)
            selection.place_main_lift(exercise, len(sets_details))
            planned.append(PlannedExercise(
                name=exercise.name,
                category=exercise.category,
                sets=str(len(sets_details)),
                reps=cycle_week.reps_label,
                notes=f"TM: {format_number(training_max)} {WEIGHT_UNIT}",
                muscles=list(exercise.muscles),
                sets_details=sets_details,
            ))

        self._run_cascade(
            selection,
            pool,
            priority_exercises=priority_exercises,
            priority_muscles=priority_muscles,
            include_primary_lifts=False,
        )
        planned.extend(
            self._prescribe_accessory(ex, selection.sets_per_exercise, reps, cycle_week.week)
            for ex in selection.exercises
        )
        return self._finalize(planned)

    # ------------------------------------------------------------------
    # Cascade
    # ------------------------------------------------------------------

    def _run_cascade(
        self,
        selection: DaySelection,
        pool: Sequence[Exercise],
        priority_exercises: Iterable[str],
        priority_muscles: Iterable[MuscleGroup],
        include_primary_lifts: bool,
    ):
        priority_names = set(priority_exercises or ())
        priority_groups = {MuscleGroup(g) for g in (priority_muscles or ())}

        allowed = [
            ex for ex in pool
            if include_primary_lifts or ex.category != ExerciseCategory.PRIMARY_LIFT
        ]
        biceps = [ex for ex in allowed if is_arm_isolation(ex) and ex.muscle_group == MuscleGroup.BICEPS]
        triceps = [ex for ex in allowed if is_arm_isolation(ex) and ex.muscle_group == MuscleGroup.TRICEPS]
        can_pair = bool(biceps) and bool(triceps)
        deferred_arms: List[Exercise] = []

        # 1. Priority exercises
        for ex in self._shuffled(ex for ex in allowed if ex.name in priority_names):
            self._offer(selection, ex, can_pair, deferred_arms)

        # 2. Priority muscle groups
        for ex in self._shuffled(
            ex for ex in allowed
            if ex.muscle_group in priority_groups and not selection.has(ex.name)
        ):
            self._offer(selection, ex, can_pair, deferred_arms)

        # 3. Primary lifts
        if include_primary_lifts:
            self._add_up_to(
                selection,
                self._shuffled(ex for ex in allowed if ex.category == ExerciseCategory.PRIMARY_LIFT),
                ExerciseCategory.PRIMARY_LIFT,
                self.rules.max_primary_lifts_per_day,
            )

        # 4. Secondary compounds
        self._add_up_to(
            selection,
            self._shuffled(ex for ex in allowed if ex.category == ExerciseCategory.SECONDARY_COMPOUND),
            ExerciseCategory.SECONDARY_COMPOUND,
            self.rules.max_secondary_compounds_per_day,
        )

        # 5. Arm isolation pairs
        if can_pair:
            self._pair_arms(selection, biceps, triceps, deferred_arms)

        # 6. Fill
        for ex in self._shuffled(
            ex for ex in allowed
            if ex.category != ExerciseCategory.PRIMARY_LIFT
            and not is_arm_isolation(ex)
            and not selection.has(ex.name)
        ):
            if selection.is_full:
                break
            if selection.fits(ex):
                selection.add(ex)

    def _offer(self, selection: DaySelection, exercise: Exercise, can_pair: bool, deferred_arms: List[Exercise]):
        """Add a priority pick, or queue it for pairing if it's arm isolation."""
        if is_arm_isolation(exercise) and can_pair:
            if exercise not in deferred_arms:
                deferred_arms.append(exercise)
            return
        if selection.fits(exercise):
            selection.add(exercise)

    def _add_up_to(
        self,
        selection: DaySelection,
        candidates: Sequence[Exercise],
        category: ExerciseCategory,
        limit: int,
    ):
        for ex in candidates:
            if selection.category_count(category) >= limit or selection.is_full:
                break
            if selection.fits(ex):
                selection.add(ex)

    def _pair_arms(
        self,
        selection: DaySelection,
        biceps: Sequence[Exercise],
        triceps: Sequence[Exercise],
        deferred_arms: Sequence[Exercise],
    ):
        """Add one biceps and one triceps exercise at a time; never a lone arm."""
        biceps_queue = self._prioritized(biceps, deferred_arms)
        triceps_queue = self._prioritized(triceps, deferred_arms)

        for bicep, tricep in zip(biceps_queue, triceps_queue):
            if not selection.fits(bicep, tricep):
                break
            selection.add(bicep)
            selection.add(tricep)

    def _prioritized(self, pool: Sequence[Exercise], deferred: Sequence[Exercise]) -> List[Exercise]:
        first = [ex for ex in deferred if ex in pool]
        rest = self._shuffled(ex for ex in pool if ex not in first)
        return first + rest

    def _shuffled(self, exercises: Iterable[Exercise]) -> List[Exercise]:
        items = list(exercises)
        return self.rng.sample(items, len(items))

    # ------------------------------------------------------------------
    # Prescription
    # ------------------------------------------------------------------

    def _prescribe_accessory(self, exercise: Exercise, sets: int, reps: str, week_number: int) -> PlannedExercise:
        return PlannedExercise(
            name=exercise.name,
            category=exercise.category,
            sets=str(sets),
            reps=reps,
            notes=rpe_note(exercise.category, week_number),
            muscles=list(exercise.muscles),
        )

    def _finalize(self, planned: List[PlannedExercise]) -> List[PlannedExercise]:
        return sort_by_category(planned)[: self.rules.max_exercises_per_day]
