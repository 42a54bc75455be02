"""
Eligibility Filter

Narrows the catalog to exercises a user can actually do.
All filters are pure and order-preserving; they return new tuples.
"""

from typing import Iterable, Tuple

from .catalog import Exercise
from .constants import ARM_GROUPS, ISOLATION_CATEGORIES, Equipment, MuscleGroup


def filter_by_equipment(
    exercises: Iterable[Exercise],
    available_equipment: Iterable[Equipment] = (),
) -> Tuple[Exercise, ...]:
    """
    Keep exercises needing no equipment, or sharing a tag with what's available.

    With no equipment at all, only equipment-free exercises pass.
    """
    available = frozenset(Equipment(eq) for eq in (available_equipment or ()))
    return tuple(
        ex for ex in exercises
        if not ex.equipment or ex.equipment & available
    )


def filter_by_muscle_groups(
    exercises: Iterable[Exercise],
    target_groups: Iterable[MuscleGroup] = (),
) -> Tuple[Exercise, ...]:
    """Keep exercises in the target groups. No targets means no filtering."""
    targets = frozenset(MuscleGroup(g) for g in (target_groups or ()))
    if not targets:
        return tuple(exercises)
    return tuple(ex for ex in exercises if ex.muscle_group in targets)


def is_arm_isolation(exercise: Exercise) -> bool:
    """Biceps or triceps isolation work (subject to pairing)."""
    return exercise.muscle_group in ARM_GROUPS and exercise.category in ISOLATION_CATEGORIES


def is_equipment_compatible(exercise: Exercise, available_equipment: Iterable[Equipment]) -> bool:
    return bool(filter_by_equipment((exercise,), available_equipment))
