"""
Split Planner

Maps training days per week to the muscle groups each day targets.

Usage:
    planner = SplitPlanner()
    split = planner.determine_split(days_per_week=4)   # SplitType.UPPER_LOWER
    day = planner.day_for_index(split, day_index=2)    # "Upper" again
"""

from dataclasses import dataclass
from typing import List, Tuple

from .constants import SPLIT_DAYS, MuscleGroup, SplitType


@dataclass(frozen=True)
class SplitDay:
    """One slot of a split rotation."""
    name: str
    muscle_groups: Tuple[MuscleGroup, ...]


class SplitPlanner:
    """
    Pure function of day count; objective and equipment are not consulted.

    - 1-3 days: full body every session
    - 4 days: upper / lower
    - 5-6 days: push / pull / legs (5 days repeats push and pull)
    """

    def determine_split(self, days_per_week: int) -> SplitType:
        if days_per_week <= 3:
            return SplitType.FULL_BODY
        if days_per_week == 4:
            return SplitType.UPPER_LOWER
        return SplitType.PUSH_PULL_LEGS

    def split_days(self, split: SplitType) -> List[SplitDay]:
        return [SplitDay(name=name, muscle_groups=groups) for name, groups in SPLIT_DAYS[split]]

    def day_for_index(self, split: SplitType, day_index: int) -> SplitDay:
        """Rotation slot for a 0-based day index, wrapping around the split."""
        days = self.split_days(split)
        return days[day_index % len(days)]

    def build_week(self, days_per_week: int) -> List[SplitDay]:
        """Target muscle groups for each training day of the week."""
        split = self.determine_split(days_per_week)
        return [self.day_for_index(split, i) for i in range(days_per_week)]
