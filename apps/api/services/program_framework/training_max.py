"""
Training Max Engine

5/3/1 percentage programming off a conservative training max.

    e1RM = weight                    (reps == 1)
         = weight * (1 + reps / 30)  (Epley)
    TM   = round2.5(e1RM * 0.9)

Each cycle week prescribes three sets at fixed percentages of TM.
Weeks 1-3 end with an AMRAP set; week 4 is a deload.

Usage:
    tm = calculate_training_max(weight=100, reps=5)   # 105.0
    sets = build_set_details(tm, get_cycle_week(1))
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .constants import CYCLE_WEEKS, TRAINING_MAX_FACTOR, WEIGHT_INCREMENT


@dataclass(frozen=True)
class LiftObservation:
    """A single RM observation: `weight` moved for `reps` reps."""
    weight: float
    reps: int


@dataclass(frozen=True)
class CycleWeek:
    """One week of the 5/3/1 cycle."""
    week: int
    percentages: Tuple[float, ...]
    reps: Tuple[str, ...]
    amrap_set_index: Optional[int]

    @property
    def is_deload(self) -> bool:
        return self.amrap_set_index is None

    @property
    def reps_label(self) -> str:
        return "/".join(self.reps)


@dataclass
class SetDetail:
    """A prescribed set of a main lift."""
    set_number: int
    percentage: float
    calculated_weight: float
    reps: str
    is_amrap: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "set_number": self.set_number,
            "percentage": self.percentage,
            "calculated_weight": self.calculated_weight,
            "reps": self.reps,
            "is_amrap": self.is_amrap,
        }


CYCLE: Tuple[CycleWeek, ...] = tuple(
    CycleWeek(
        week=w["week"],
        percentages=tuple(w["percentages"]),
        reps=tuple(w["reps"]),
        amrap_set_index=w["amrap_set_index"],
    )
    for w in CYCLE_WEEKS
)


def get_cycle_week(week_number: int) -> CycleWeek:
    for cycle_week in CYCLE:
        if cycle_week.week == week_number:
            return cycle_week
    raise KeyError(f"No cycle week {week_number}")


def round_to_increment(weight: float, increment: float = WEIGHT_INCREMENT) -> float:
    """Round to the nearest plate increment, halves rounding up."""
    return math.floor(weight / increment + 0.5) * increment


def estimate_one_rep_max(weight: float, reps: int) -> float:
    """Epley estimate; a single is taken at face value."""
    if reps is None or reps <= 0 or weight is None or weight <= 0:
        return 0.0
    if reps == 1:
        return float(weight)
    return weight * (1 + reps / 30)


def calculate_training_max(
    weight: float,
    reps: int,
    factor: float = TRAINING_MAX_FACTOR,
    increment: float = WEIGHT_INCREMENT,
) -> float:
    """Training max from an RM observation. Returns 0 for unusable input."""
    return round_to_increment(estimate_one_rep_max(weight, reps) * factor, increment)


def build_set_details(
    training_max: float,
    cycle_week: CycleWeek,
    increment: float = WEIGHT_INCREMENT,
) -> List[SetDetail]:
    """Prescribed sets for one main lift in one cycle week."""
    return [
        SetDetail(
            set_number=idx + 1,
            percentage=pct,
            calculated_weight=round_to_increment(training_max * pct, increment),
            reps=cycle_week.reps[idx],
            is_amrap=cycle_week.amrap_set_index == idx,
        )
        for idx, pct in enumerate(cycle_week.percentages)
    ]
