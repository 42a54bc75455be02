"""
Program Generation API Router

Endpoints for:
- Program generation (hypertrophy or 5/3/1)
- Training max estimation from RM observations
- Program export (CSV / JSON download)
- Form options (choice lists for the client)

Nothing is persisted; every call generates from the request alone.
"""

import logging
import random
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Query
from fastapi.responses import Response
from pydantic import BaseModel, Field, model_validator

from core.exceptions import ExportError, ValidationError
from services.program_export import export_program_to_csv, export_program_to_json
from services.program_framework import (
    EXERCISE_CATALOG,
    Equipment,
    ExperienceLevel,
    GeneratedProgram,
    LiftObservation,
    MuscleGroup,
    Objective,
    ProgramGenerator,
    ProgramRequest,
    ProgramRules,
    estimate_one_rep_max,
    calculate_training_max,
    get_exercise,
    main_lift_names,
)
from services.program_framework.constants import (
    EQUIPMENT_LABELS,
    EXPERIENCE_LABELS,
    MAX_DAYS_PER_WEEK,
    MAX_SESSION_MINUTES,
    MIN_DAYS_PER_WEEK,
    MIN_SESSION_MINUTES,
    OBJECTIVE_LABELS,
    PROGRAMMING_STYLES,
    WEIGHT_UNIT,
    ProgrammingStyle,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/programs", tags=["Program Generation"])


# ============ Request Models ============

class LiftObservationModel(BaseModel):
    """A rep-max observation: weight moved for a number of reps."""
    weight: float = Field(0, ge=0, le=1000, description=f"Weight in {WEIGHT_UNIT}")
    reps: int = Field(0, ge=0, le=30, description="Reps performed at that weight")


class ProgramRequestModel(BaseModel):
    """Request for a generated program."""
    objective: Objective
    days_per_week: int = Field(..., ge=MIN_DAYS_PER_WEEK, le=MAX_DAYS_PER_WEEK)
    experience: ExperienceLevel = ExperienceLevel.INTERMEDIATE
    max_session_minutes: Optional[int] = Field(
        None, ge=MIN_SESSION_MINUTES, le=MAX_SESSION_MINUTES, description="Session length cap in minutes"
    )
    equipment: List[Equipment] = Field(default_factory=list)

    # Strength objectives only
    selected_main_lifts: List[str] = Field(default_factory=list)
    lift_observations: Dict[str, LiftObservationModel] = Field(default_factory=dict)

    # Preferences
    priority_muscles: List[MuscleGroup] = Field(default_factory=list)
    priority_exercises: List[str] = Field(default_factory=list)

    seed: Optional[int] = Field(None, description="Fixes exercise selection for reproducible output")

    @model_validator(mode="after")
    def check_main_lift_observations(self):
        if PROGRAMMING_STYLES[self.objective] != ProgrammingStyle.TRAINING_MAX:
            return self
        for lift in self.selected_main_lifts:
            obs = self.lift_observations.get(lift)
            if obs is None or obs.weight <= 0 or obs.reps <= 0:
                raise ValueError(f"{lift}: weight and reps are required for selected main lifts")
        return self


class TrainingMaxRequest(BaseModel):
    """Rep-max observations keyed by main lift name."""
    lifts: Dict[str, LiftObservationModel] = Field(..., min_length=1)


# ============ Response Models ============

class TrainingMaxResult(BaseModel):
    estimated_one_rep_max: float
    training_max: float


class TrainingMaxResponse(BaseModel):
    unit: str
    lifts: Dict[str, TrainingMaxResult]


# ============ Endpoints ============

@router.post("/generate", response_model=Dict[str, Any])
async def generate(request: ProgramRequestModel):
    """
    Generate a 4-week program.

    Mass gain and fat loss produce RPE-driven accessory programs.
    Powerlifting and powerbuilding produce 5/3/1 programs built off the
    training max of each selected main lift.
    """
    program = _generate(request)
    return program.to_dict()


@router.post("/training-max", response_model=TrainingMaxResponse)
async def training_max(request: TrainingMaxRequest):
    """Estimate 1RM (Epley) and training max for each submitted lift."""
    _check_main_lifts(request.lifts.keys(), field="lifts")

    rules = ProgramRules.from_config()
    results = {}
    for name, obs in request.lifts.items():
        results[name] = TrainingMaxResult(
            estimated_one_rep_max=round(estimate_one_rep_max(obs.weight, obs.reps), 1),
            training_max=calculate_training_max(
                obs.weight, obs.reps, factor=rules.training_max_factor, increment=rules.weight_increment
            ),
        )
    return TrainingMaxResponse(unit=WEIGHT_UNIT, lifts=results)


@router.post("/export")
async def export(
    request: ProgramRequestModel,
    format: str = Query("csv", pattern="^(csv|json)$", description="Export format: csv or json"),
):
    """
    Generate a program and return it as a file download.

    CSV is Google Sheets compatible with one row per set line.
    JSON holds the full program structure.
    """
    program = _generate(request)

    if format == "json":
        result = export_program_to_json(program)
    else:
        result = export_program_to_csv(program)

    if not result.success:
        raise ExportError(result.error or "Export failed")

    return Response(
        content=result.content,
        media_type=result.content_type,
        headers={
            "Content-Disposition": f'attachment; filename="{result.filename}"'
        }
    )


@router.get("/options")
async def get_program_options():
    """
    Get available program options.

    Public endpoint listing every choice the program form offers.
    """
    return {
        "objectives": [
            {"value": o.value, "label": OBJECTIVE_LABELS[o], "is531": PROGRAMMING_STYLES[o] == ProgrammingStyle.TRAINING_MAX}
            for o in Objective
        ],
        "experience_levels": [
            {"value": e.value, "label": EXPERIENCE_LABELS[e]} for e in ExperienceLevel
        ],
        "equipment": [
            {"value": eq.value, "label": EQUIPMENT_LABELS[eq]} for eq in Equipment
        ],
        "muscle_groups": [m.value for m in MuscleGroup],
        "days_per_week": {"min": MIN_DAYS_PER_WEEK, "max": MAX_DAYS_PER_WEEK},
        "session_minutes": {"min": MIN_SESSION_MINUTES, "max": MAX_SESSION_MINUTES},
        "main_lifts": list(main_lift_names()),
        "exercises": [
            {
                "name": ex.name,
                "category": ex.category.value,
                "muscle_group": ex.muscle_group.value,
                "equipment": sorted(eq.value for eq in ex.equipment),
            }
            for ex in EXERCISE_CATALOG
        ],
        "unit": WEIGHT_UNIT,
    }


# ============ Helper Functions ============

def _generate(request: ProgramRequestModel) -> GeneratedProgram:
    """Validate catalog references and run the generator."""
    _check_main_lifts(request.selected_main_lifts, field="selected_main_lifts")
    _check_main_lifts(request.lift_observations.keys(), field="lift_observations")
    unknown = [name for name in request.priority_exercises if get_exercise(name) is None]
    if unknown:
        raise ValidationError(f"Unknown exercises: {', '.join(unknown)}", field="priority_exercises")

    rng = random.Random(request.seed) if request.seed is not None else None
    program = ProgramGenerator(rng=rng).generate(_to_program_request(request))

    logger.info(
        f"Program generated via API: objective={request.objective.value}, days={request.days_per_week}",
        extra={
            "extra_fields": {
                "objective": request.objective.value,
                "days_per_week": request.days_per_week,
                "seeded": request.seed is not None,
                "priority_exercises": len(request.priority_exercises),
                "priority_muscles": len(request.priority_muscles),
            }
        },
    )
    return program


def _check_main_lifts(names, field: str):
    allowed = set(main_lift_names())
    invalid = [name for name in names if name not in allowed]
    if invalid:
        raise ValidationError(f"Not a main lift: {', '.join(invalid)}", field=field)


def _to_program_request(request: ProgramRequestModel) -> ProgramRequest:
    """Convert the API model to the generator's request."""
    return ProgramRequest(
        objective=request.objective,
        days_per_week=request.days_per_week,
        experience=request.experience,
        max_session_minutes=request.max_session_minutes,
        equipment=tuple(request.equipment),
        selected_main_lifts=tuple(request.selected_main_lifts),
        lift_observations={
            name: LiftObservation(weight=obs.weight, reps=obs.reps)
            for name, obs in request.lift_observations.items()
        },
        priority_muscles=tuple(request.priority_muscles),
        priority_exercises=tuple(request.priority_exercises),
    )
