"""
Pytest configuration and fixtures

Generation is pure, so no database or network fixtures are needed.
Randomness is pinned through a seeded random source and rule overrides
are dropped after each test.
"""
import pytest
import random
import sys
import os

# Add the parent directory to the path so we can import from services
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.program_framework import ConfigService, LiftObservation, ProgramRequest


@pytest.fixture(autouse=True)
def reset_program_rules():
    """Drop cached/overridden program rules around every test."""
    ConfigService.reset()
    yield
    ConfigService.reset()


@pytest.fixture
def rng():
    """Seeded random source for reproducible selection."""
    return random.Random(42)


@pytest.fixture
def make_request():
    """
    Factory for generator requests with sensible defaults.

    Strength objectives get all four main lifts with observations
    unless overridden.
    """
    def _make(objective="mass_gain", days_per_week=4, **overrides):
        defaults = {
            "equipment": ("barbell-dumbbell", "guided-machines", "bodyweight"),
        }
        if objective in ("powerlifting", "powerbuilding"):
            defaults["selected_main_lifts"] = ("Barbell Squat", "Bench Press", "Deadlift", "Overhead Press")
            defaults["lift_observations"] = {
                "Barbell Squat": LiftObservation(weight=140, reps=3),
                "Bench Press": LiftObservation(weight=100, reps=5),
                "Deadlift": LiftObservation(weight=180, reps=1),
                "Overhead Press": LiftObservation(weight=60, reps=5),
            }
        defaults.update(overrides)
        return ProgramRequest(objective=objective, days_per_week=days_per_week, **defaults)

    return _make
