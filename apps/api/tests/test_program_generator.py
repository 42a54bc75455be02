"""
Tests for the program generator.

Structural properties are checked across every objective and every
allowed day count; specific behaviour (5/3/1 prescription, priorities,
equipment, session length) is checked on targeted requests.
"""
import random
from collections import Counter

import pytest

from services.program_framework import (
    ConfigService,
    Equipment,
    LiftObservation,
    Objective,
    ProgramGenerator,
    SplitPlanner,
    generate_program,
    get_exercise,
)
from services.program_framework.constants import (
    CATEGORY_PRIORITY,
    LARGE_MUSCLE_GROUPS,
    PROGRAMMING_STYLES,
    ExerciseCategory,
    MuscleGroup,
)


ALL_OBJECTIVES = [o.value for o in Objective]
STRENGTH_OBJECTIVES = ["powerlifting", "powerbuilding"]
HYPERTROPHY_OBJECTIVES = ["mass_gain", "fat_loss"]


def _all_exercises(program):
    for week in program.weeks:
        for day in week.days:
            for ex in day.exercises:
                yield week, day, ex


class TestProgramStructure:
    """Invariants that hold for every valid request"""

    @pytest.mark.parametrize("objective", ALL_OBJECTIVES)
    @pytest.mark.parametrize("days", range(1, 7))
    def test_shape(self, make_request, rng, objective, days):
        program = ProgramGenerator(rng=rng).generate(make_request(objective, days))

        assert [w.week_number for w in program.weeks] == [1, 2, 3, 4]
        expected_split_days = [d.name for d in SplitPlanner().build_week(days)]
        for week in program.weeks:
            assert [d.day_number for d in week.days] == list(range(1, days + 1))
            assert [d.split_day for d in week.days] == expected_split_days

    @pytest.mark.parametrize("objective", ALL_OBJECTIVES)
    @pytest.mark.parametrize("days", range(1, 7))
    def test_daily_caps_and_order(self, make_request, rng, objective, days):
        program = ProgramGenerator(rng=rng).generate(make_request(objective, days))

        for week in program.weeks:
            for day in week.days:
                assert len(day.exercises) <= 8
                names = [ex.name for ex in day.exercises]
                assert len(names) == len(set(names))

                groups = Counter(get_exercise(n).muscle_group for n in names)
                for group in LARGE_MUSCLE_GROUPS:
                    assert groups[group] <= 2

                tiers = [CATEGORY_PRIORITY[ex.category] for ex in day.exercises]
                assert tiers == sorted(tiers)

    @pytest.mark.parametrize("objective", ALL_OBJECTIVES)
    @pytest.mark.parametrize("days", range(1, 7))
    def test_weekly_volume_cap(self, make_request, rng, objective, days):
        program = ProgramGenerator(rng=rng).generate(make_request(objective, days))

        for week in program.weeks:
            volume = Counter()
            for day in week.days:
                for ex in day.exercises:
                    group = get_exercise(ex.name).muscle_group
                    if group in LARGE_MUSCLE_GROUPS:
                        volume[group] += int(ex.sets)
            for group in LARGE_MUSCLE_GROUPS:
                assert volume[group] <= 15

    @pytest.mark.parametrize("objective", ALL_OBJECTIVES)
    @pytest.mark.parametrize("days", range(1, 7))
    def test_is531_flag(self, make_request, rng, objective, days):
        program = ProgramGenerator(rng=rng).generate(make_request(objective, days))
        assert program.is531 == (objective in STRENGTH_OBJECTIVES)

    @pytest.mark.parametrize("objective", HYPERTROPHY_OBJECTIVES)
    @pytest.mark.parametrize("days", range(1, 7))
    def test_arms_balanced_on_hypertrophy_days(self, make_request, rng, objective, days):
        program = ProgramGenerator(rng=rng).generate(make_request(objective, days))

        for week in program.weeks:
            for day in week.days:
                arms = Counter(
                    get_exercise(ex.name).muscle_group for ex in day.exercises
                    if ex.category in (ExerciseCategory.HEAVY_ISOLATION, ExerciseCategory.LIGHT_ISOLATION)
                )
                assert arms[MuscleGroup.BICEPS] == arms[MuscleGroup.TRICEPS]

    def test_every_objective_has_a_programming_style(self):
        assert set(PROGRAMMING_STYLES) == set(Objective)


class TestHypertrophyPath:
    """Mass gain and fat loss"""

    def test_title_and_description(self, make_request, rng):
        program = ProgramGenerator(rng=rng).generate(make_request("mass_gain", 4))
        assert program.title == "Mass Gain Program - 4 days/week"
        assert "Upper / Lower" in program.description
        assert program.split == "upper_lower"

    def test_no_set_details_or_training_maxes(self, make_request, rng):
        program = ProgramGenerator(rng=rng).generate(make_request("fat_loss", 3))
        assert program.training_maxes == {}
        assert all(ex.sets_details is None for _, _, ex in _all_exercises(program))

    @pytest.mark.parametrize("objective,reps", [("fat_loss", "12-15"), ("mass_gain", "8-12")])
    def test_reps_by_objective(self, make_request, rng, objective, reps):
        program = ProgramGenerator(rng=rng).generate(make_request(objective, 3))
        assert {ex.reps for _, _, ex in _all_exercises(program)} == {reps}

    @pytest.mark.parametrize("minutes,sets", [(30, "2"), (44, "2"), (45, "3"), (90, "3"), (None, "3")])
    def test_sets_by_session_length(self, make_request, rng, minutes, sets):
        program = ProgramGenerator(rng=rng).generate(
            make_request("mass_gain", 3, max_session_minutes=minutes)
        )
        assert {ex.sets for _, _, ex in _all_exercises(program)} == {sets}

    def test_session_time_budget(self, make_request, rng):
        program = ProgramGenerator(rng=rng).generate(
            make_request("mass_gain", 3, max_session_minutes=30)
        )
        for week in program.weeks:
            for day in week.days:
                assert sum(int(ex.sets) * 2.5 for ex in day.exercises) <= 30

    def test_rpe_progression(self, make_request, rng):
        program = ProgramGenerator(rng=rng).generate(make_request("mass_gain", 3))
        for week, _, ex in _all_exercises(program):
            if ex.category == ExerciseCategory.SECONDARY_COMPOUND:
                expected = {1: "RPE 7", 2: "RPE 7.5", 3: "RPE 8", 4: "RPE 9"}[week.week_number]
                assert ex.notes == expected
            if ex.category == ExerciseCategory.LIGHT_ISOLATION:
                assert ex.notes == "RPE 10"

    def test_priority_exercise_on_matching_days(self, make_request, rng):
        program = ProgramGenerator(rng=rng).generate(
            make_request("mass_gain", 4, priority_exercises=("Leg Extension",))
        )
        for week in program.weeks:
            for day in week.days:
                names = [ex.name for ex in day.exercises]
                if day.split_day == "Lower":
                    assert "Leg Extension" in names
                else:
                    assert "Leg Extension" not in names

    def test_priority_muscle_group(self, make_request, rng):
        program = ProgramGenerator(rng=rng).generate(
            make_request("mass_gain", 3, priority_muscles=("shoulders",))
        )
        for day in program.get_week(1).days:
            names = {ex.name for ex in day.exercises}
            assert {"Overhead Press", "Dumbbell Lateral Raise", "Cable Lateral Raise"} <= names


class TestEquipment:
    """Only exercises the user can do are programmed"""

    @pytest.mark.parametrize("objective", ALL_OBJECTIVES)
    def test_bodyweight_only(self, make_request, rng, objective):
        program = ProgramGenerator(rng=rng).generate(
            make_request(objective, 4, equipment=("bodyweight",))
        )
        for _, _, ex in _all_exercises(program):
            needed = get_exercise(ex.name).equipment
            assert not needed or Equipment.BODYWEIGHT in needed

    def test_main_lift_without_equipment_is_dropped(self, make_request, rng):
        """A barbell lift is not programmed for a bodyweight-only user"""
        request = make_request(
            "powerlifting", 3,
            equipment=("bodyweight",),
            selected_main_lifts=("Barbell Squat",),
            lift_observations={"Barbell Squat": LiftObservation(weight=100, reps=5)},
        )
        program = ProgramGenerator(rng=rng).generate(request)

        assert program.is531
        assert program.training_maxes == {}
        names = {ex.name for _, _, ex in _all_exercises(program)}
        assert names
        assert "Barbell Squat" not in names

    def test_main_lifts_kept_when_equipment_available(self, make_request, rng):
        request = make_request("powerlifting", 3, equipment=("barbell-dumbbell",))
        program = ProgramGenerator(rng=rng).generate(request)
        assert set(program.training_maxes) == {"Barbell Squat", "Bench Press", "Deadlift", "Overhead Press"}

    def test_no_equipment_still_produces_a_program(self, make_request, rng):
        program = ProgramGenerator(rng=rng).generate(make_request("fat_loss", 3, equipment=()))
        exercises = [ex for _, _, ex in _all_exercises(program)]
        assert exercises
        assert all(not get_exercise(ex.name).equipment for ex in exercises)


class TestStrengthPath:
    """Powerlifting and powerbuilding (5/3/1)"""

    def test_title(self, make_request, rng):
        program = ProgramGenerator(rng=rng).generate(make_request("powerlifting", 3))
        assert program.title == "5/3/1 Program - Powerlifting"
        assert "5/3/1" in program.description

    def test_training_maxes(self, make_request, rng):
        program = ProgramGenerator(rng=rng).generate(make_request("powerbuilding", 4))
        assert program.training_maxes == {
            "Barbell Squat": 137.5,
            "Bench Press": 105.0,
            "Deadlift": 162.5,
            "Overhead Press": 62.5,
        }

    def test_round_robin_distribution(self, make_request, rng):
        """Four lifts over three days: day 1 gets the first and fourth"""
        program = ProgramGenerator(rng=rng).generate(make_request("powerlifting", 3))
        for week in program.weeks:
            main = [[ex.name for ex in day.exercises if ex.is_main_lift] for day in week.days]
            assert main == [["Barbell Squat", "Overhead Press"], ["Bench Press"], ["Deadlift"]]

    def test_each_lift_once_per_week(self, make_request, rng):
        program = ProgramGenerator(rng=rng).generate(make_request("powerlifting", 6))
        for week in program.weeks:
            counts = Counter(ex.name for day in week.days for ex in day.exercises if ex.is_main_lift)
            assert counts == Counter({"Barbell Squat": 1, "Bench Press": 1, "Deadlift": 1, "Overhead Press": 1})

    def test_main_lift_prescription_by_week(self, make_request, rng):
        program = ProgramGenerator(rng=rng).generate(make_request("powerlifting", 4))
        bench = {}
        for week, _, ex in _all_exercises(program):
            if ex.name == "Bench Press":
                bench[week.week_number] = ex

        assert bench[1].reps == "5/5/5+"
        assert bench[1].notes == "TM: 105 kg"
        assert [d.calculated_weight for d in bench[1].sets_details] == [67.5, 80.0, 90.0]
        assert [d.is_amrap for d in bench[3].sets_details] == [False, False, True]
        assert not any(d.is_amrap for d in bench[4].sets_details)
        assert bench[4].reps == "5/5/5"

    def test_only_main_lifts_are_primary(self, make_request, rng):
        program = ProgramGenerator(rng=rng).generate(make_request("powerbuilding", 5))
        for _, _, ex in _all_exercises(program):
            if ex.category == ExerciseCategory.PRIMARY_LIFT:
                assert ex.is_main_lift

    def test_lift_without_observation_is_dropped(self, make_request, rng):
        request = make_request(
            "powerlifting", 2,
            selected_main_lifts=("Barbell Squat", "Bench Press"),
            lift_observations={"Barbell Squat": LiftObservation(weight=100, reps=1)},
        )
        program = ProgramGenerator(rng=rng).generate(request)

        assert program.training_maxes == {"Barbell Squat": 90.0}
        main = {ex.name for _, _, ex in _all_exercises(program) if ex.is_main_lift}
        assert main == {"Barbell Squat"}

    def test_no_main_lifts_is_accessory_only(self, make_request, rng):
        program = ProgramGenerator(rng=rng).generate(
            make_request("powerlifting", 3, selected_main_lifts=(), lift_observations={})
        )
        assert program.is531
        assert program.training_maxes == {}
        exercises = [ex for _, _, ex in _all_exercises(program)]
        assert exercises
        assert not any(ex.is_main_lift for ex in exercises)

    def test_calculate_training_maxes_in_catalog_order(self, make_request):
        request = make_request(
            "powerlifting", 3,
            selected_main_lifts=("Overhead Press", "Barbell Squat"),
        )
        maxes = ProgramGenerator(rng=random.Random(1)).calculate_training_maxes(request)
        assert list(maxes) == ["Barbell Squat", "Overhead Press"]


class TestGeneratorBehaviour:

    def test_same_seed_same_program(self, make_request):
        request = make_request("powerbuilding", 5, priority_muscles=("back",))
        first = ProgramGenerator(rng=random.Random(3)).generate(request).to_dict()
        second = ProgramGenerator(rng=random.Random(3)).generate(request).to_dict()
        assert first == second

    def test_calls_do_not_share_state(self, make_request):
        generator = ProgramGenerator(rng=random.Random(5))
        a = generator.generate(make_request("mass_gain", 6))
        b = generator.generate(make_request("mass_gain", 6))
        for week_a, week_b in zip(a.weeks, b.weeks):
            assert len(week_a.days) == len(week_b.days)

    def test_module_entry_point(self, make_request):
        program = generate_program(make_request("fat_loss", 2), rng=random.Random(9))
        assert len(program.weeks) == 4

    def test_respects_configured_cap(self, make_request):
        ConfigService.set("program_rules.limits.max_exercises_per_day", 4)
        program = ProgramGenerator(rng=random.Random(2)).generate(make_request("mass_gain", 3))
        for week in program.weeks:
            assert all(len(day.exercises) <= 4 for day in week.days)

    def test_to_dict(self, make_request, rng):
        data = ProgramGenerator(rng=rng).generate(make_request("powerlifting", 3)).to_dict()
        assert set(data) == {
            "title", "description", "is531", "objective", "days_per_week",
            "split", "training_maxes", "weeks",
        }
        assert data["objective"] == "powerlifting"
        assert data["weeks"][3]["is_deload"] is True
        first = data["weeks"][0]["days"][0]["exercises"][0]
        assert first["name"] == "Barbell Squat"
        assert len(first["sets_details"]) == 3

    def test_string_enums_are_coerced(self, make_request):
        request = make_request("mass_gain", 4, priority_muscles=("chest",))
        assert request.objective == Objective.MASS_GAIN
        assert request.priority_muscles == (MuscleGroup.CHEST,)
        assert request.equipment[0] == Equipment.BARBELL_DUMBBELL
