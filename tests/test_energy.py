"""Tests for energy target calculation."""

import pytest

from nutriai.domain.errors import ValidationError
from nutriai.domain.profile import UserProfile
from nutriai.services.energy import compute_energy_targets, round_half_up


def _profile(**overrides: object) -> UserProfile:
    values = {
        "gender": "Male",
        "age": 30,
        "height": 175,
        "weight": 70,
        "activity_level": "moderate",
        "goal": "deficit",
    }
    values.update(overrides)
    return UserProfile(**values)


def test_male_moderate_deficit_targets() -> None:
    targets = compute_energy_targets(_profile())

    assert targets.tdee == 2556
    assert targets.target_calories == 2056


def test_female_uses_lower_offset() -> None:
    targets = compute_energy_targets(
        _profile(gender="Female", activity_level="sedentary", goal="maintain")
    )

    # (700 + 1093.75 - 150 - 161) * 1.2 = 1779.3
    assert targets.tdee == 1779
    assert targets.target_calories == 1779


def test_surplus_adds_300() -> None:
    targets = compute_energy_targets(_profile(goal="surplus"))

    assert targets.target_calories == targets.tdee + 300


def test_unknown_goal_keeps_maintenance_calories() -> None:
    targets = compute_energy_targets(_profile(goal="bulk"))

    assert targets.target_calories == targets.tdee == 2556


def test_unknown_activity_level_falls_back_to_sedentary() -> None:
    targets = compute_energy_targets(_profile(activity_level="couch"))

    assert targets.tdee == round_half_up(1648.75 * 1.2)


@pytest.mark.parametrize("field_name", ["weight", "height", "age"])
def test_missing_biometrics_rejected(field_name: str) -> None:
    with pytest.raises(ValidationError, match="incomplete biometric data"):
        compute_energy_targets(_profile(**{field_name: 0}))


def test_round_half_up_matches_half_up_rule() -> None:
    assert round_half_up(2555.5) == 2556
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2
