import pytest

from academy.services.leveling_service import (
    LEVEL_ORDER,
    LEVEL_THRESHOLDS,
    is_valid_level,
    level_icon,
    level_progress,
    next_level_xp,
)


@pytest.mark.parametrize("xp", [-50, 0, 1, 499, 1000, 2500, 10 ** 9])
@pytest.mark.parametrize("level", LEVEL_ORDER)
def test_level_progress_stays_within_bounds(xp, level):
    assert 0.0 <= level_progress(xp, level) <= 100.0


@pytest.mark.parametrize("level", LEVEL_ORDER)
def test_level_progress_never_drops_as_xp_grows(level):
    progress = [level_progress(xp, level) for xp in range(-100, 20_000, 250)]
    assert progress == sorted(progress)
    assert progress[0] == 0.0 and progress[-1] == 100.0


def test_level_progress_is_share_of_tier_threshold():
    assert level_progress(500, "rookie") == 50.0
    assert level_progress(1500, "prospector") == 50.0
    assert level_progress(3500, "closer") == 50.0
    assert level_progress(7500, "elite") == 50.0


def test_level_progress_caps_at_one_hundred():
    assert level_progress(5000, "rookie") == 100.0


def test_unknown_level_uses_rookie_threshold():
    assert next_level_xp("legend") == 1000
    assert level_progress(250, "legend") == 25.0
    assert level_icon("legend") == level_icon("rookie")


def test_thresholds_increase_with_tier():
    thresholds = [LEVEL_THRESHOLDS[level] for level in LEVEL_ORDER]
    assert thresholds == sorted(thresholds)
    assert all(is_valid_level(level) for level in LEVEL_ORDER)
    assert not is_valid_level("captain")
