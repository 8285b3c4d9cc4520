from datetime import date, timedelta

import pytest

from academy.services.activity_service import activity_service
from academy.services.exceptions import ValidationError

from conftest import make_learner

TODAY = date(2024, 3, 10)


def test_today_defaults_to_zero(store):
    profile = make_learner(store)
    assert activity_service.today(store, profile, TODAY) == {
        "activity_date": "2024-03-10", "calls": 0, "emails": 0, "linkedin_touches": 0,
    }


def test_save_rejects_negative_counts(store):
    profile = make_learner(store)
    with pytest.raises(ValidationError):
        activity_service.save(store, profile, {"calls": -1}, TODAY)


def test_save_rejects_counts_over_daily_cap(store):
    profile = make_learner(store)
    with pytest.raises(ValidationError):
        activity_service.save(store, profile, {"emails": 10_001}, TODAY)
    activity_service.save(store, profile, {"emails": 10_000}, TODAY)
    assert activity_service.today(store, profile, TODAY)["emails"] == 10_000


def test_save_awards_activity_badge(store):
    profile = make_learner(store)
    assert activity_service.save(store, profile, {"calls": 20}, TODAY - timedelta(days=1)) == []
    awarded = activity_service.save(store, profile, {"calls": 30, "emails": 1}, TODAY)
    assert [badge.type for badge in awarded] == ["call_50"]
    assert activity_service.today(store, profile, TODAY)["calls"] == 30


def test_week_view(store):
    profile = make_learner(store)
    for offset in range(9):
        activity_service.save(store, profile, {"calls": 1, "emails": 2, "linkedin_touches": 3}, TODAY - timedelta(days=offset))

    week = activity_service.week(store, profile, TODAY)
    assert week["start"] == "2024-03-04" and week["end"] == "2024-03-10"
    assert [day["activity_date"] for day in week["days"]][0] == "2024-03-04"
    assert len(week["days"]) == 7
    assert week["totals"] == {"calls": 7, "emails": 14, "linkedin_touches": 21}
