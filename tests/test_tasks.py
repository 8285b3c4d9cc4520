import pytest

from academy.services.exceptions import InvalidTransitionError, ValidationError
from academy.services.task_service import ALLOWED_TRANSITIONS, check_transition, task_service

from conftest import make_learner


@pytest.fixture
def people(store):
    learner = make_learner(store, "rep@example.com")
    manager = make_learner(store, "boss@example.com")
    return learner, manager


def test_transition_table():
    check_transition("available", "submitted")
    check_transition("submitted", "completed")
    check_transition("submitted", "needs_revision")
    check_transition("needs_revision", "submitted")
    for target in ALLOWED_TRANSITIONS:
        with pytest.raises(InvalidTransitionError):
            check_transition("completed", target)
    with pytest.raises(InvalidTransitionError):
        check_transition("available", "completed")


def test_list_for_user_defaults_to_available(store, people):
    learner, _ = people
    store.create_task("Book 3 meetings", "This week", 300)
    rows = task_service.list_for_user(store, learner)
    assert len(rows) == 1
    assert rows[0]["status"] == "available" and rows[0]["user_task_id"] is None


def test_submit_and_approve_awards_xp_and_first_badge(store, people):
    learner, manager = people
    task = store.create_task("Book 3 meetings", "This week", 300)

    user_task = task_service.submit(store, learner, task.id, "Booked with Acme, Globex, Initech")
    assert user_task.status == "submitted"

    approved = task_service.approve(store, manager, user_task.id, "Great work")
    assert approved.status == "completed"
    assert approved.reviewer_id == manager.id
    assert approved.reviewer_feedback == "Great work"
    assert approved.reviewed_at is not None

    assert store.refresh_profile(learner.id).total_xp == 300
    assert [badge.badge_type for badge in store.list_user_badges(learner.id)] == ["first_task"]


def test_revision_loop(store, people):
    learner, manager = people
    task = store.create_task("Write a sequence", "", 100)
    user_task = task_service.submit(store, learner, task.id, "Draft 1")
    revised = task_service.request_revision(store, manager, user_task.id, "Shorter subject lines")
    assert revised.status == "needs_revision"
    assert store.refresh_profile(learner.id).total_xp == 0

    resubmitted = task_service.submit(store, learner, task.id, "Draft 2")
    assert resubmitted.id == user_task.id
    assert resubmitted.status == "submitted"
    assert resubmitted.submission == "Draft 2"


def test_completed_task_cannot_change(store, people):
    learner, manager = people
    task = store.create_task("Call 20 leads", "", 100)
    user_task = task_service.submit(store, learner, task.id, "Done")
    task_service.approve(store, manager, user_task.id)

    with pytest.raises(InvalidTransitionError):
        task_service.submit(store, learner, task.id, "Again")
    with pytest.raises(InvalidTransitionError):
        task_service.approve(store, manager, user_task.id)
    with pytest.raises(InvalidTransitionError):
        task_service.request_revision(store, manager, user_task.id)
    assert store.refresh_profile(learner.id).total_xp == 100


def test_cannot_submit_twice_while_pending(store, people):
    learner, _ = people
    task = store.create_task("Call 20 leads", "", 100)
    task_service.submit(store, learner, task.id, "Done")
    with pytest.raises(InvalidTransitionError):
        task_service.submit(store, learner, task.id, "Done again")


def test_blank_submission_rejected(store, people):
    learner, _ = people
    task = store.create_task("Call 20 leads", "", 100)
    with pytest.raises(ValidationError):
        task_service.submit(store, learner, task.id, "  ")


def test_submission_filters(store, people):
    learner, manager = people
    first = store.create_task("One", "", 10)
    second = store.create_task("Two", "", 10)
    done = task_service.submit(store, learner, first.id, "a")
    task_service.submit(store, learner, second.id, "b")
    task_service.approve(store, manager, done.id)

    assert len(task_service.submissions(store, "all")) == 2
    assert [row.status for row in task_service.submissions(store, "pending")] == ["submitted"]
    assert [row.status for row in task_service.submissions(store, "completed")] == ["completed"]
    with pytest.raises(ValidationError):
        task_service.submissions(store, "rejected")


def test_concurrent_first_submit_creates_one_row(store, people, monkeypatch):
    learner, manager = people
    task = store.create_task("Book 3 meetings", "", 300)
    first = task_service.submit(store, learner, task.id, "Tab one")

    # Second tab read the task before the first tab's row existed
    monkeypatch.setattr(store, "find_user_task", lambda user_id, task_id: None)
    with pytest.raises(InvalidTransitionError):
        task_service.submit(store, learner, task.id, "Tab two")
    monkeypatch.undo()

    rows = store.list_user_tasks(learner.email)
    assert [row.id for row in rows] == [first.id]
    assert rows[0].submission == "Tab one"


def test_task_xp_is_keyed_on_the_task(store, people):
    from academy.models import XpAward

    learner, manager = people
    task = store.create_task("Call 20 leads", "", 100)
    user_task = task_service.submit(store, learner, task.id, "Done")
    task_service.approve(store, manager, user_task.id)

    keys = [award.idempotency_key for award in store.db.query(XpAward).filter(XpAward.user_id == learner.id)]
    assert keys == [f"task:{task.id}"]
    # a second row for the same task could not award again
    assert store.increment_xp(learner.id, 100, f"task:{task.id}") is False
    assert store.refresh_profile(learner.id).total_xp == 100
