from academy.models import Profile

from conftest import QUIZ_QUESTIONS, make_manager, seed_course, sign_in


def _lesson_ids(course):
    return [lesson["id"] for module in course["modules"] for lesson in module["lessons"]]


def test_health_and_root(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["cache"] == "disabled"
    assert client.get("/").json()["docs"] == "/docs"


def test_endpoints_require_session(client):
    for path in ("/api/profile/me", "/api/courses", "/api/badges", "/api/tasks", "/api/activity/week"):
        assert client.get(path).status_code == 401


def test_profile_me(client):
    headers = sign_in(client, "rep@example.com")
    body = client.get("/api/profile/me", headers=headers).json()
    assert body["email"] == "rep@example.com"
    assert body["level"] == "rookie"
    assert body["level_icon"] == "🥉"
    assert body["next_level_xp"] == 1000
    assert body["level_progress"] == 0.0


def test_catalog_gating_and_completion_flow(client, store):
    seeded = seed_course(store)
    headers = sign_in(client, "rep@example.com")

    courses = client.get("/api/courses", headers=headers).json()
    assert len(courses) == 1
    lessons = [lesson for module in courses[0]["modules"] for lesson in module["lessons"]]
    assert [lesson["locked"] for lesson in lessons] == [False, True, True, True]
    assert courses[0]["progress"] == 0

    video_id = str(seeded["video"].id)
    quiz_id = str(seeded["quiz"].id)

    locked = client.post(f"/api/lessons/{quiz_id}/quiz", headers=headers, json={"answers": {"0": 0}})
    assert locked.status_code == 409
    assert locked.json()["error"] == "LESSON_LOCKED"

    done = client.post(f"/api/lessons/{video_id}/complete", headers=headers).json()
    assert done["completed"] is True and done["celebrate"] is True
    assert done["xp_awarded"] == 100 and done["total_xp"] == 100

    again = client.post(f"/api/lessons/{video_id}/complete", headers=headers).json()
    assert again["already_completed"] is True and again["xp_awarded"] == 0

    detail = client.get(f"/api/lessons/{quiz_id}", headers=headers).json()
    assert detail["locked"] is False
    assert detail["quiz"]["passing_score"] == 75
    assert "correct_index" not in detail["quiz"]["questions"][0]

    incomplete = client.post(f"/api/lessons/{quiz_id}/quiz", headers=headers, json={"answers": {"0": 0}})
    assert incomplete.status_code == 400
    assert incomplete.json()["details"]["missing"] == [1, 2, 3]

    failed = client.post(
        f"/api/lessons/{quiz_id}/quiz", headers=headers, json={"answers": {"0": 1, "1": 1, "2": 1, "3": 1}}
    ).json()
    assert failed["completed"] is False
    assert failed["quiz"] == {"correct": 2, "total": 4, "percent": 50, "passed": False}

    passed = client.post(
        f"/api/lessons/{quiz_id}/quiz", headers=headers, json={"answers": {"0": 0, "1": 1, "2": 0, "3": 0}}
    ).json()
    assert passed["completed"] is True
    assert passed["quiz"]["percent"] == 75
    assert passed["total_xp"] == 250

    courses = client.get("/api/courses", headers=headers).json()
    assert courses[0]["progress"] == 50
    assert courses[0]["completed_lessons"] == 2
    assert courses[0]["modules"][1]["lessons"][0]["locked"] is False

    assert client.get("/api/profile/me", headers=headers).json()["total_xp"] == 250


def test_roleplay_endpoint(client, store):
    seeded = seed_course(store)
    headers = sign_in(client, "rep@example.com")
    client.post(f"/api/lessons/{seeded['video'].id}/complete", headers=headers)
    client.post(
        f"/api/lessons/{seeded['quiz'].id}/quiz", headers=headers,
        json={"answers": {"0": 0, "1": 1, "2": 0, "3": 1}},
    )

    blank = client.post(f"/api/lessons/{seeded['roleplay'].id}/roleplay", headers=headers, json={"response": " "})
    assert blank.status_code == 400

    body = client.post(
        f"/api/lessons/{seeded['roleplay'].id}/roleplay", headers=headers, json={"response": "Hi, Sam here"}
    ).json()
    assert body["completed"] is True and body["xp_awarded"] == 200


def test_unknown_lesson_is_404(client):
    headers = sign_in(client, "rep@example.com")
    response = client.get("/api/lessons/00000000-0000-0000-0000-000000000000", headers=headers)
    assert response.status_code == 404
    assert response.json()["error"] == "NOT_FOUND"


def test_activity_endpoints(client):
    headers = sign_in(client, "rep@example.com")
    assert client.get("/api/activity/today", headers=headers).json()["calls"] == 0

    saved = client.put(
        "/api/activity/today", headers=headers, json={"calls": 50, "emails": 4, "linkedin_touches": 2}
    ).json()
    assert saved["today"]["calls"] == 50
    assert [badge["type"] for badge in saved["new_badges"]] == ["call_50"]

    week = client.get("/api/activity/week", headers=headers).json()
    assert week["totals"]["calls"] == 50
    assert len(week["days"]) == 1

    assert client.put("/api/activity/today", headers=headers, json={"calls": -3}).status_code == 422
    assert client.put("/api/activity/today", headers=headers, json={"calls": 10_001}).status_code == 422


def test_badges_endpoint(client):
    headers = sign_in(client, "rep@example.com")
    client.put("/api/activity/today", headers=headers, json={"calls": 0, "emails": 50, "linkedin_touches": 0})

    board = client.get("/api/badges", headers=headers).json()
    assert board["total"] == 10
    assert board["earned_count"] == 1
    earned = [badge for badge in board["badges"] if badge["earned"]]
    assert earned[0]["type"] == "email_50"
    assert earned[0]["earned_at"] is not None


def test_leaderboard_orders_by_xp(client, store, db):
    seeded = seed_course(store)
    first = sign_in(client, "first@example.com")
    sign_in(client, "second@example.com")
    client.post(f"/api/lessons/{seeded['video'].id}/complete", headers=first)

    board = client.get("/api/leaderboard", headers=first).json()
    assert [entry["email"] for entry in board] == ["first@example.com", "second@example.com"]
    assert [entry["rank"] for entry in board] == [1, 2]
    assert board[0]["total_xp"] == 100


def test_learner_cannot_use_manager_endpoints(client):
    headers = sign_in(client, "rep@example.com")
    response = client.get("/api/manager/submissions", headers=headers)
    assert response.status_code == 403
    assert response.json()["error"] == "PERMISSION_DENIED"
    assert client.post("/api/manager/courses", headers=headers, json={"title": "X"}).status_code == 403


def test_course_builder(client, db):
    manager = make_manager(db, client)

    course = client.post("/api/manager/courses", headers=manager, json={"title": "Discovery"}).json()
    assert course["order_index"] == 1
    module = client.post(
        f"/api/manager/courses/{course['id']}/modules", headers=manager, json={"title": "Questions"}
    ).json()

    video = client.post(
        f"/api/manager/modules/{module['id']}/lessons", headers=manager,
        json={"title": "Why discovery", "type": "video", "content_url": "https://example.com/v.mp4"},
    )
    assert video.status_code == 201
    quiz = client.post(
        f"/api/manager/modules/{module['id']}/lessons", headers=manager,
        json={"title": "Check", "type": "quiz", "xp_value": 50, "questions": QUIZ_QUESTIONS},
    ).json()
    assert quiz["order_index"] == 2

    bad_quiz = client.post(
        f"/api/manager/modules/{module['id']}/lessons", headers=manager,
        json={"title": "Bad", "type": "quiz", "questions": [{"question": "Q", "options": ["a"], "correct_index": 0}]},
    )
    assert bad_quiz.status_code == 422

    detail = client.get(f"/api/lessons/{quiz['id']}", headers=manager).json()
    assert detail["quiz"]["passing_score"] == 80
    assert detail["xp_value"] == 50
    assert client.get(f"/api/lessons/{video.json()['id']}", headers=manager).json()["xp_value"] == 100

    assert client.delete(f"/api/manager/lessons/{quiz['id']}", headers=manager).status_code == 204
    assert client.delete(f"/api/manager/lessons/{quiz['id']}", headers=manager).status_code == 404
    assert client.delete(f"/api/manager/modules/{module['id']}", headers=manager).status_code == 204

    courses = client.get("/api/courses", headers=manager).json()
    assert courses[0]["modules"] == []
    assert courses[0]["progress"] == 0


def test_task_review_flow(client, db):
    manager = make_manager(db, client)
    learner = sign_in(client, "rep@example.com")

    task = client.post(
        "/api/manager/tasks", headers=manager, json={"title": "Book a meeting", "xp_value": 250}
    ).json()

    tasks = client.get("/api/tasks", headers=learner).json()
    assert tasks[0]["status"] == "available"

    submitted = client.post(
        f"/api/tasks/{task['id']}/submit", headers=learner, json={"submission": "Booked with Acme"}
    ).json()
    assert submitted["status"] == "submitted"

    pending = client.get("/api/manager/submissions?filter=pending", headers=manager).json()
    assert len(pending) == 1
    assert pending[0]["task"]["title"] == "Book a meeting"
    assert pending[0]["learner_level"] == "rookie"

    revise = client.post(
        f"/api/manager/submissions/{submitted['id']}/revise", headers=manager, json={"feedback": "Add notes"}
    ).json()
    assert revise["status"] == "needs_revision"

    client.post(f"/api/tasks/{task['id']}/submit", headers=learner, json={"submission": "Booked, notes attached"})
    approved = client.post(
        f"/api/manager/submissions/{submitted['id']}/approve", headers=manager, json={"feedback": "Nice"}
    ).json()
    assert approved["status"] == "completed"

    again = client.post(f"/api/manager/submissions/{submitted['id']}/approve", headers=manager, json={})
    assert again.status_code == 409
    assert again.json()["error"] == "INVALID_TRANSITION"

    me = client.get("/api/profile/me", headers=learner).json()
    assert me["total_xp"] == 250
    assert client.get("/api/badges", headers=learner).json()["earned_count"] == 1
    assert client.get("/api/manager/submissions?filter=completed", headers=manager).json()[0]["status"] == "completed"


def test_set_level_awards_level_badge(client, db):
    manager = make_manager(db, client)
    sign_in(client, "rep@example.com")
    learner_id = str(db.query(Profile).filter(Profile.email == "rep@example.com").one().id)

    response = client.patch(f"/api/manager/profiles/{learner_id}/level", headers=manager, json={"level": "closer"})
    assert response.status_code == 200
    assert response.json()["level"] == "closer"
    assert response.json()["next_level_xp"] == 7000

    learner = sign_in(client, "rep@example.com")
    badges = client.get("/api/badges", headers=learner).json()
    assert [badge["type"] for badge in badges["badges"] if badge["earned"]] == ["closer"]

    invalid = client.patch(f"/api/manager/profiles/{learner_id}/level", headers=manager, json={"level": "boss"})
    assert invalid.status_code == 422


def test_manager_replaces_quiz(client, db, store):
    manager = make_manager(db, client)
    seeded = seed_course(store)
    quiz_id = str(seeded["quiz"].id)

    replaced = client.put(
        f"/api/manager/lessons/{quiz_id}/quiz", headers=manager,
        json={"questions": QUIZ_QUESTIONS[:2], "passing_score": 50},
    )
    assert replaced.status_code == 200
    assert replaced.json()["passing_score"] == 50
    assert len(replaced.json()["questions"]) == 2

    detail = client.get(f"/api/lessons/{quiz_id}", headers=manager).json()
    assert len(detail["quiz"]["questions"]) == 2

    not_quiz = client.put(
        f"/api/manager/lessons/{seeded['video'].id}/quiz", headers=manager,
        json={"questions": QUIZ_QUESTIONS},
    )
    assert not_quiz.status_code == 400


def test_locked_lesson_detail_hides_content(client, store):
    seeded = seed_course(store)
    headers = sign_in(client, "rep@example.com")

    quiz = client.get(f"/api/lessons/{seeded['quiz'].id}", headers=headers).json()
    assert quiz["locked"] is True
    assert quiz["title"] == "Opener quiz"
    assert quiz["quiz"] is None

    document = client.get(f"/api/lessons/{seeded['document'].id}", headers=headers).json()
    assert document["locked"] is True
    assert document["content_body"] is None and document["content_url"] is None

    client.post(f"/api/lessons/{seeded['video'].id}/complete", headers=headers)
    quiz = client.get(f"/api/lessons/{seeded['quiz'].id}", headers=headers).json()
    assert quiz["locked"] is False
    assert len(quiz["quiz"]["questions"]) == len(QUIZ_QUESTIONS)
