import os
import tempfile
import uuid

import pytest

# Configure before academy modules read settings and build the engine
_db_dir = tempfile.mkdtemp(prefix="academy-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'academy.db')}"
os.environ["REDIS_URL"] = ""
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ.setdefault("RATE_LIMIT_PER_MINUTE", "100000")
os.environ.setdefault("RATE_LIMIT_PER_HOUR", "1000000")

from fastapi.testclient import TestClient  # noqa: E402

import academy.models  # noqa: E402,F401
from academy.database import Base, SessionLocal, engine  # noqa: E402
from academy.main import app  # noqa: E402
from academy.models import Profile  # noqa: E402
from academy.store import Store  # noqa: E402
from academy.utils.rate_limiter import rate_limiter  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    rate_limiter.reset()
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return Store(db)


@pytest.fixture
def client():
    return TestClient(app)


def sign_in(client, email, password="password123"):
    """Sign up (if needed) and sign in, returning auth headers"""
    client.post("/api/auth/signup", json={"email": email, "password": password})
    response = client.post("/api/auth/signin", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def make_manager(db, client, email="manager@example.com"):
    headers = sign_in(client, email)
    profile = db.query(Profile).filter(Profile.email == email).one()
    profile.role = "manager"
    db.commit()
    return headers


def make_learner(store, email="learner@example.com", level="rookie"):
    """Profile row without an account, for service-level tests"""
    profile = store.create_profile(uuid.uuid4(), email)
    if level != "rookie":
        profile = store.set_profile_level(profile.id, level)
    return profile


QUIZ_QUESTIONS = [
    {"question": "Best time to call?", "options": ["8am", "Noon", "4pm", "Midnight"], "correct_index": 0},
    {"question": "Open with?", "options": ["Price", "Pain", "Pitch", "Product"], "correct_index": 1},
    {"question": "Follow up within?", "options": ["1 day", "1 week", "1 month", "Never"], "correct_index": 0},
    {"question": "Objection means?", "options": ["No", "Interest", "Stop", "Hang up"], "correct_index": 1},
]


def seed_course(store):
    """
    One course, two modules:
    module 1: video, quiz (4 questions, pass 75)
    module 2: roleplay, document
    """
    course = store.create_course("Cold Calling 101", "Basics", "📞")
    first = store.create_module(course.id, "Openers")
    second = store.create_module(course.id, "Practice")
    video = store.create_lesson(first.id, title="Intro video", type="video", xp_value=100)
    quiz = store.create_lesson(
        first.id,
        title="Opener quiz",
        type="quiz",
        xp_value=150,
        quiz={"questions": QUIZ_QUESTIONS, "passing_score": 75},
    )
    roleplay = store.create_lesson(second.id, title="Gatekeeper role-play", type="roleplay", xp_value=200)
    document = store.create_lesson(second.id, title="Call script", type="document", xp_value=50, content_body="Hi, this is Sam from Acme.")
    return {
        "course": course,
        "modules": [first, second],
        "video": video,
        "quiz": quiz,
        "roleplay": roleplay,
        "document": document,
    }
