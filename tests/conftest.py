import pytest

from app import create_app
from config import TestConfig
from extensions import db
from models import User
from services import catalog, enrollment
from services.requirements import normalize_requirement_specs

PASSWORD = "password123"


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def session(app):
    return db.session


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(session):
    def _make(email="student@example.com", role="student"):
        user = User(email=email, role=role)
        user.set_password(PASSWORD)
        session.add(user)
        session.commit()
        return user.id

    return _make


@pytest.fixture
def make_program(session):
    def _make(program_id="P", name="Program", university="UTN", enrolled=()):
        catalog.create_program(session, name=name, university=university, program_id=program_id)
        for user_id in enrolled:
            enrollment.enroll(session, user_id, program_id)
        return program_id

    return _make


@pytest.fixture
def make_subject(session):
    def _make(subject_id, program_id="P", name=None, year=1, requirements=(), **extra):
        specs = normalize_requirement_specs(list(requirements))
        catalog.create_subject(
            session,
            name=name or subject_id,
            degree_program_id=program_id,
            year=year,
            requirements=specs,
            subject_id=subject_id,
            **extra,
        )
        return subject_id

    return _make


@pytest.fixture
def login(client):
    def _login(email="student@example.com", password=PASSWORD):
        resp = client.post("/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return resp

    return _login


@pytest.fixture
def student(make_user, make_program):
    """A student enrolled in program P."""
    user_id = make_user()
    make_program("P", enrolled=[user_id])
    return user_id
