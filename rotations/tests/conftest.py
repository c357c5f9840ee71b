import pytest
import os
from datetime import date, timedelta
from sqlalchemy.orm import sessionmaker
from sqlalchemy_utils import database_exists, create_database, drop_database
from dotenv import load_dotenv
from fastapi.testclient import TestClient

# Load environment variables from .env.test
load_dotenv(".env.test")

from rotations.database import Base, create_db_engine, get_db
from rotations.core.security import token_for
from rotations.main import app
from rotations.models import Specialty
from rotations.schemas.auth import Actor, ActorRole
from rotations.schemas.program import ProgramCreate
from rotations.services import availability

# Needs a file (not :memory:) so concurrent sessions see one database
TEST_DATABASE_URL = os.environ.get(
    "TEST_DATABASE_URL",
    "sqlite:///./test_rotations.db"
)


@pytest.fixture(scope="session")
def test_engine():
    """Create a test database and return the engine."""
    if database_exists(TEST_DATABASE_URL):
        drop_database(TEST_DATABASE_URL)
    create_database(TEST_DATABASE_URL)

    engine = create_db_engine(TEST_DATABASE_URL)

    # Create all tables
    Base.metadata.create_all(bind=engine)

    yield engine

    # Drop the test database after all tests
    engine.dispose()
    drop_database(TEST_DATABASE_URL)


@pytest.fixture(scope="session")
def session_factory(test_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def test_db(test_engine, session_factory):
    """Create a fresh session for each test."""
    db = session_factory()

    try:
        yield db
    finally:
        db.rollback()
        db.close()

        # Clear all tables for isolation between tests
        with test_engine.begin() as conn:
            for table in reversed(Base.metadata.sorted_tables):
                conn.execute(table.delete())


@pytest.fixture
def client(session_factory, test_db):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin():
    return Actor(id="admin-1", role=ActorRole.admin)


@pytest.fixture
def learner():
    return Actor(id="learner-1", role=ActorRole.learner)


@pytest.fixture
def other_learner():
    return Actor(id="learner-2", role=ActorRole.learner)


@pytest.fixture
def preceptor():
    return Actor(id="preceptor-1", role=ActorRole.preceptor)


@pytest.fixture
def auth_headers():
    def _headers(actor: Actor) -> dict:
        return {"Authorization": f"Bearer {token_for(actor)}"}

    return _headers


@pytest.fixture
def cardiology(test_db):
    specialty = Specialty(name="Cardiology")
    test_db.add(specialty)
    test_db.commit()
    test_db.refresh(specialty)
    return specialty


@pytest.fixture
def make_program(test_db, admin):
    """Factory for programs created through the availability engine."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = dict(
            title=f"Rotation {counter['n']}",
            type="observership",
            hospital_name="St. Mary's Hospital",
            mentor_name="Dr. Jane Doe",
            location="Boston, USA",
            country="USA",
            city="Boston",
            description="Shadow attending physicians on daily rounds.",
            duration_weeks=4,
            start_date=date(2030, 1, 1) + timedelta(days=counter["n"]),
            total_seats=5,
        )
        fields.update(overrides)
        is_active = fields.pop("is_active", True)
        program = availability.create_program(test_db, admin, ProgramCreate(**fields))
        if not is_active:
            program = availability.set_program_active(test_db, admin, program.id, False)
        return program

    return _make
