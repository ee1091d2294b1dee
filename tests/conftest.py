import pytest
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LLM_API_KEY"] = "test-key"
os.environ["AI_KILL_SWITCH"] = "false"
os.environ["AI_FALLBACK_MODEL"] = ""

from hireline.core.config import settings
from hireline.database import Base, get_db
from hireline.main import app
from hireline.services.llm_client import get_llm_client
from tests.factories import FakeLLMClient, RESUME_TEXT, build_pdf
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Create tables once for the whole test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def db_session():
    """Get a clean database session for each test function with rollback safety."""
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()

@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """Point the resume store at a per-test directory."""
    directory = tmp_path / "uploads"
    directory.mkdir()
    monkeypatch.setattr(settings, "upload_dir", str(directory))
    return directory

@pytest.fixture(scope="function")
def fake_llm():
    return FakeLLMClient()

@pytest.fixture(scope="function")
def recruiter(db_session):
    from hireline.models.user import User, UserRole
    from hireline.services import auth as auth_service

    user = User(
        email="recruiter@acme.io",
        username="Rita Recruiter",
        hashed_password=auth_service.get_password_hash("RecruiterPass1!"),
        role=UserRole.RECRUITER,
    )
    db_session.add(user)
    db_session.commit()
    return user

@pytest.fixture(scope="function")
def candidate(db_session):
    from hireline.models.user import User, UserRole
    from hireline.services import auth as auth_service

    user = User(
        email="jane@example.com",
        username="Jane Doe",
        hashed_password=auth_service.get_password_hash("CandidatePass1!"),
        role=UserRole.CANDIDATE,
    )
    db_session.add(user)
    db_session.commit()
    return user

@pytest.fixture(scope="function")
def job(db_session, recruiter):
    from hireline.models.job import Job

    job = Job(
        title="Backend Engineer",
        description="We need Python, FastAPI and Kubernetes experience.",
        company="Acme",
        location="Remote",
        recruiter_id=recruiter.id,
    )
    db_session.add(job)
    db_session.commit()
    return job

@pytest.fixture(scope="function")
def resume(db_session, candidate, upload_dir):
    """A candidate resume backed by a real PDF on the resume store."""
    from hireline.models.resume import Resume

    (upload_dir / "jane.pdf").write_bytes(build_pdf(RESUME_TEXT))
    resume = Resume(owner_id=candidate.id, file_path="jane.pdf", title="Main resume")
    db_session.add(resume)
    db_session.commit()
    return resume

@pytest.fixture(scope="function")
def application(db_session, candidate, job, resume):
    from hireline.models.application import Application

    application = Application(applicant_id=candidate.id, job_id=job.id, resume_id=resume.id)
    db_session.add(application)
    db_session.commit()
    return application

@pytest.fixture(scope="function")
def get_token():
    """Helper fixture to create access tokens."""
    from hireline.services.auth import create_access_token

    def _get_token(user):
        return create_access_token(data={
            "sub": user.email,
            "role": user.role.value,
            "user_id": user.id,
        })
    return _get_token

@pytest.fixture(scope="function")
def auth_headers(get_token):
    def _headers(user):
        return {"Authorization": f"Bearer {get_token(user)}"}
    return _headers

@pytest.fixture(scope="function")
def client(db_session, fake_llm):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
