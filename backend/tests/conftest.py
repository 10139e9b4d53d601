# tests/conftest.py
from datetime import timedelta
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from pathlib import Path
import shutil
import tempfile
import os

from bidding.main import app
from bidding.database import Base, get_db
from bidding.models import Bid, Deliverable, Project, ProjectStatus, Role, User
from bidding.config import settings
from bidding.services.auth import create_access_token, hash_password
from bidding.services.notifications import get_notifier
from bidding.utils.dates import utcnow

# Create test database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"


class RecordingNotifier:
    """Stands in for the SMTP notifier and keeps every message it was asked to send"""

    def __init__(self):
        self.sent = []

    def notify(self, notification):
        self.sent.append(notification)
        return True

    def recipients(self):
        return [n.to for n in self.sent]


@pytest.fixture
def engine():
    """Fresh in-memory database per test"""
    engine = create_engine(
        SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool  # Needed for SQLite in-memory database
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()

@pytest.fixture
def db_session(engine):
    """Creates a new database session for a test"""
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()

@pytest.fixture(scope="session")
def temp_storage_dir():
    """Create temporary storage directory for test files"""
    temp_dir = tempfile.mkdtemp()
    for subdir in ["uploads", "deliverables"]:
        Path(temp_dir, subdir).mkdir(parents=True, exist_ok=True)
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)

@pytest.fixture(autouse=True)
def override_settings(temp_storage_dir):
    """Override settings for testing"""
    original_storage = settings.STORAGE_PATH
    original_uploads = settings.UPLOADS_PATH
    original_deliverables = settings.DELIVERABLES_PATH
    original_email_enabled = settings.EMAIL_ENABLED

    settings.STORAGE_PATH = temp_storage_dir
    settings.UPLOADS_PATH = temp_storage_dir / "uploads"
    settings.DELIVERABLES_PATH = temp_storage_dir / "deliverables"
    settings.EMAIL_ENABLED = False

    yield

    settings.STORAGE_PATH = original_storage
    settings.UPLOADS_PATH = original_uploads
    settings.DELIVERABLES_PATH = original_deliverables
    settings.EMAIL_ENABLED = original_email_enabled

@pytest.fixture
def notifier():
    return RecordingNotifier()

@pytest.fixture
def client(db_session, notifier):
    """Test client using the test database and a recording notifier"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db_session, email, name, role, password="pw"):
    user = User(email=email, password=hash_password(password), name=name, role=role)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user

def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}

def make_project(db_session, buyer, deadline=None, status=ProjectStatus.OPEN, title="Logo"):
    project = Project(
        title=title,
        description="Design a logo",
        budget_min=10,
        budget_max=100,
        deadline=deadline or utcnow() + timedelta(days=7),
        status=status,
        buyer_id=buyer.id
    )
    db_session.add(project)
    db_session.commit()
    db_session.refresh(project)
    return project

def make_bid(db_session, project, seller, amount=50, message="I can do it"):
    bid = Bid(project_id=project.id, seller_id=seller.id, amount=amount, message=message)
    db_session.add(bid)
    db_session.commit()
    db_session.refresh(bid)
    return bid


@pytest.fixture
def buyer(db_session):
    return make_user(db_session, "buyer@x.com", "Bo", Role.BUYER)

@pytest.fixture
def other_buyer(db_session):
    return make_user(db_session, "buyer2@x.com", "Bea", Role.BUYER)

@pytest.fixture
def seller(db_session):
    return make_user(db_session, "seller@x.com", "Sam", Role.SELLER)

@pytest.fixture
def other_seller(db_session):
    return make_user(db_session, "seller2@x.com", "Sue", Role.SELLER)

@pytest.fixture
def buyer_headers(buyer):
    return auth_headers(buyer)

@pytest.fixture
def seller_headers(seller):
    return auth_headers(seller)

@pytest.fixture
def other_seller_headers(other_seller):
    return auth_headers(other_seller)

@pytest.fixture
def open_project(db_session, buyer):
    return make_project(db_session, buyer)

@pytest.fixture
def expired_project(db_session, buyer):
    return make_project(db_session, buyer, deadline=utcnow() - timedelta(days=1), title="Expired")

@pytest.fixture
def sample_bid(db_session, open_project, seller):
    return make_bid(db_session, open_project, seller)

@pytest.fixture
def assigned_project(db_session, open_project, sample_bid):
    """Project with `sample_bid` selected"""
    open_project.status = ProjectStatus.ASSIGNED
    open_project.selected_bid_id = sample_bid.id
    db_session.commit()
    db_session.refresh(open_project)
    return open_project

@pytest.fixture
def delivered_project(db_session, assigned_project, seller):
    deliverable = Deliverable(
        project_id=assigned_project.id,
        seller_id=seller.id,
        file_url="http://localhost:5000/storage/project-deliverables/final.pdf"
    )
    db_session.add(deliverable)
    db_session.commit()
    db_session.refresh(assigned_project)
    return assigned_project

@pytest.fixture
def pdf_bytes():
    return b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n"

@pytest.fixture(scope="session", autouse=True)
def cleanup_test_files():
    """Clean up test files after all tests are done"""
    yield
    for file in ["bidding.db", "test.db"]:
        if os.path.exists(file):
            os.remove(file)


@pytest.fixture
def user_factory(db_session):
    return lambda email, name, role: make_user(db_session, email, name, role)

@pytest.fixture
def project_factory(db_session):
    return lambda buyer, **kwargs: make_project(db_session, buyer, **kwargs)

@pytest.fixture
def bid_factory(db_session):
    return lambda project, seller, **kwargs: make_bid(db_session, project, seller, **kwargs)

@pytest.fixture
def headers_for():
    return auth_headers
