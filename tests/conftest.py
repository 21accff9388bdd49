from pathlib import Path

from dotenv import load_dotenv

env_file = Path(__file__).parent.parent / ".env.test"
load_dotenv(env_file)

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.auth.models.user import UserRole  # noqa: E402
from app.core.storage import LocalStorage, get_storage  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import get_db  # noqa: E402
from app.main import app  # noqa: E402
from tests.utils.factories import create_user_factory  # noqa: E402
from tests.utils.helpers import token_for  # noqa: E402


@pytest.fixture(scope="session")
def test_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite handles transactions itself unless told not to; SAVEPOINTs need it off
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="session")
def test_session_local(test_engine):
    return sessionmaker(bind=test_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(test_session_local):
    session = test_session_local()

    session.commit = session.flush

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "uploads"))


@pytest.fixture
async def test_app(db_session, storage):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def test_client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        yield client


@pytest.fixture
def test_user(db_session):
    return create_user_factory(
        db_session, email="student@example.com", password="testpass123", role=UserRole.STUDENT
    )


@pytest.fixture
def test_instructor(db_session):
    return create_user_factory(
        db_session,
        email="instructor@example.com",
        password="instructorpass123",
        role=UserRole.INSTRUCTOR,
    )


@pytest.fixture
def other_instructor(db_session):
    return create_user_factory(db_session, role=UserRole.INSTRUCTOR)


@pytest.fixture
def test_admin(db_session):
    return create_user_factory(
        db_session, email="admin@example.com", password="adminpass123", role=UserRole.ADMIN
    )


@pytest.fixture
def test_super_admin(db_session):
    return create_user_factory(
        db_session,
        email="root@example.com",
        password="rootpass123",
        role=UserRole.SUPER_ADMIN,
    )


@pytest.fixture
def test_user_token(test_user):
    return token_for(test_user)


@pytest.fixture
def test_instructor_token(test_instructor):
    return token_for(test_instructor)


@pytest.fixture
def test_admin_token(test_admin):
    return token_for(test_admin)


@pytest.fixture
def test_super_admin_token(test_super_admin):
    return token_for(test_super_admin)
