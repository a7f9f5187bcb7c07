import os

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')
os.environ.setdefault('BCRYPT_ROUNDS', '4')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from eduplatform.auth import jwt_handler  # noqa: E402
from eduplatform.database import (  # noqa: E402
    ADMIN_ROLE,
    STUDENT_ROLE,
    TEACHER_ROLE,
    Base,
    get_db,
    seed_roles_and_permissions,
)
from eduplatform.main import app  # noqa: E402
from eduplatform.models.role import Role  # noqa: E402
from eduplatform.models.user import User  # noqa: E402
from eduplatform.repositories.tokens import TokenRepository  # noqa: E402

DEFAULT_PASSWORD = 'secret-password'


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db(db_engine):
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = testing_session_local()
    seed_roles_and_permissions(session)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_engine, db):
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def override_get_db():
        session = testing_session_local()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def role_ids(db) -> dict[str, int]:
    return {role.role: role.id for role in db.query(Role).all()}


@pytest.fixture
def make_user(db, role_ids):
    counter = {'value': 0}

    def _make_user(role: str = STUDENT_ROLE, login: str | None = None, password: str = DEFAULT_PASSWORD) -> User:
        counter['value'] += 1
        login = login or f'{role}{counter["value"]}'
        user = User(
            login=login,
            email=f'{login}@example.edu',
            password=password,
            role=role_ids[role],
            first_name='Test',
            last_name='User',
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers(db):
    """Store a token for the user and return the matching Authorization header."""
    def _auth_headers(user: User) -> dict[str, str]:
        token = jwt_handler.create_access_token(username=user.login, role=user.role_name)
        tokens = TokenRepository(db)
        stored = tokens.get_by_user(user.id)
        if stored is not None:
            tokens.delete(stored.id)
        tokens.insert(user.id, token)
        return {'Authorization': f'Bearer {token}'}

    return _auth_headers


@pytest.fixture
def admin(make_user):
    return make_user(ADMIN_ROLE, login='admin')


@pytest.fixture
def teacher(make_user):
    return make_user(TEACHER_ROLE, login='teacher')


@pytest.fixture
def student(make_user):
    return make_user(STUDENT_ROLE, login='student')
