import pytest
from fastapi import HTTPException

from eduplatform.auth import jwt_handler
from eduplatform.auth.passwords import verify_password
from eduplatform.core import messages
from eduplatform.database import ADMIN_ROLE, TEACHER_ROLE
from eduplatform.models.jwt_auth import JwtAuth
from eduplatform.models.user import User
from eduplatform.repositories.tokens import TokenRepository
from eduplatform.repositories.users import UserRepository
from eduplatform.routes.login_routes import SignInRequest, sign_in

DEFAULT_PASSWORD = 'secret-password'


def _signup_body(role_id: int, **overrides) -> dict:
    body = {
        'login': 'newstudent',
        'email': 'newstudent@example.edu',
        'password': 'strong-password',
        'role': role_id,
        'firstName': 'New',
        'lastName': 'Student',
    }
    body.update(overrides)
    return body


def test_signup_creates_user_without_password(client, db, role_ids) -> None:
    response = client.post('/api/v1/signup', json=_signup_body(role_ids['student']))

    assert response.status_code == 200
    body = response.json()
    assert 'password' not in body
    assert body['login'] == 'newstudent'
    assert body['firstName'] == 'New'
    assert body['role'] == role_ids['student']

    stored = db.query(User).filter(User.login == 'newstudent').first()
    assert stored.password != 'strong-password'
    assert verify_password('strong-password', stored.password)


def test_signup_allows_missing_names(client, role_ids) -> None:
    body = _signup_body(role_ids['teacher'])
    del body['firstName']
    del body['lastName']

    response = client.post('/api/v1/signup', json=body)

    assert response.status_code == 200
    assert response.json()['firstName'] is None
    assert response.json()['lastName'] is None


@pytest.mark.parametrize(
    'overrides',
    [
        {'email': 'other@example.edu'},
        {'login': 'otherlogin'},
    ],
)
def test_signup_rejects_duplicate_login_or_email(client, role_ids, overrides: dict) -> None:
    assert client.post('/api/v1/signup', json=_signup_body(role_ids['student'])).status_code == 200

    response = client.post('/api/v1/signup', json=_signup_body(role_ids['student'], **overrides))

    assert response.status_code == 400
    assert response.json() == {'errors': 'User with such credentials already exist'}


def test_signup_rejects_unknown_role(client) -> None:
    response = client.post('/api/v1/signup', json=_signup_body(999))

    assert response.status_code == 400
    assert response.json()['errors'] == messages.NO_SUCH_ROLE


def test_signup_rejects_admin_role(client, role_ids) -> None:
    response = client.post('/api/v1/signup', json=_signup_body(role_ids[ADMIN_ROLE]))

    assert response.status_code == 400
    assert response.json()['errors'] == 'Wrong role, please send the right role: student,teacher'


def test_signup_reports_missing_fields(client) -> None:
    response = client.post('/api/v1/signup', json={'login': 'someone'})

    assert response.status_code == 400
    errors = response.json()['errors']
    assert {error['param'] for error in errors} == {'email', 'password', 'role'}
    assert all(error['msg'] == 'Please send required fields: email,password,role' for error in errors)


def test_signin_returns_not_found_for_unknown_user(client) -> None:
    response = client.post('/api/v1/signin', json={'username': 'ghost', 'password': 'whatever'})

    assert response.status_code == 404
    assert response.json()['errors'] == messages.NO_USER


def test_signin_rejects_wrong_password(client, student) -> None:
    response = client.post('/api/v1/signin', json={'username': student.login, 'password': 'wrong-password'})

    assert response.status_code == 400
    assert response.json()['errors'] == messages.WRONG_CREDENTIALS


def test_signin_issues_and_stores_new_token(client, db, student) -> None:
    response = client.post('/api/v1/signin', json={'username': student.login, 'password': DEFAULT_PASSWORD})

    assert response.status_code == 200
    token = response.json()['accessToken']
    payload = jwt_handler.decode_access_token(token)
    assert payload['username'] == student.login
    assert payload['role'] == 'student'

    rows = db.query(JwtAuth).filter(JwtAuth.user_id == student.id).all()
    assert [row.jwt for row in rows] == [token]


def test_signin_accepts_email_as_username(client, student) -> None:
    response = client.post('/api/v1/signin', json={'username': student.email, 'password': DEFAULT_PASSWORD})

    assert response.status_code == 200
    assert jwt_handler.decode_access_token(response.json()['accessToken'])['username'] == student.email


def test_signin_reuses_valid_token(client, db, student) -> None:
    first = client.post('/api/v1/signin', json={'username': student.login, 'password': DEFAULT_PASSWORD})
    second = client.post('/api/v1/signin', json={'username': student.login, 'password': DEFAULT_PASSWORD})

    assert first.json()['accessToken'] == second.json()['accessToken']
    assert TokenRepository(db).count_for_user(student.id) == 1


def test_signin_replaces_expired_token(db, student) -> None:
    tokens = TokenRepository(db)
    expired_token = jwt_handler.create_access_token(student.login, 'student', expires_minutes=-5)
    tokens.insert(student.id, expired_token)

    response = sign_in(
        payload=SignInRequest(username=student.login, password=DEFAULT_PASSWORD),
        users=UserRepository(db),
        tokens=tokens,
    )

    db.expire_all()
    rows = db.query(JwtAuth).filter(JwtAuth.user_id == student.id).all()
    assert len(rows) == 1
    assert rows[0].jwt == response.access_token
    assert response.access_token != expired_token
    assert db.query(JwtAuth).filter(JwtAuth.jwt == expired_token).first() is None


def test_signin_direct_call_raises_for_wrong_password(db, make_user) -> None:
    teacher = make_user(TEACHER_ROLE)

    with pytest.raises(HTTPException) as exception_info:
        sign_in(
            payload=SignInRequest(username=teacher.login, password='nope'),
            users=UserRepository(db),
            tokens=TokenRepository(db),
        )

    assert exception_info.value.status_code == 400
    assert exception_info.value.detail == messages.WRONG_CREDENTIALS
