import jwt
import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from eduplatform.auth import jwt_handler
from eduplatform.auth.dependencies import get_current_user, require_permission
from eduplatform.core import config, messages
from eduplatform.repositories.api_keys import ApiKeyRepository
from eduplatform.repositories.tokens import TokenRepository
from eduplatform.repositories.users import UserRepository


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme='Bearer', credentials=token)


def _resolve(db, token: str | None):
    return get_current_user(
        credentials=_credentials(token) if token is not None else None,
        users=UserRepository(db),
        tokens=TokenRepository(db),
    )


def test_get_current_user_resolves_stored_token(db, student) -> None:
    token = jwt_handler.create_access_token(student.login, 'student')
    TokenRepository(db).insert(student.id, token)

    assert _resolve(db, token).id == student.id


def test_get_current_user_rejects_missing_credentials(db) -> None:
    with pytest.raises(HTTPException) as exception_info:
        _resolve(db, None)

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == messages.UNAUTHORIZED


def test_get_current_user_reports_expired_token(db, student) -> None:
    token = jwt_handler.create_access_token(student.login, 'student', expires_minutes=-1)
    TokenRepository(db).insert(student.id, token)

    with pytest.raises(HTTPException) as exception_info:
        _resolve(db, token)

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == messages.EXPIRED_TOKEN


def test_get_current_user_decodes_token_once(db, student, monkeypatch) -> None:
    token = jwt_handler.create_access_token(student.login, 'student')
    TokenRepository(db).insert(student.id, token)
    decode = jwt_handler.decode_access_token
    calls = []

    def decode_then_expire(value: str) -> dict:
        calls.append(value)
        if len(calls) > 1:
            raise jwt.ExpiredSignatureError('Signature has expired')
        return decode(value)

    monkeypatch.setattr(jwt_handler, 'decode_access_token', decode_then_expire)

    assert _resolve(db, token).id == student.id
    assert calls == [token]


def test_get_current_user_rejects_token_that_was_not_stored(db, student) -> None:
    token = jwt_handler.create_access_token(student.login, 'student')

    with pytest.raises(HTTPException) as exception_info:
        _resolve(db, token)

    assert exception_info.value.status_code == 401


def test_require_permission_rejects_role_without_permission(student) -> None:
    checker = require_permission('categories:write')

    with pytest.raises(HTTPException) as exception_info:
        checker(current_user=student)

    assert exception_info.value.status_code == 403


def test_require_permission_returns_user_with_permission(admin) -> None:
    assert require_permission('categories:write')(current_user=admin) is admin


def test_api_key_endpoint_accepts_stored_key(client, db) -> None:
    ApiKeyRepository(db).insert('integration-key', description='tests')

    response = client.get('/api/v1/auth/api-key', headers={config.API_KEY_HEADER: 'integration-key'})

    assert response.status_code == 200
    assert response.json() == {'result': 'Authentication passed!'}


@pytest.mark.parametrize('headers', [{}, {config.API_KEY_HEADER: 'unknown-key'}])
def test_api_key_endpoint_rejects_missing_or_unknown_key(client, headers: dict) -> None:
    response = client.get('/api/v1/auth/api-key', headers=headers)

    assert response.status_code == 401
    assert response.json() == {'errors': messages.UNAUTHORIZED}


def test_jwt_endpoint_requires_bearer_token(client, student, auth_headers) -> None:
    assert client.get('/api/v1/auth/jwt').status_code == 401

    response = client.get('/api/v1/auth/jwt', headers=auth_headers(student))

    assert response.status_code == 200
    assert response.json() == {'result': messages.AUTH_PASSED}


def test_no_auth_endpoint_is_public(client) -> None:
    response = client.get('/api/v1/auth/no-auth')

    assert response.status_code == 200
    assert response.json() == {'result': messages.NO_AUTH_NEEDED}
