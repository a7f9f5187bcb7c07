from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from eduplatform.auth import jwt_handler
from eduplatform.auth.jwt_handler import TokenStatus
from eduplatform.core import config, messages
from eduplatform.models.user import User
from eduplatform.repositories.api_keys import ApiKeyRepository, get_api_key_repository
from eduplatform.repositories.tokens import TokenRepository, get_token_repository
from eduplatform.repositories.users import UserRepository, get_user_repository

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str = messages.UNAUTHORIZED) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={'WWW-Authenticate': 'Bearer'},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    users: UserRepository = Depends(get_user_repository),
    tokens: TokenRepository = Depends(get_token_repository),
) -> User:
    if credentials is None:
        raise _unauthorized()

    token = credentials.credentials
    token_status, payload = jwt_handler.read_access_token(token)
    if token_status is TokenStatus.EXPIRED:
        raise _unauthorized(messages.EXPIRED_TOKEN)
    if token_status is not TokenStatus.VALID:
        raise _unauthorized()

    username = payload.get('username')
    if not username:
        raise _unauthorized()

    user = users.find_by_login_or_email(username)
    if user is None:
        raise _unauthorized()

    # Only the token stored at sign-in is accepted.
    stored = tokens.get_by_user(user.id)
    if stored is None or stored.jwt != token:
        raise _unauthorized()
    return user


def require_permission(permission: str):
    """
    Dependency factory to check that the current user's role grants a permission.
    Usage: Depends(require_permission("categories:write"))
    """
    def permission_checker(current_user: User = Depends(get_current_user)) -> User:
        if not current_user.has_permission(permission):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=messages.FORBIDDEN)
        return current_user
    return permission_checker


def require_api_key(
    request: Request,
    api_keys: ApiKeyRepository = Depends(get_api_key_repository),
) -> str:
    key = request.headers.get(config.API_KEY_HEADER)
    if not key or not api_keys.is_valid(key):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=messages.UNAUTHORIZED)
    return key
