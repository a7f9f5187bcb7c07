import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import EmailStr, Field
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from eduplatform.auth.passwords import verify_password
from eduplatform.auth.tokens import issue_token
from eduplatform.core import messages
from eduplatform.core.errors import is_unique_violation, with_detail
from eduplatform.database import ADMIN_ROLE
from eduplatform.repositories.roles import RoleRepository, get_role_repository
from eduplatform.repositories.tokens import TokenRepository, get_token_repository
from eduplatform.repositories.users import UserRepository, get_user_repository
from eduplatform.routes.schemas import CamelModel
from eduplatform.routes.user_routes import UserResponse

router = APIRouter(tags=['login'])
logger = logging.getLogger(__name__)


class SignUpRequest(CamelModel):
    login: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    role: int
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)


class SignInRequest(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class SignInResponse(CamelModel):
    access_token: str


@router.post('/signup', response_model=UserResponse, summary='Register a student or a teacher')
def sign_up(
    payload: SignUpRequest,
    users: UserRepository = Depends(get_user_repository),
    roles: RoleRepository = Depends(get_role_repository),
):
    role = roles.get(payload.role)
    if role is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=messages.NO_SUCH_ROLE)
    signup_roles = roles.names(exclude=(ADMIN_ROLE,))
    if role.role not in signup_roles:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=messages.wrong_role(','.join(signup_roles)),
        )

    if users.find_by_login_or_email(payload.login, payload.email) is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=messages.USER_EXISTS)

    try:
        user = users.insert(
            login=payload.login,
            email=payload.email,
            password=payload.password,
            role_id=role.id,
            first_name=payload.first_name,
            last_name=payload.last_name,
        )
    except IntegrityError as exc:
        if is_unique_violation(exc):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=messages.USER_EXISTS) from exc
        logger.exception('Failed to create user %s', payload.login)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=with_detail(messages.UNABLE_TO_CREATE_USER, exc),
        ) from exc
    except SQLAlchemyError as exc:
        logger.exception('Failed to create user %s', payload.login)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=with_detail(messages.UNABLE_TO_CREATE_USER, exc),
        ) from exc

    logger.info('Registered %s %s', role.role, user.login)
    return user


@router.post('/signin', response_model=SignInResponse, summary='Sign in with login or email')
def sign_in(
    payload: SignInRequest,
    users: UserRepository = Depends(get_user_repository),
    tokens: TokenRepository = Depends(get_token_repository),
):
    try:
        user = users.find_by_login_or_email(payload.username)
    except SQLAlchemyError as exc:
        logger.exception('User lookup failed during sign-in')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=with_detail(f'{messages.UNEXPECTED_ERROR}: ', exc),
        ) from exc

    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=messages.NO_USER)

    if not verify_password(payload.password, user.password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=messages.WRONG_CREDENTIALS)

    try:
        token = issue_token(user, payload.username, tokens)
    except SQLAlchemyError as exc:
        logger.exception('Token issuance failed for user %s', user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=with_detail(f'{messages.UNEXPECTED_ERROR}: ', exc),
        ) from exc

    return SignInResponse(access_token=token)
