import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import EmailStr, Field, field_validator
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from eduplatform.auth.dependencies import get_current_user, require_permission
from eduplatform.core import messages
from eduplatform.core.errors import is_unique_violation, with_detail
from eduplatform.database import TEACHER_ROLE
from eduplatform.models.role import Role
from eduplatform.models.user import User
from eduplatform.repositories.roles import RoleRepository, get_role_repository
from eduplatform.repositories.users import UserRepository, get_user_repository
from eduplatform.routes.schemas import CamelModel, ResultResponse, reject_null

router = APIRouter(tags=['user'])
logger = logging.getLogger(__name__)


class UserResponse(CamelModel):
    id: int
    login: str
    email: str
    role: int
    first_name: str | None = None
    last_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ChangeTeacherRequest(CamelModel):
    id: int
    login: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)

    @field_validator('login', 'email')
    @classmethod
    def credentials_not_null(cls, value: str | None) -> str:
        return reject_null(value)


def get_teacher_role(roles: RoleRepository) -> Role:
    role = roles.get_by_name(TEACHER_ROLE)
    if role is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=messages.NO_TEACHER_ROLE)
    return role


@router.get('/users/me', response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.get('/teachers', response_model=list[UserResponse], summary='List teachers')
def list_teachers(
    users: UserRepository = Depends(get_user_repository),
    roles: RoleRepository = Depends(get_role_repository),
    _current_user: User = Depends(get_current_user),
):
    teacher_role = get_teacher_role(roles)
    return users.list_by_role(teacher_role.id)


@router.get('/teachers/{id}', response_model=UserResponse, summary='Get a teacher by id')
def get_teacher(
    id: int,
    users: UserRepository = Depends(get_user_repository),
    roles: RoleRepository = Depends(get_role_repository),
    _current_user: User = Depends(get_current_user),
):
    teacher_role = get_teacher_role(roles)
    teacher = users.get_by_role(id, teacher_role.id)
    if teacher is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=messages.NO_TEACHER)
    return teacher


@router.put('/teachers', response_model=UserResponse, summary='Change a teacher record')
def update_teacher(
    payload: ChangeTeacherRequest,
    users: UserRepository = Depends(get_user_repository),
    roles: RoleRepository = Depends(get_role_repository),
    _current_user: User = Depends(require_permission('teachers:write')),
):
    teacher_role = get_teacher_role(roles)
    teacher = users.get_by_role(payload.id, teacher_role.id)
    if teacher is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=messages.NO_TEACHER)

    changes = payload.model_dump(exclude_unset=True, exclude={'id'})
    try:
        return users.update(teacher, changes)
    except IntegrityError as exc:
        if is_unique_violation(exc):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=messages.USER_UNIQUE_FIELDS,
            ) from exc
        logger.exception('Failed to update teacher %s', payload.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=with_detail(messages.UNABLE_TO_UPDATE_USER, exc),
        ) from exc
    except SQLAlchemyError as exc:
        logger.exception('Failed to update teacher %s', payload.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=with_detail(messages.UNABLE_TO_UPDATE_USER, exc),
        ) from exc


@router.delete('/teachers/{id}', response_model=ResultResponse, summary='Remove a teacher record')
def delete_teacher(
    id: int,
    users: UserRepository = Depends(get_user_repository),
    roles: RoleRepository = Depends(get_role_repository),
    _current_user: User = Depends(require_permission('teachers:write')),
):
    teacher_role = get_teacher_role(roles)
    try:
        removed = users.delete_by_role(id, teacher_role.id)
    except SQLAlchemyError as exc:
        logger.exception('Failed to remove teacher %s', id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=with_detail(messages.UNABLE_TO_REMOVE_TEACHER, exc),
        ) from exc

    if removed:
        logger.info('Removed teacher %s', id)
    return {'result': messages.REMOVE_SUCCESS}
