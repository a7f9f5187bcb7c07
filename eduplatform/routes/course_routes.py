import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field, field_validator
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from eduplatform.auth.dependencies import get_current_user, require_permission
from eduplatform.core import messages
from eduplatform.core.errors import is_unique_violation, with_detail
from eduplatform.models.course import Course
from eduplatform.models.user import User
from eduplatform.repositories.categories import CategoryRepository, get_category_repository
from eduplatform.repositories.courses import CourseRepository, get_course_repository
from eduplatform.repositories.roles import RoleRepository, get_role_repository
from eduplatform.repositories.users import UserRepository, get_user_repository
from eduplatform.routes.schemas import CamelModel, ResultResponse, reject_null
from eduplatform.routes.user_routes import get_teacher_role

router = APIRouter(tags=['course'])
logger = logging.getLogger(__name__)


class CourseRequest(CamelModel):
    title: str = Field(min_length=1, max_length=100)
    description: str | None = None
    category_id: int
    teacher_id: int


class ChangeCourseRequest(CamelModel):
    id: int
    title: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    category_id: int | None = None
    teacher_id: int | None = None

    @field_validator('title')
    @classmethod
    def title_not_null(cls, value: str | None) -> str:
        return reject_null(value)


class CourseResponse(CamelModel):
    id: int
    title: str
    description: str | None = None
    category_id: int | None = None
    teacher_id: int | None = None
    created_at: datetime
    updated_at: datetime


def get_course_or_404(course_id: int, courses: CourseRepository) -> Course:
    course = courses.get(course_id)
    if course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=messages.NO_COURSE)
    return course


def check_course_references(
    changes: dict,
    categories: CategoryRepository,
    users: UserRepository,
    roles: RoleRepository,
) -> None:
    if changes.get('category_id') is not None and categories.get(changes['category_id']) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=messages.NO_CATEGORY)

    if changes.get('teacher_id') is not None:
        teacher_role = get_teacher_role(roles)
        if users.get_by_role(changes['teacher_id'], teacher_role.id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=messages.NO_TEACHER)


def _write_failed(prefix: str, exc: SQLAlchemyError) -> HTTPException:
    if isinstance(exc, IntegrityError) and is_unique_violation(exc):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=messages.TITLE_UNIQUE)
    logger.exception('Course write failed')
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=with_detail(prefix, exc),
    )


@router.get('/courses', response_model=list[CourseResponse], summary='List courses')
def list_courses(
    courses: CourseRepository = Depends(get_course_repository),
    _current_user: User = Depends(get_current_user),
):
    return courses.all()


@router.get('/courses/{course_id}', response_model=CourseResponse, summary='Get a course by id')
def get_course(
    course_id: int,
    courses: CourseRepository = Depends(get_course_repository),
    _current_user: User = Depends(get_current_user),
):
    return get_course_or_404(course_id, courses)


@router.post('/courses', response_model=CourseResponse, summary='Add a course')
def create_course(
    payload: CourseRequest,
    courses: CourseRepository = Depends(get_course_repository),
    categories: CategoryRepository = Depends(get_category_repository),
    users: UserRepository = Depends(get_user_repository),
    roles: RoleRepository = Depends(get_role_repository),
    _current_user: User = Depends(require_permission('courses:write')),
):
    check_course_references(payload.model_dump(), categories, users, roles)
    try:
        course = courses.insert(
            title=payload.title,
            description=payload.description,
            category_id=payload.category_id,
            teacher_id=payload.teacher_id,
        )
    except SQLAlchemyError as exc:
        raise _write_failed(messages.UNABLE_CREATE_COURSE, exc) from exc

    logger.info('Created course %s for teacher %s', course.id, course.teacher_id)
    return course


@router.put('/courses', response_model=CourseResponse, summary='Change a course')
def update_course(
    payload: ChangeCourseRequest,
    courses: CourseRepository = Depends(get_course_repository),
    categories: CategoryRepository = Depends(get_category_repository),
    users: UserRepository = Depends(get_user_repository),
    roles: RoleRepository = Depends(get_role_repository),
    _current_user: User = Depends(require_permission('courses:write')),
):
    course = get_course_or_404(payload.id, courses)
    changes = payload.model_dump(exclude_unset=True, exclude={'id'})
    check_course_references(changes, categories, users, roles)
    try:
        return courses.update(course, changes)
    except SQLAlchemyError as exc:
        raise _write_failed(messages.UNABLE_CHANGE_COURSE, exc) from exc


@router.delete('/courses/{course_id}', response_model=ResultResponse, summary='Remove a course by id')
def delete_course(
    course_id: int,
    courses: CourseRepository = Depends(get_course_repository),
    _current_user: User = Depends(require_permission('courses:write')),
):
    try:
        courses.delete(course_id)
    except SQLAlchemyError as exc:
        raise _write_failed(messages.UNABLE_REMOVE_COURSE, exc) from exc
    return {'result': messages.REMOVE_SUCCESS}


@router.post('/courses/{course_id}/enroll', response_model=ResultResponse, summary='Enroll to a course')
def enroll_course(
    course_id: int,
    courses: CourseRepository = Depends(get_course_repository),
    current_user: User = Depends(require_permission('courses:enroll')),
):
    course = get_course_or_404(course_id, courses)
    if course.has_student(current_user):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=messages.ALREADY_ENROLLED)

    try:
        courses.enroll(course, current_user)
    except IntegrityError as exc:
        # Same enrollment stored by a parallel request.
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=messages.ALREADY_ENROLLED) from exc
    except SQLAlchemyError as exc:
        logger.exception('Failed to enroll user %s to course %s', current_user.id, course_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=with_detail(messages.UNABLE_ENROLL, exc),
        ) from exc

    logger.info('User %s enrolled to course %s', current_user.id, course_id)
    return {'result': messages.ENROLL_SUCCESS}


@router.post('/courses/{course_id}/leave', response_model=ResultResponse, summary='Leave a course')
def leave_course(
    course_id: int,
    courses: CourseRepository = Depends(get_course_repository),
    current_user: User = Depends(require_permission('courses:enroll')),
):
    course = get_course_or_404(course_id, courses)
    if not course.has_student(current_user):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=messages.NOT_ENROLLED)

    try:
        courses.leave(course, current_user)
    except SQLAlchemyError as exc:
        logger.exception('Failed to remove user %s from course %s', current_user.id, course_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=with_detail(messages.UNABLE_LEAVE, exc),
        ) from exc

    logger.info('User %s left course %s', current_user.id, course_id)
    return {'result': messages.LEAVE_SUCCESS}
