import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field, field_validator
from sqlalchemy.exc import SQLAlchemyError

from eduplatform.auth.dependencies import get_current_user, require_permission
from eduplatform.core import messages
from eduplatform.core.errors import with_detail
from eduplatform.database import ADMIN_ROLE
from eduplatform.models.course import Course
from eduplatform.models.user import User
from eduplatform.repositories.courses import CourseRepository, get_course_repository
from eduplatform.repositories.materials import MaterialRepository, get_material_repository
from eduplatform.routes.course_routes import get_course_or_404
from eduplatform.routes.schemas import CamelModel, ResultResponse, reject_null

router = APIRouter(tags=['material'])
logger = logging.getLogger(__name__)


class MaterialRequest(CamelModel):
    title: str = Field(min_length=1, max_length=100)
    content: str | None = None


class ChangeMaterialRequest(CamelModel):
    id: int
    title: str | None = Field(None, min_length=1, max_length=100)
    content: str | None = None

    @field_validator('title')
    @classmethod
    def title_not_null(cls, value: str | None) -> str:
        return reject_null(value)


class MaterialResponse(CamelModel):
    id: int
    course_id: int
    title: str
    content: str | None = None
    created_at: datetime
    updated_at: datetime


def get_managed_course(course_id: int, user: User, courses: CourseRepository) -> Course:
    course = get_course_or_404(course_id, courses)
    if user.role_name != ADMIN_ROLE and not course.is_taught_by(user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=messages.NOT_COURSE_TEACHER)
    return course


def get_readable_course(course_id: int, user: User, courses: CourseRepository) -> Course:
    course = get_course_or_404(course_id, courses)
    if user.role_name == ADMIN_ROLE or course.is_taught_by(user) or course.has_student(user):
        return course
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=messages.NO_COURSE_ACCESS)


@router.get('/courses/{course_id}/materials', response_model=list[MaterialResponse], summary='List course materials')
def list_materials(
    course_id: int,
    courses: CourseRepository = Depends(get_course_repository),
    materials: MaterialRepository = Depends(get_material_repository),
    current_user: User = Depends(get_current_user),
):
    course = get_readable_course(course_id, current_user, courses)
    return materials.all_for_course(course.id)


@router.get(
    '/courses/{course_id}/materials/{material_id}',
    response_model=MaterialResponse,
    summary='Get a course material by id',
)
def get_material(
    course_id: int,
    material_id: int,
    courses: CourseRepository = Depends(get_course_repository),
    materials: MaterialRepository = Depends(get_material_repository),
    current_user: User = Depends(get_current_user),
):
    course = get_readable_course(course_id, current_user, courses)
    material = materials.get(course.id, material_id)
    if material is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=messages.NO_MATERIAL)
    return material


@router.post('/courses/{course_id}/materials', response_model=MaterialResponse, summary='Add a course material')
def create_material(
    course_id: int,
    payload: MaterialRequest,
    courses: CourseRepository = Depends(get_course_repository),
    materials: MaterialRepository = Depends(get_material_repository),
    current_user: User = Depends(require_permission('materials:write')),
):
    course = get_managed_course(course_id, current_user, courses)
    try:
        material = materials.insert(course.id, title=payload.title, content=payload.content)
    except SQLAlchemyError as exc:
        logger.exception('Failed to create material for course %s', course_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=with_detail(messages.UNABLE_CREATE_MATERIAL, exc),
        ) from exc

    logger.info('Created material %s in course %s', material.id, course_id)
    return material


@router.put('/courses/{course_id}/materials', response_model=MaterialResponse, summary='Change a course material')
def update_material(
    course_id: int,
    payload: ChangeMaterialRequest,
    courses: CourseRepository = Depends(get_course_repository),
    materials: MaterialRepository = Depends(get_material_repository),
    current_user: User = Depends(require_permission('materials:write')),
):
    course = get_managed_course(course_id, current_user, courses)
    material = materials.get(course.id, payload.id)
    if material is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=messages.NO_MATERIAL)

    try:
        return materials.update(material, payload.model_dump(exclude_unset=True, exclude={'id'}))
    except SQLAlchemyError as exc:
        logger.exception('Failed to change material %s', payload.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=with_detail(messages.UNABLE_CHANGE_MATERIAL, exc),
        ) from exc


@router.delete(
    '/courses/{course_id}/materials/{material_id}',
    response_model=ResultResponse,
    summary='Remove a course material',
)
def delete_material(
    course_id: int,
    material_id: int,
    courses: CourseRepository = Depends(get_course_repository),
    materials: MaterialRepository = Depends(get_material_repository),
    current_user: User = Depends(require_permission('materials:write')),
):
    course = get_managed_course(course_id, current_user, courses)
    try:
        materials.delete(course.id, material_id)
    except SQLAlchemyError as exc:
        logger.exception('Failed to remove material %s', material_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=with_detail(messages.UNABLE_REMOVE_MATERIAL, exc),
        ) from exc
    return {'result': messages.REMOVE_SUCCESS}
