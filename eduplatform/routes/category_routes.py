import logging
import re
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import field_validator
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from eduplatform.auth.dependencies import get_current_user, require_permission
from eduplatform.core import messages
from eduplatform.core.errors import is_unique_violation, with_detail
from eduplatform.models.user import User
from eduplatform.repositories.categories import CategoryRepository, get_category_repository
from eduplatform.routes.schemas import CamelModel, ResultResponse

router = APIRouter(tags=['category'])
logger = logging.getLogger(__name__)

TITLE_PATTERN = re.compile(r'^[A-Za-zА-Яа-яЁё ]+$')


def validate_category_title(value: str) -> str:
    normalized = value.strip()

    if len(normalized) < messages.CATEGORY_TITLE_MIN_LENGTH:
        raise ValueError(messages.WRONG_MIN_CATEGORY_LENGTH)
    if len(normalized) > messages.CATEGORY_TITLE_MAX_LENGTH:
        raise ValueError(messages.WRONG_MAX_CATEGORY_LENGTH)
    if not TITLE_PATTERN.fullmatch(normalized):
        raise ValueError(messages.ONLY_ALPHABET_ALLOWED)

    return normalized


class CategoryRequest(CamelModel):
    title: str

    @field_validator('title')
    @classmethod
    def validate_title(cls, value: str) -> str:
        return validate_category_title(value)


class ChangeCategoryRequest(CamelModel):
    id: int
    title: str

    @field_validator('title')
    @classmethod
    def validate_title(cls, value: str) -> str:
        return validate_category_title(value)


class CategoryListItem(CamelModel):
    id: int
    title: str


class CategoryResponse(CategoryListItem):
    created_at: datetime
    updated_at: datetime


@router.get('/categories', response_model=list[CategoryListItem], summary='List categories')
def list_categories(
    categories: CategoryRepository = Depends(get_category_repository),
    _current_user: User = Depends(get_current_user),
):
    try:
        return categories.all()
    except SQLAlchemyError as exc:
        logger.exception('Failed to list categories')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=with_detail(messages.NO_CATEGORY, exc),
        ) from exc


@router.get('/categories/{id}', response_model=CategoryResponse, summary='Get a category by id')
def get_category(
    id: int,
    categories: CategoryRepository = Depends(get_category_repository),
    _current_user: User = Depends(get_current_user),
):
    try:
        category = categories.get(id)
    except SQLAlchemyError as exc:
        logger.exception('Failed to load category %s', id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=with_detail(f'{messages.NO_CATEGORY}: ', exc),
        ) from exc

    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=messages.NO_CATEGORY)
    return category


@router.post('/categories', response_model=CategoryResponse, summary='Add a category')
def create_category(
    payload: CategoryRequest,
    categories: CategoryRepository = Depends(get_category_repository),
    _current_user: User = Depends(require_permission('categories:write')),
):
    try:
        category = categories.insert(payload.title)
    except IntegrityError as exc:
        if is_unique_violation(exc):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=messages.TITLE_UNIQUE) from exc
        logger.exception('Failed to create category %s', payload.title)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=with_detail(messages.UNABLE_CREATE_CATEGORY, exc),
        ) from exc
    except SQLAlchemyError as exc:
        logger.exception('Failed to create category %s', payload.title)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=with_detail(messages.UNABLE_CREATE_CATEGORY, exc),
        ) from exc

    logger.info('Created category %s', category.id)
    return category


@router.put('/categories', response_model=CategoryResponse, summary='Change a category')
def update_category(
    payload: ChangeCategoryRequest,
    categories: CategoryRepository = Depends(get_category_repository),
    _current_user: User = Depends(require_permission('categories:write')),
):
    category = categories.get(payload.id)
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=messages.NO_CATEGORY)

    try:
        return categories.update(category, payload.model_dump(exclude_unset=True, exclude={'id'}))
    except IntegrityError as exc:
        if is_unique_violation(exc):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=messages.TITLE_UNIQUE) from exc
        logger.exception('Failed to change category %s', payload.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=with_detail(messages.UNABLE_CHANGE_CATEGORY, exc),
        ) from exc
    except SQLAlchemyError as exc:
        logger.exception('Failed to change category %s', payload.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=with_detail(messages.UNABLE_CHANGE_CATEGORY, exc),
        ) from exc


@router.delete('/categories/{id}', response_model=ResultResponse, summary='Remove a category by id')
def delete_category(
    id: int,
    categories: CategoryRepository = Depends(get_category_repository),
    _current_user: User = Depends(require_permission('categories:write')),
):
    try:
        removed = categories.delete(id)
    except SQLAlchemyError as exc:
        logger.exception('Failed to remove category %s', id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=with_detail(messages.UNABLE_REMOVE_CATEGORY, exc),
        ) from exc

    if removed:
        logger.info('Removed category %s', id)
    return {'result': messages.REMOVE_SUCCESS}
