from fastapi import APIRouter, Depends

from eduplatform.auth.dependencies import get_current_user, require_api_key
from eduplatform.core import messages
from eduplatform.models.user import User
from eduplatform.routes.schemas import ResultResponse

router = APIRouter(prefix='/auth', tags=['auth'])


@router.get('/api-key', response_model=ResultResponse, summary='Api key authentication endpoint')
def api_key_auth(_api_key: str = Depends(require_api_key)):
    return {'result': messages.AUTH_PASSED}


@router.get('/jwt', response_model=ResultResponse, summary='Bearer token authentication endpoint')
def jwt_auth(_current_user: User = Depends(get_current_user)):
    return {'result': messages.AUTH_PASSED}


@router.get('/no-auth', response_model=ResultResponse, summary='Endpoint without authentication')
def no_auth():
    return {'result': messages.NO_AUTH_NEEDED}
