import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from eduplatform.core import config
from eduplatform.core.errors import register_exception_handlers
from eduplatform.database import Base, engine, ensure_default_roles
from eduplatform.models import api_key, category, course, jwt_auth, material, role, user  # noqa: F401
from eduplatform.routes import (
    auth_routes,
    category_routes,
    course_routes,
    login_routes,
    material_routes,
    user_routes,
)

logging.basicConfig(level=config.LOG_LEVEL)

app = FastAPI(title='Educational Platform API', version='1.0.0')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

register_exception_handlers(app)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        Base.metadata.create_all(bind=engine)
        ensure_default_roles()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return {'status': 'Educational Platform API Running'}


app.include_router(login_routes.router, prefix=config.API_PREFIX)
app.include_router(auth_routes.router, prefix=config.API_PREFIX)
app.include_router(user_routes.router, prefix=config.API_PREFIX)
app.include_router(category_routes.router, prefix=config.API_PREFIX)
app.include_router(course_routes.router, prefix=config.API_PREFIX)
app.include_router(material_routes.router, prefix=config.API_PREFIX)
