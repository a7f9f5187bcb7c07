import logging
from threading import Lock

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from eduplatform.core import config


ADMIN_ROLE = 'admin'
TEACHER_ROLE = 'teacher'
STUDENT_ROLE = 'student'

DEFAULT_ROLE_PERMISSIONS = {
    ADMIN_ROLE: ('categories:write', 'courses:write', 'teachers:write', 'materials:write'),
    TEACHER_ROLE: ('materials:write',),
    STUDENT_ROLE: ('courses:enroll',),
}

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    options = {'echo': config.DATABASE_ECHO, 'pool_pre_ping': True}
    if url.startswith('sqlite'):
        # Handlers run in FastAPI's threadpool.
        options['connect_args'] = {'check_same_thread': False}
    return options


engine = create_engine(config.DATABASE_URL, **_engine_options(config.DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_seed_lock = Lock()
_default_roles_checked = False


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def seed_roles_and_permissions(db: Session) -> None:
    """Create the default roles and permissions that are not present yet."""
    from eduplatform.models.role import Permission, Role

    permissions = {permission.permission: permission for permission in db.query(Permission).all()}
    roles = {role.role: role for role in db.query(Role).all()}

    for role_name, permission_names in DEFAULT_ROLE_PERMISSIONS.items():
        role = roles.get(role_name)
        if role is None:
            role = Role(role=role_name)
            db.add(role)
            roles[role_name] = role

        for permission_name in permission_names:
            permission = permissions.get(permission_name)
            if permission is None:
                permission = Permission(permission=permission_name)
                db.add(permission)
                permissions[permission_name] = permission
            if permission not in role.permissions:
                role.permissions.append(permission)

    db.commit()


def seed_bootstrap_accounts(
    db: Session,
    admin_login: str | None,
    admin_email: str | None,
    admin_password: str | None,
    api_keys: list[str],
) -> None:
    """Create the configured administrator and API keys if they are missing.

    Sign-up never grants the admin role, so a fresh deployment gets its first
    administrator from here.
    An existing user with the same login or email is left untouched.
    """
    from eduplatform.repositories.api_keys import ApiKeyRepository
    from eduplatform.repositories.roles import RoleRepository
    from eduplatform.repositories.users import UserRepository

    if admin_login and admin_email and admin_password:
        users = UserRepository(db)
        if users.find_by_login_or_email(admin_login, admin_email) is None:
            admin_role = RoleRepository(db).get_by_name(ADMIN_ROLE)
            users.insert(
                login=admin_login,
                email=admin_email,
                password=admin_password,
                role_id=admin_role.id,
            )
            logger.info('Created bootstrap administrator %s', admin_login)

    keys = ApiKeyRepository(db)
    for key in api_keys:
        if not keys.is_valid(key):
            keys.insert(key, description='configured')
            logger.info('Registered configured API key')


def ensure_default_roles() -> None:
    global _default_roles_checked

    if _default_roles_checked:
        return

    with _seed_lock:
        if _default_roles_checked:
            return

        db = SessionLocal()
        try:
            seed_roles_and_permissions(db)
            seed_bootstrap_accounts(
                db,
                config.ADMIN_LOGIN,
                config.ADMIN_EMAIL,
                config.ADMIN_PASSWORD,
                config.API_KEYS,
            )
        finally:
            db.close()

        _default_roles_checked = True
