from fastapi import Depends
from sqlalchemy.orm import Session

from eduplatform.database import get_db
from eduplatform.models.role import Role


class RoleRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, role_id: int) -> Role | None:
        return self.db.query(Role).filter(Role.id == role_id).first()

    def get_by_name(self, name: str) -> Role | None:
        return self.db.query(Role).filter(Role.role == name).first()

    def names(self, exclude: tuple[str, ...] = ()) -> list[str]:
        roles = self.db.query(Role).order_by(Role.role).all()
        return [role.role for role in roles if role.role not in exclude]


def get_role_repository(db: Session = Depends(get_db)) -> RoleRepository:
    return RoleRepository(db)
