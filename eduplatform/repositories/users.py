from fastapi import Depends
from sqlalchemy import or_
from sqlalchemy.orm import Session

from eduplatform.database import get_db
from eduplatform.models.user import User

USER_FIELDS = ('login', 'email', 'first_name', 'last_name')


class UserRepository:
    """Queries and mutations on the ``users`` table."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def find_by_login_or_email(self, login: str | None, email: str | None = None) -> User | None:
        """Find the user whose login or email matches.

        With only ``login`` given, the value is matched against both columns,
        which is how sign-in resolves its ``username``.
        """
        if email is None:
            email = login
        return self.db.query(User).filter(or_(User.login == login, User.email == email)).first()

    def insert(
        self,
        *,
        login: str,
        email: str,
        password: str,
        role_id: int,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        user = User(
            login=login,
            email=email,
            password=password,
            role=role_id,
            first_name=first_name,
            last_name=last_name,
        )
        self.db.add(user)
        self._commit()
        self.db.refresh(user)
        return user

    def list_by_role(self, role_id: int) -> list[User]:
        return self.db.query(User).filter(User.role == role_id).order_by(User.id).all()

    def get_by_role(self, user_id: int, role_id: int) -> User | None:
        return self.db.query(User).filter(User.id == user_id, User.role == role_id).first()

    def update(self, user: User, changes: dict) -> User:
        for field, value in changes.items():
            if field in USER_FIELDS:
                setattr(user, field, value)
        self._commit()
        self.db.refresh(user)
        return user

    def delete_by_role(self, user_id: int, role_id: int) -> int:
        user = self.get_by_role(user_id, role_id)
        if user is None:
            return 0
        self.db.delete(user)
        self._commit()
        return 1

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)
