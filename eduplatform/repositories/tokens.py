from fastapi import Depends
from sqlalchemy.orm import Session

from eduplatform.database import get_db
from eduplatform.models.jwt_auth import JwtAuth


class TokenRepository:
    """Storage of the single live JWT kept for each user."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: int) -> JwtAuth | None:
        return self.db.query(JwtAuth).filter(JwtAuth.user_id == user_id).first()

    def count_for_user(self, user_id: int) -> int:
        return self.db.query(JwtAuth).filter(JwtAuth.user_id == user_id).count()

    def insert(self, user_id: int, token: str) -> JwtAuth:
        row = JwtAuth(jwt=token, user_id=user_id)
        self.db.add(row)
        self._commit()
        self.db.refresh(row)
        return row

    def delete(self, token_id: int) -> int:
        row = self.db.get(JwtAuth, token_id)
        if row is None:
            return 0
        self.db.delete(row)
        self._commit()
        return 1

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


def get_token_repository(db: Session = Depends(get_db)) -> TokenRepository:
    return TokenRepository(db)
