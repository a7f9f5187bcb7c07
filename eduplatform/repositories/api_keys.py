from fastapi import Depends
from sqlalchemy.orm import Session

from eduplatform.database import get_db
from eduplatform.models.api_key import ApiKey


class ApiKeyRepository:
    def __init__(self, db: Session):
        self.db = db

    def insert(self, key: str, description: str | None = None) -> ApiKey:
        api_key = ApiKey(key=key, description=description)
        self.db.add(api_key)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(api_key)
        return api_key

    def is_valid(self, key: str) -> bool:
        return self.db.query(ApiKey.id).filter(ApiKey.key == key).first() is not None


def get_api_key_repository(db: Session = Depends(get_db)) -> ApiKeyRepository:
    return ApiKeyRepository(db)
