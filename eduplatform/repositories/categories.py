from fastapi import Depends
from sqlalchemy.orm import Session

from eduplatform.database import get_db
from eduplatform.models.category import Category


class CategoryRepository:
    def __init__(self, db: Session):
        self.db = db

    def all(self) -> list[Category]:
        return self.db.query(Category).order_by(Category.id).all()

    def get(self, category_id: int) -> Category | None:
        return self.db.query(Category).filter(Category.id == category_id).first()

    def insert(self, title: str) -> Category:
        category = Category(title=title)
        self.db.add(category)
        self._commit()
        self.db.refresh(category)
        return category

    def update(self, category: Category, changes: dict) -> Category:
        if 'title' in changes:
            category.title = changes['title']
        self._commit()
        self.db.refresh(category)
        return category

    def delete(self, category_id: int) -> int:
        category = self.get(category_id)
        if category is None:
            return 0
        self.db.delete(category)
        self._commit()
        return 1

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


def get_category_repository(db: Session = Depends(get_db)) -> CategoryRepository:
    return CategoryRepository(db)
