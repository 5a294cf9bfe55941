import logging
from typing import List, Optional

from sqlmodel import Session, select

from database import storage_operation
from models.category import Category

logger = logging.getLogger(__name__)


class CategoryStore:
    """Read/write access to categories, oldest first."""

    def __init__(self, session: Session):
        self.session = session

    @storage_operation
    def list_all(self) -> List[Category]:
        statement = select(Category).order_by(Category.created_date.asc(), Category.id.asc())
        return list(self.session.exec(statement).all())

    @storage_operation
    def get_by_id(self, category_id: int) -> Optional[Category]:
        return self.session.get(Category, category_id)

    @storage_operation
    def insert(self, category: Category) -> Category:
        # id 0 / None: let the database assign one; otherwise replace on conflict
        if not category.id:
            category.id = None
            self.session.add(category)
        else:
            category = self.session.merge(category)
        self.session.commit()
        self.session.refresh(category)
        return category

    @storage_operation
    def update(self, category: Category) -> Optional[Category]:
        if not category.id or self.session.get(Category, category.id) is None:
            logger.info(f"Category {category.id} not found, update skipped")
            return None
        category = self.session.merge(category)
        self.session.commit()
        self.session.refresh(category)
        return category

    @storage_operation
    def delete(self, category: Category) -> None:
        # Reviews go with it (relationship cascade)
        self.session.delete(category)
        self.session.commit()

    @storage_operation
    def delete_all(self) -> int:
        categories = self.session.exec(select(Category)).all()
        for category in categories:
            self.session.delete(category)
        self.session.commit()
        return len(categories)
