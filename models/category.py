# backend/models/category.py
from typing import Optional, List
from datetime import datetime, timezone
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel, Relationship

__all__ = ["Category", "MAX_CATEGORY_ITEMS", "utc_now"]

MAX_CATEGORY_ITEMS = 5


def utc_now() -> datetime:
    # Naive UTC at second precision, the resolution of the backup date format.
    # created_date columns are plain DateTime so naive values are stored as-is.
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)


class Category(SQLModel, table=True):
    __tablename__ = "categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    icon: Optional[str] = None
    item1: str
    item2: Optional[str] = None
    item3: Optional[str] = None
    item4: Optional[str] = None
    item5: Optional[str] = None
    created_date: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)

    # Reverse relationship: all reviews filed under this category
    reviews: List["Review"] = Relationship(
            back_populates="category",
            sa_relationship_kwargs={
                "cascade": "all, delete-orphan",
            }
        )

    @property
    def item_slots(self) -> List[Optional[str]]:
        return [self.item1, self.item2, self.item3, self.item4, self.item5]

    @property
    def items(self) -> List[str]:
        """The criterion labels that are defined, in slot order."""
        return [item for item in self.item_slots if item is not None]
