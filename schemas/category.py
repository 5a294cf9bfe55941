from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime

from models.category import MAX_CATEGORY_ITEMS

class CategoryBase(BaseModel):
    name: str = Field(min_length=1)
    icon: Optional[str] = None
    items: List[str] = Field(min_length=1, max_length=MAX_CATEGORY_ITEMS)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Category name must not be blank")
        return value

    @field_validator("items")
    @classmethod
    def first_item_required(cls, value: List[str]) -> List[str]:
        if not value or not value[0].strip():
            raise ValueError("The first rating item is required")
        return [item.strip() for item in value]

    def item_slots(self) -> dict:
        """Map the entered labels onto item1..item5; blank labels become None."""
        padded = self.items + [""] * (MAX_CATEGORY_ITEMS - len(self.items))
        return {f"item{index}": (label or None) for index, label in enumerate(padded, start=1)}

class CategoryCreate(CategoryBase):
    pass

class CategoryUpdate(CategoryBase):
    pass

class CategoryRead(BaseModel):
    id: int
    name: str
    icon: Optional[str] = None
    item1: str
    item2: Optional[str] = None
    item3: Optional[str] = None
    item4: Optional[str] = None
    item5: Optional[str] = None
    created_date: datetime
    review_count: int = 0

    class Config:
        from_attributes = True
