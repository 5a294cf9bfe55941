"""
Unit tests for the category/review models and the input schemas.
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from models.category import Category
from models.review import Review
from schemas.backup import parse_backup_date
from schemas.category import CategoryCreate
from schemas.review import ReviewCreate
from services.review_store import ScoreMismatch, check_scores_match_category


def test_category_items_skip_absent_slots():
    category = Category(name="Ramen", item1="Soup", item2=None, item3="Noodles")
    assert category.items == ["Soup", "Noodles"]
    assert category.item_slots == ["Soup", None, "Noodles", None, None]


def test_average_score_ignores_missing_scores():
    review = Review(name="Ichiran", category_id=1, review="", item_score1=4.0, item_score2=5.0)
    # Missing scores must not drag the mean down as zeros
    assert review.average_score == 4.5


def test_category_create_maps_blank_items_to_none():
    payload = CategoryCreate(name=" Movies ", items=["Story", "  ", "Music"])
    assert payload.name == "Movies"
    assert payload.item_slots() == {
        "item1": "Story",
        "item2": None,
        "item3": "Music",
        "item4": None,
        "item5": None,
    }


def test_category_create_requires_first_item():
    with pytest.raises(ValidationError):
        CategoryCreate(name="Movies", items=["", "Acting"])

    with pytest.raises(ValidationError):
        CategoryCreate(name="Movies", items=[])


def test_category_create_allows_at_most_five_items():
    with pytest.raises(ValidationError):
        CategoryCreate(name="Movies", items=["a", "b", "c", "d", "e", "f"])


def test_category_create_rejects_blank_name():
    with pytest.raises(ValidationError):
        CategoryCreate(name="   ", items=["Story"])


@pytest.mark.parametrize("score", [0.5, 5.5, 4.3])
def test_review_create_rejects_bad_scores(score):
    with pytest.raises(ValidationError):
        ReviewCreate(name="Dune", category_id=1, item_score1=score)


def test_review_create_accepts_half_steps():
    payload = ReviewCreate(name="Dune", category_id=1, item_score1=1.0, item_score2=3.5, genre=" ")
    assert payload.item_score2 == 3.5
    assert payload.genre is None


def test_scores_must_follow_category_items():
    category = Category(name="Movies", item1="Story", item2="Acting")

    check_scores_match_category(category, [4.0, 3.0, None, None, None])

    with pytest.raises(ScoreMismatch):
        check_scores_match_category(category, [4.0, None, None, None, None])

    with pytest.raises(ScoreMismatch):
        check_scores_match_category(category, [4.0, 3.0, 2.0, None, None])


def test_aware_backup_dates_become_naive_utc():
    tokyo = timezone(timedelta(hours=9))
    assert parse_backup_date(datetime(2024, 5, 1, 12, 0, 0, tzinfo=tokyo)) == datetime(2024, 5, 1, 3, 0, 0)
    assert parse_backup_date("2024-05-01T03:00:00Z") == datetime(2024, 5, 1, 3, 0, 0)
