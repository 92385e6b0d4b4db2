"""Tests for page clamping and page counts."""
import math

import pytest

from woundcare.models import User
from woundcare.models.base import generate_uuid
from woundcare.services.pagination import page_count, paginate


@pytest.fixture()
def seven_users(db):
    for i in range(7):
        db.add(User(id=generate_uuid(), email=f"u{i}@clinic.com.br", hashed_password="x", name=f"U{i}", role="NURSE"))
    db.commit()


def test_page_count():
    assert page_count(0, 10) == 0
    assert page_count(10, 10) == 1
    assert page_count(11, 10) == 2


@pytest.mark.parametrize("page,limit", [(1, 3), (2, 3), (3, 3), (4, 3), (99, 3), (1, 100), (5, 1)])
def test_page_bounds_hold(db, seven_users, page, limit):
    items, pagination = paginate(db.query(User).order_by(User.email), page, limit)
    assert pagination.total == 7
    assert pagination.pages == math.ceil(7 / limit)
    assert pagination.page * pagination.limit <= pagination.total + pagination.limit
    assert len(items) <= limit


def test_page_past_end_is_clamped(db, seven_users):
    items, pagination = paginate(db.query(User).order_by(User.email), 10, 3)
    assert pagination.page == 3
    assert [u.email for u in items] == ["u6@clinic.com.br"]


def test_empty_result_stays_on_page_one(db):
    items, pagination = paginate(db.query(User), 4, 10)
    assert items == []
    assert pagination.page == 1
    assert pagination.pages == 0
