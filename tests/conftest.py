from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from flask_jwt_extended import create_access_token

from academy import create_app
from academy.config import TestConfig
from academy.extensions import db as _db
from academy.model import Cart, Coupon, Course, Enrollment, Order, OrderItem, User
from academy.services import CommerceRepository


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def repo(db):
    return CommerceRepository(db.session)


@pytest.fixture
def make_course(db):
    counter = {"n": 0}

    def _make(title=None, price="49.90", published=True):
        counter["n"] += 1
        title = title or f"Course {counter['n']}"
        c = Course(
            title=title,
            slug=f"course-{counter['n']}",
            image=f"https://cdn.example.com/{counter['n']}.png",
            price=Decimal(price),
            is_published=published,
        )
        db.session.add(c)
        db.session.commit()
        return c
    return _make


@pytest.fixture
def make_coupon(db):
    def _make(code="SAVE10", ctype="percentage", value="10", **kw):
        now = utcnow()
        c = Coupon(
            code=code.upper(),
            ctype=ctype,
            value=Decimal(value),
            is_active=kw.pop("is_active", True),
            min_purchase=kw.pop("min_purchase", None),
            max_discount=kw.pop("max_discount", None),
            usage_limit=kw.pop("usage_limit", None),
            used_count=kw.pop("used_count", 0),
            valid_from=kw.pop("valid_from", now - timedelta(days=1)),
            valid_until=kw.pop("valid_until", now + timedelta(days=1)),
        )
        db.session.add(c)
        db.session.commit()
        return c
    return _make


@pytest.fixture
def make_user(db):
    def _make(email="student@example.com", role="user"):
        u = User(email=email, name=email.split("@")[0], role=role)
        db.session.add(u)
        db.session.commit()
        return u
    return _make


@pytest.fixture
def auth_headers(app):
    def _headers(user_id):
        token = create_access_token(identity=str(user_id))
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def counts(db):
    """Row counts used to assert that a failed checkout wrote nothing."""
    def _counts(user_id=None):
        def n(model, *criteria):
            return db.session.query(model).filter(*criteria).count()
        return {
            "orders": n(Order) if user_id is None else n(Order, Order.user_id == user_id),
            "order_items": n(OrderItem),
            "enrollments": n(Enrollment) if user_id is None else n(Enrollment, Enrollment.user_id == user_id),
            "carts": n(Cart),
        }
    return _counts
