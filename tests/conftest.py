import os

os.environ["FLASK_ENV"] = "testing"

from datetime import datetime

import pytest

from app.db import db
from app.models import Category, Order, OrderItem, Product, SellerCommission, User
from wsgi import create_app

BASE_TIME = datetime(2024, 5, 10, 12, 0)


@pytest.fixture()
def app():
    app = create_app("testing")
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


class Factory:
    """Crea registros mínimos para los tests"""

    def __init__(self):
        self._phone_seq = 0
        self._category = None

    def _phone(self):
        self._phone_seq += 1
        return f"+99670000{self._phone_seq:04d}"

    def category(self, name="General"):
        category = Category(name=name)
        db.session.add(category)
        db.session.commit()
        return category

    def seller(self, fullname="Seller", rates=(), status="ACTIVE"):
        """rates: lista de (rate, created_at) o solo rate"""
        user = User(fullname=fullname, phone_number=self._phone(), role="SELLER", status=status)
        db.session.add(user)
        db.session.flush()
        for index, rate in enumerate(rates):
            if isinstance(rate, tuple):
                rate, created_at = rate
            else:
                created_at = datetime(2024, 1, 1 + index)
            db.session.add(SellerCommission(user_id=user.id, rate=rate, created_at=created_at))
        db.session.commit()
        return user

    def courier(self, fullname="Courier", status="ACTIVE"):
        user = User(fullname=fullname, phone_number=self._phone(), role="COURIER", status=status)
        db.session.add(user)
        db.session.commit()
        return user

    def product(self, seller, price=100, name=None, category=None, status="ACTIVE"):
        if category is None:
            if self._category is None:
                self._category = self.category()
            category = self._category
        product = Product(
            name=name or f"Product of {seller.fullname}",
            category_id=category.id,
            seller_id=seller.id,
            price=price,
            status=status,
        )
        db.session.add(product)
        db.session.commit()
        return product

    def order(self, items, status="DELIVERED", updated_at=BASE_TIME, created_at=None,
              courier=None, customer_name="Customer"):
        """items: lista de (product, amount, price)"""
        order = Order(
            status=status,
            customer_name=customer_name,
            courier_id=courier.id if courier else None,
            created_at=created_at or updated_at,
            updated_at=updated_at,
        )
        db.session.add(order)
        db.session.flush()
        for product, amount, price in items:
            db.session.add(OrderItem(order_id=order.id, product_id=product.id, amount=amount, price=price))
        db.session.commit()
        return order


@pytest.fixture()
def factory(app):
    return Factory()
