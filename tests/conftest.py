from datetime import date

import pytest

from expensetracker import create_app
from expensetracker.config import TestingConfig
from expensetracker.extensions import db


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def signup(client):
    def _signup(name="Asha Rao", email="asha@example.com", password="secret123"):
        return client.post("/api/auth/signup", json={"name": name, "email": email, "password": password})

    return _signup


@pytest.fixture
def auth_headers(signup):
    token = signup().get_json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_headers(signup):
    token = signup(name="Ben Ode", email="ben@example.com").get_json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_category(client, auth_headers):
    def _make(name="Travel", monthly_limit=None, headers=None, **extra):
        body = {"name": name, "monthlyLimit": monthly_limit, **extra}
        resp = client.post("/api/categories", json=body, headers=headers or auth_headers)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]

    return _make


@pytest.fixture
def make_expense(client, auth_headers):
    def _make(category_id, amount=10, on=None, title="Coffee", headers=None, **extra):
        body = {
            "title": title,
            "amount": amount,
            "categoryId": category_id,
            "date": (on or date.today()).isoformat(),
            **extra,
        }
        resp = client.post("/api/expenses", json=body, headers=headers or auth_headers)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]

    return _make
