"""Shared fixtures: a freshly seeded store per test and logged-in clients."""

import os

# cheap hashes, and seeding is done per test below
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SEED_SAMPLE_DATA", "false")

import pytest
from fastapi.testclient import TestClient

from config import ADMIN_PASSWORD, ADMIN_USERNAME
from database import store
from main import app
from seed import seed_sample_data

PANEER_BOWL = 1  # 150 points
RAJMA_BOWL = 2  # 100 points
PIZZA = 4  # 180 points


@pytest.fixture(autouse=True)
def seeded_store():
    store.reset()
    seed_sample_data(store)
    yield store
    store.reset()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def register(client: TestClient, username: str = "student@campus.edu", password: str = "hunter22"):
    resp = client.post("/api/register", json={
        "username": username,
        "password": password,
        "firstName": "Sam",
        "lastName": "Student",
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def user_client() -> TestClient:
    c = TestClient(app)
    register(c)
    return c


@pytest.fixture
def admin_client() -> TestClient:
    c = TestClient(app)
    resp = c.post("/api/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200, resp.text
    return c
