"""
Basic test configuration and fixtures.
"""
import os

os.environ['SQL_DATABASE_URL'] = 'sqlite://'
os.environ['SECRET_KEY'] = 'healthsync-test-secret-key-0123456789'

import itertools
from types import SimpleNamespace
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from healthsync.db.base import engine, SessionLocal
from healthsync.main import app
from healthsync.models import Base
from healthsync.repository.repo_pairing import PairingRepository
from healthsync.repository.repo_user import UserRepository
from healthsync.services.srv_pairing import PairingService

PASSWORD = 'secret123'
_counter = itertools.count(1)


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    """Test client fixture."""
    with TestClient(app) as test_client:
        yield test_client


def signup(client: TestClient, role: str, full_name: str = None) -> SimpleNamespace:
    n = next(_counter)
    email = f"{role}{n}@healthsync.io"
    response = client.post('/api/auth/signup', json={
        'full_name': full_name or f"{role.title()} {n}",
        'email': email,
        'password': PASSWORD,
        'role': role,
    })
    assert response.status_code == 200, response.text
    user = response.json()['data']

    response = client.post('/api/auth/login', json={'username': email, 'password': PASSWORD})
    assert response.status_code == 200, response.text
    token = response.json()['data']['access_token']
    return SimpleNamespace(
        id=user['id'],
        email=email,
        role=role,
        token=token,
        headers={'Authorization': f'Bearer {token}'},
    )


@pytest.fixture
def make_user(client):
    def _make(role: str = 'patient', full_name: str = None) -> SimpleNamespace:
        return signup(client, role, full_name)
    return _make


@pytest.fixture
def link():
    """Administrative pairing, the way the seed command does it."""
    def _link(doctor: SimpleNamespace, patient: SimpleNamespace):
        db = SessionLocal()
        try:
            service = PairingService(PairingRepository(db), UserRepository(db))
            return service.link(UUID(doctor.id), UUID(patient.id))
        finally:
            db.close()
    return _link


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
