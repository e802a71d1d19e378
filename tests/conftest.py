"""Pytest fixtures: mock backend and provider with one signed-in user."""

import pytest

from kuda.integrations.clients.mocks import MockBackendClient, MockPaystackClient

USER_EMAIL = "ada@example.com"
USER_PASSWORD = "secret123"


def make_backend(**kwargs) -> MockBackendClient:
    backend = MockBackendClient(**kwargs)
    backend.seed_user(USER_EMAIL, USER_PASSWORD, first_name="Ada", last_name="Obi", balance=20000)
    backend.sign_in(USER_EMAIL)
    return backend


@pytest.fixture
def backend():
    """In-memory backend with Ada signed in (balance ₦20,000)."""
    return make_backend()


@pytest.fixture
def payments():
    return MockPaystackClient()


@pytest.fixture
def auth_token(backend):
    return backend.token_store.get_token()
