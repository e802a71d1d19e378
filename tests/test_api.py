import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from kuda.api.main import app
from kuda.database.session_cache import SessionCache
from kuda.flows.state_manager import StateManager
from kuda.integrations.clients.mocks import MockBackendClient
from kuda.integrations.contracts.interfaces import CARD, TRANSACTION
from kuda.utils.config_loader import AppConfig, TransferConfig

from tests.conftest import USER_EMAIL, USER_PASSWORD


@pytest.fixture
def config():
    return AppConfig(integrations_mode="mock", transfer=TransferConfig(verification_debounce_seconds=0))


@pytest.fixture
def client(backend, payments, config):
    app.state.config = config
    app.state.state_manager = StateManager(SessionCache(), backend, payments, config)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def headers(auth_token):
    return {"Authorization": f"Bearer {auth_token}"}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_login_returns_token(client, backend):
    response = client.post("/api/v1/auth/login", json={"email": USER_EMAIL, "password": USER_PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["toast"]["title"] == "Welcome back!"
    assert body["redirect"] == "/dashboard"
    token = body["data"]["auth_token"]
    assert token.startswith("mock-")

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["name"] == "Ada Obi"


def test_login_invalid_credentials_is_401(client):
    response = client.post("/api/v1/auth/login", json={"email": USER_EMAIL, "password": "wrong"})

    assert response.status_code == 401
    assert response.json()["detail"]["message"] == "Invalid credentials"


def test_login_missing_fields_is_422(client):
    response = client.post("/api/v1/auth/login", json={"email": ""})

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["error"] == "validation_error"
    assert set(detail["field_errors"]) == {"email", "password"}


def test_signup_flow(client):
    form = {
        "first_name": "Tolu",
        "last_name": "Ade",
        "email": "tolu@example.com",
        "phone": "08031234567",
        "password": "pass1234",
        "confirm_password": "nope",
    }
    mismatch = client.post("/api/v1/auth/signup", json=form)
    assert mismatch.status_code == 422
    assert mismatch.json()["detail"]["message"] == "Passwords do not match"

    response = client.post("/api/v1/auth/signup", json={**form, "confirm_password": "pass1234"})
    assert response.status_code == 200
    assert response.json()["redirect"] == "/onboarding"

    token = response.json()["data"]["auth_token"]
    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"}).json()
    assert me["balance"] == 20000
    assert me["account_number"].startswith("1234")


@pytest.mark.parametrize("auth", [None, "Token abc", "Bearer "])
def test_missing_bearer_token_is_401(client, auth):
    headers = {"Authorization": auth} if auth else {}
    assert client.get("/api/v1/dashboard", headers=headers).status_code == 401


def test_unknown_token_is_401(client):
    response = client.get("/api/v1/dashboard", headers={"Authorization": "Bearer mock-nobody"})
    assert response.status_code == 401


def test_dashboard_and_transactions(client, backend, headers):
    backend.seed_record(TRANSACTION, USER_EMAIL, {"type": "credit", "amount": 5000, "description": "Salary"})

    dashboard = client.get("/api/v1/dashboard", headers=headers, params={"show_balance": "false"}).json()
    assert dashboard["data"]["balance_text"] == "••••••••"
    assert dashboard["data"]["recent_transactions"][0]["display_amount"] == "+₦5,000"

    transactions = client.get("/api/v1/transactions", headers=headers).json()
    assert len(transactions["data"]["transactions"]) == 1


def test_kuda_transfer(client, headers):
    response = client.post(
        "/api/v1/transfers",
        headers=headers,
        json={"transfer_type": "kuda", "recipient": "08099999999", "amount": 1500, "description": "Lunch"},
    )

    assert response.status_code == 200
    assert response.json()["toast"]["title"] == "Transfer Successful!"
    assert response.json()["data"]["balance"] == 18500


def test_transfer_above_balance_is_422_without_provider_call(client, headers, payments):
    response = client.post(
        "/api/v1/transfers",
        headers=headers,
        json={"transfer_type": "bank", "recipient": "0123456789", "bank_code": "058", "amount": "50000"},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["field_errors"] == {"amount": "Insufficient balance"}
    assert "initiate_transfer" not in payments.calls


def test_bank_transfer_with_verification(client, headers, payments):
    banks = client.get("/api/v1/banks", headers=headers).json()["data"]["banks"]
    assert {"name": "Kuda Bank", "code": "50211"} in banks

    verified = client.post(
        "/api/v1/transfers/verify-account",
        headers=headers,
        json={"account_number": "0123456789", "bank_code": "058"},
    )
    assert verified.json()["data"]["account_name"] == "MIKE JOHNSON"

    response = client.post(
        "/api/v1/transfers",
        headers=headers,
        json={"transfer_type": "bank", "recipient": "0123456789", "bank_code": "058", "amount": "2500"},
    )
    assert response.status_code == 200
    assert response.json()["toast"]["description"] == "₦2,500 sent to MIKE JOHNSON."
    assert payments.transfers[0]["amount"] == 250000
    assert payments.calls.count("verify_account") == 1


def test_unresolvable_account_is_502(client, headers):
    response = client.post(
        "/api/v1/transfers/verify-account",
        headers=headers,
        json={"account_number": "5555555555", "bank_code": "058"},
    )

    assert response.status_code == 502
    assert response.json()["detail"]["toast"]["title"] == "Verification Failed"


def test_unknown_transfer_type_is_400(client, headers):
    response = client.post("/api/v1/transfers", headers=headers, json={"transfer_type": "crypto", "recipient": "x", "amount": 1})
    assert response.status_code == 400


def test_bills(client, headers):
    categories = client.get("/api/v1/bills/categories").json()["data"]
    assert "MTN" in categories["providers"]["airtime"]

    response = client.post(
        "/api/v1/bills/pay",
        headers=headers,
        json={"category": "electricity", "provider": "IKEDC", "customer_reference": "45012345678", "amount": "3000"},
    )
    assert response.status_code == 200
    assert response.json()["toast"]["title"] == "Payment Successful!"
    assert response.json()["data"]["balance"] == 17000


def test_cards(client, backend, headers):
    card = backend.seed_record(CARD, USER_EMAIL, {"cardNumber": "5399 8312 3456 9012", "status": "active"})

    masked = client.get("/api/v1/cards", headers=headers).json()["data"]["cards"][0]
    assert masked["number"] == "**** **** **** 9012"
    revealed = client.get("/api/v1/cards", headers=headers, params={"reveal": "true"}).json()["data"]["cards"][0]
    assert revealed["number"] == "5399 8312 3456 9012"

    frozen = client.post(f"/api/v1/cards/{card['id']}/freeze", headers=headers)
    assert frozen.json()["toast"]["title"] == "Card Frozen"


def test_profile_endpoints(client, headers):
    updated = client.patch("/api/v1/profile/personal-info", headers=headers, json={"phone": "08000000000"})
    assert updated.json()["data"]["phone"] == "08000000000"

    settings = client.put("/api/v1/profile/account-settings", headers=headers, json={"two_factor": True})
    assert settings.json()["toast"]["title"] == "Settings Updated"

    notifications = client.put("/api/v1/profile/notifications", headers=headers, json={"sms": True})
    assert notifications.json()["toast"]["title"] == "Notifications Updated"

    password = client.post(
        "/api/v1/profile/password",
        headers=headers,
        json={"current_password": "a", "new_password": "b", "confirm_password": "c"},
    )
    assert password.status_code == 422

    profile = client.get("/api/v1/profile", headers=headers).json()["data"]
    assert profile["account_settings"]["two_factor"] is True
    assert profile["phone"] == "08000000000"


def test_help(client, headers):
    assert len(client.get("/api/v1/help/faq").json()["data"]["faq"]) == 6

    missing = client.post("/api/v1/help/contact", headers=headers, json={"subject": "Hi"})
    assert missing.status_code == 422

    sent = client.post("/api/v1/help/contact", headers=headers, json={"subject": "Hi", "message": "Help"})
    assert sent.json()["toast"]["title"] == "Message Sent"


def test_payments_initialize_and_verify(client, headers):
    init = client.post("/api/v1/payments/initialize", headers=headers, json={"amount": 5000})
    assert init.status_code == 200
    reference = init.json()["data"]["reference"]
    assert reference.startswith("payment_")

    verified = client.get(f"/api/v1/payments/verify/{reference}", headers=headers).json()["data"]
    assert verified["status"] == "success"
    assert verified["amount"] == 5000

    assert client.post("/api/v1/payments/initialize", headers=headers, json={"amount": 0}).status_code == 422
    assert client.get("/api/v1/payments/verify/payment_missing", headers=headers).status_code == 502


def test_logout_clears_state(client, headers, auth_token):
    client.get("/api/v1/banks", headers=headers)
    state = app.state.state_manager
    assert auth_token in state.cache

    response = client.post("/api/v1/auth/logout", headers=headers)

    assert response.json()["toast"]["title"] == "Logged out"
    assert auth_token not in state.cache


@pytest.mark.asyncio
async def test_concurrent_transfers_for_one_token(payments, config):
    class SlowBackend(MockBackendClient):
        async def get_me(self):
            await asyncio.sleep(0.05)
            return await super().get_me()

    backend = SlowBackend()
    backend.seed_user(USER_EMAIL, USER_PASSWORD, first_name="Ada", last_name="Obi", balance=20000)
    backend.sign_in(USER_EMAIL)
    app.state.config = config
    app.state.state_manager = StateManager(SessionCache(), backend, payments, config)
    headers = {"Authorization": f"Bearer {backend.token_store.get_token()}"}

    to_mike = {"transfer_type": "bank", "recipient": "0123456789", "bank_code": "058", "amount": 100}
    to_sarah = {"transfer_type": "bank", "recipient": "9876543210", "bank_code": "044", "amount": 200}
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        first, second = await asyncio.gather(
            client.post("/api/v1/transfers", headers=headers, json=to_mike),
            client.post("/api/v1/transfers", headers=headers, json=to_sarah),
        )

    assert sorted([first.status_code, second.status_code]) == [200, 400]
    accepted, rejected = (first, second) if first.status_code == 200 else (second, first)
    expected = "₦100 sent to MIKE JOHNSON." if accepted is first else "₦200 sent to SARAH WILSON."
    assert accepted.json()["toast"]["description"] == expected
    assert rejected.json()["detail"]["message"] == "A transfer is already in progress. Please wait."

    [transfer] = payments.transfers
    assert transfer["amount"] == (10000 if accepted is first else 20000)
    assert (await backend.get_me()).balance == (19900 if accepted is first else 19800)
