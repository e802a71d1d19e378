from datetime import datetime

import pytest

from kuda.flows.dashboard import HIDDEN_BALANCE, QUICK_ACTIONS, DashboardView, greeting
from kuda.flows.onboarding import OnboardingFlow
from kuda.integrations.contracts.interfaces import TRANSACTION

from tests.conftest import USER_EMAIL


def test_onboarding_steps_through_pin_creation():
    flow = OnboardingFlow()
    assert flow.current()["title"] == "Welcome to Kuda!"

    flow.next()
    assert flow.step == 2
    assert flow.can_continue is False

    assert flow.enter_pin("12a") is False
    assert flow.enter_pin("12345") is False
    assert flow.enter_pin("1234") is True
    assert flow.enter_pin("1234", confirm=True) is True
    assert flow.can_continue is True

    result = flow.next()
    assert result["ok"] is True
    assert flow.step == 3

    done = flow.next()
    assert done["toast"]["title"] == "Setup complete!"
    assert done["redirect"] == "/dashboard"


def test_onboarding_rejects_mismatched_pins():
    flow = OnboardingFlow()
    flow.next()
    flow.enter_pin("1234")
    flow.enter_pin("4321", confirm=True)

    result = flow.next()
    assert result["ok"] is False
    assert result["toast"]["description"] == "PINs do not match"
    assert flow.step == 2


def test_onboarding_rejects_short_pin():
    flow = OnboardingFlow()
    flow.next()
    flow.enter_pin("12")
    flow.enter_pin("12", confirm=True)

    result = flow.next()
    assert result["toast"]["description"] == "PIN must be 4 digits"


@pytest.mark.parametrize(
    "hour,expected",
    [(6, "Good morning!"), (11, "Good morning!"), (12, "Good afternoon!"), (16, "Good afternoon!"), (17, "Good evening!"), (23, "Good evening!")],
)
def test_greeting(hour, expected):
    assert greeting(datetime(2024, 6, 10, hour, 0)) == expected


@pytest.mark.asyncio
async def test_dashboard_shows_four_most_recent_transactions(backend):
    for i in range(6):
        backend.seed_record(
            TRANSACTION,
            USER_EMAIL,
            {"type": "debit" if i % 2 else "credit", "amount": 1000 + i, "description": f"tx {i}", "created_at": 1718000000000 + i * 60_000},
        )

    view = DashboardView(backend)
    result = await view.load(now=datetime(2024, 6, 10, 9, 0))

    data = result["data"]
    assert data["greeting"] == "Good morning!"
    assert data["name"] == "Ada Obi"
    assert data["initials"] == "AO"
    assert data["balance_text"] == "₦20,000"
    assert data["quick_actions"] == QUICK_ACTIONS
    assert [row["description"] for row in data["recent_transactions"]] == ["tx 5", "tx 4", "tx 3", "tx 2"]
    assert data["recent_transactions"][0]["display_amount"] == "-₦1,005"
    assert data["recent_transactions"][1]["display_amount"] == "+₦1,004"


@pytest.mark.asyncio
async def test_dashboard_balance_toggle(backend):
    view = DashboardView(backend)
    await view.load()

    assert view.toggle_balance() is False
    assert view.balance_text() == HIDDEN_BALANCE
    assert view.toggle_balance() is True
    assert view.balance_text() == "₦20,000"


@pytest.mark.asyncio
async def test_dashboard_load_failure_returns_toast(backend):
    backend.logout()
    result = await DashboardView(backend).load()

    assert result["ok"] is False
    assert result["toast"]["title"] == "Could not load dashboard"
    assert result["toast"]["description"] == "Unauthorized"


def test_onboarding_ignores_pin_entries_with_newline_or_non_ascii_digits():
    flow = OnboardingFlow()
    flow.next()

    assert flow.enter_pin("123\n") is False
    assert flow.enter_pin("١٢٣٤") is False
    assert flow.can_continue is False
    assert flow.next()["ok"] is False
    assert flow.step == 2
