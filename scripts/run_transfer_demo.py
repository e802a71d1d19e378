#!/usr/bin/env python3
"""
Run signup -> onboarding -> dashboard -> bank transfer -> bill payment against
the mock clients and print each stage to the terminal.

Usage (from repo root):
  python scripts/run_transfer_demo.py
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from kuda.flows import BillsFlow, DashboardView, OnboardingFlow, SignupFlow, TransferFlow
from kuda.flows.transfer import BANK
from kuda.integrations.clients.mocks import MockBackendClient, MockPaystackClient


def setup_logging():
    """Log to terminal at INFO so every stage is visible."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def print_stage(title: str, data: dict | list | str):
    """Print a stage header and data to the terminal."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    if isinstance(data, (dict, list)):
        print(json.dumps(data, indent=2, default=str))
    else:
        print(data)
    print()


async def main():
    setup_logging()
    backend = MockBackendClient()
    payments = MockPaystackClient()

    # --- Signup ---
    signup = {
        "first_name": "Ada",
        "last_name": "Obi",
        "email": "ada@example.com",
        "phone": "08031234567",
        "password": "secret123",
        "confirm_password": "secret123",
    }
    print_stage("SIGNUP", await SignupFlow(backend).submit(signup))

    # --- Onboarding ---
    onboarding = OnboardingFlow()
    onboarding.next()
    for digit in "2580":
        onboarding.enter_pin(onboarding.pin + digit)
        onboarding.enter_pin(onboarding.confirm_pin + digit, confirm=True)
    print_stage("ONBOARDING: PIN step", onboarding.current())
    print_stage("ONBOARDING: Done", onboarding.next())

    # --- Dashboard ---
    print_stage("DASHBOARD", await DashboardView(backend).load())

    # --- Bank transfer ---
    transfer = TransferFlow(backend, payments, debounce_seconds=0.1)
    await transfer.load()
    transfer.set_transfer_type(BANK)
    transfer.select_bank("058")
    transfer.set_recipient("0123456789")
    print_stage("TRANSFER: Verifying account", transfer.verification_view())
    await transfer.wait_for_verification()
    print_stage("TRANSFER: Account verified", transfer.verification_view())
    print_stage("TRANSFER: Submit ₦2,500", await transfer.submit("2500", "Rent share"))
    print_stage("TRANSFER: Submit more than balance", await transfer.submit("1000000"))
    print_stage("PROVIDER: Transfers", payments.transfers)

    # --- Bills ---
    bills = BillsFlow(backend)
    result = await bills.pay({"category": "airtime", "provider": "MTN", "customer_reference": "08031234567", "amount": "500"})
    print_stage("BILLS: Airtime", result)

    print_stage("DASHBOARD (after)", await DashboardView(backend).load())


if __name__ == "__main__":
    asyncio.run(main())
