import json
import re

import httpx
import pytest

from kuda.integrations.clients.real_http import RealPaystackClient
from kuda.integrations.contracts.payments import TransferStatus
from kuda.integrations.errors import ConfigurationError, PaystackAPIError
from kuda.integrations.policy.response_wrappers import IntegrationResponseError

BASE = "https://paystack.example"


def envelope(data, message="ok"):
    return httpx.Response(200, json={"status": True, "message": message, "data": data})


def make_client(handler, secret_key="sk_test_123", public_key="pk_test_123"):
    return RealPaystackClient(
        secret_key=secret_key,
        public_key=public_key,
        base_url=BASE,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_missing_keys_raise_before_any_request(monkeypatch):
    monkeypatch.delenv("PAYSTACK_SECRET_KEY", raising=False)
    monkeypatch.delenv("PAYSTACK_PUBLIC_KEY", raising=False)
    seen = []

    client = make_client(lambda r: seen.append(r) or envelope([]), secret_key="", public_key="")
    with pytest.raises(ConfigurationError, match="Paystack keys not found in environment variables"):
        await client.get_banks()
    assert seen == []


@pytest.mark.asyncio
async def test_get_banks_sends_country_and_secret_key():
    seen = []

    def handler(request: httpx.Request):
        seen.append(request)
        return envelope([
            {"id": 9, "name": "Guaranty Trust Bank", "code": "058", "slug": "guaranty-trust-bank", "active": True},
            {"id": 1, "name": "Access Bank", "code": "044", "active": False},
        ])

    banks = await make_client(handler).get_banks()

    assert seen[0].url.path == "/bank"
    assert seen[0].url.params["country"] == "nigeria"
    assert seen[0].headers["authorization"] == "Bearer sk_test_123"
    assert [(b.code, b.active) for b in banks] == [("058", True), ("044", False)]


@pytest.mark.asyncio
async def test_verify_account():
    seen = []

    def handler(request: httpx.Request):
        seen.append(request)
        return envelope({"account_number": "0123456789", "account_name": "MIKE JOHNSON", "bank_id": 9})

    result = await make_client(handler).verify_account("0123456789", "058")

    assert seen[0].url.path == "/bank/resolve"
    assert dict(seen[0].url.params) == {"account_number": "0123456789", "bank_code": "058"}
    assert result.account_name == "MIKE JOHNSON"
    assert result.bank_id == 9


@pytest.mark.asyncio
async def test_create_recipient_defaults_currency():
    seen = []

    def handler(request: httpx.Request):
        body = json.loads(request.content)
        seen.append(body)
        return envelope({
            "recipient_code": "RCP_1",
            "name": body["name"],
            "type": body["type"],
            "currency": body["currency"],
            "details": {"account_number": body["account_number"], "bank_code": body["bank_code"]},
        })

    recipient = await make_client(handler).create_transfer_recipient("MIKE JOHNSON", "0123456789", "058")

    assert seen[0] == {
        "type": "nuban",
        "name": "MIKE JOHNSON",
        "account_number": "0123456789",
        "bank_code": "058",
        "currency": "NGN",
    }
    assert recipient.recipient_code == "RCP_1"
    assert recipient.account_number == "0123456789"


@pytest.mark.asyncio
async def test_initiate_transfer_from_balance_with_default_reference():
    seen = []

    def handler(request: httpx.Request):
        body = json.loads(request.content)
        seen.append(body)
        return envelope({"transfer_code": "TRF_1", "status": "pending", "amount": body["amount"], "recipient": body["recipient"]})

    result = await make_client(handler).initiate_transfer(250000, "RCP_1", reason="Rent")

    body = seen[0]
    assert body["source"] == "balance"
    assert body["amount"] == 250000
    assert body["reason"] == "Rent"
    assert re.fullmatch(r"transfer_\d+", body["reference"])
    assert result.reference == body["reference"]
    assert result.status == TransferStatus.PENDING


@pytest.mark.asyncio
async def test_initialize_payment_and_verify():
    def handler(request: httpx.Request):
        if request.url.path == "/transaction/initialize":
            body = json.loads(request.content)
            assert re.fullmatch(r"payment_\d+", body["reference"])
            assert body["amount"] == 500000
            return envelope({"authorization_url": "https://checkout.example/abc", "access_code": "abc", "reference": body["reference"]})
        assert request.url.path == "/transaction/verify/payment_1"
        return envelope({"reference": "payment_1", "status": "success", "amount": 500000, "paid_at": "2024-06-10T12:00:00.000Z"})

    client = make_client(handler)
    init = await client.initialize_payment(500000, "ada@example.com")
    verification = await client.verify_transaction("payment_1")

    assert init.authorization_url == "https://checkout.example/abc"
    assert verification.status == "success"
    assert verification.amount == 500000
    assert verification.paid_at.year == 2024


@pytest.mark.asyncio
async def test_list_transactions_paging_params():
    seen = []

    def handler(request: httpx.Request):
        seen.append(request)
        return envelope([{"reference": "payment_1"}])

    rows = await make_client(handler).list_transactions(page=2, per_page=10)

    assert dict(seen[0].url.params) == {"page": "2", "perPage": "10"}
    assert rows == [{"reference": "payment_1"}]


@pytest.mark.asyncio
async def test_error_status_uses_provider_message():
    client = make_client(lambda r: httpx.Response(400, json={"status": False, "message": "Invalid bank code"}))

    with pytest.raises(PaystackAPIError) as exc:
        await client.verify_account("0123456789", "999")

    assert str(exc.value) == "Invalid bank code"
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_false_status_envelope_is_rejected():
    client = make_client(lambda r: httpx.Response(200, json={"status": False, "message": "Account is locked"}))

    with pytest.raises(IntegrationResponseError, match="Account is locked"):
        await client.get_banks()


@pytest.mark.asyncio
async def test_success_status_with_non_json_body_is_provider_error():
    client = make_client(lambda request: httpx.Response(200, text="upstream timeout"))

    with pytest.raises(PaystackAPIError) as exc:
        await client.get_banks()
    assert str(exc.value) == "Paystack API error"
    assert exc.value.status_code == 200
