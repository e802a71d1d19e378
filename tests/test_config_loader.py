from pathlib import Path

import pytest
from pydantic import ValidationError

from kuda.database.token_store import FileTokenStore, TokenStore
from kuda.integrations.clients.mocks import MockBackendClient, MockPaystackClient
from kuda.integrations.clients.real_http import RealBackendClient, RealPaystackClient
from kuda.integrations.factory import build_clients, build_token_store
from kuda.utils.config_loader import AppConfig, load_app_config, use_real_integrations

ENV_VARS = (
    "KUDA_AUTH_BASE_URL",
    "KUDA_API_BASE_URL",
    "PAYSTACK_BASE_URL",
    "PAYSTACK_SECRET_KEY",
    "PAYSTACK_PUBLIC_KEY",
    "INTEGRATIONS_MODE",
    "KUDA_TOKEN_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # keep a developer's .env out of these tests
    monkeypatch.setattr("kuda.utils.config_loader.load_dotenv", lambda *a, **k: False)


def test_repo_config_loads():
    config = load_app_config()
    assert config.account.starting_balance == 20000
    assert config.account.account_number_prefix == "1234"
    assert config.dashboard.recent_transactions == 4
    assert config.transfer.recent_recipients == 3


def test_explicit_missing_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_app_config(tmp_path / "missing.yml")


def test_yaml_values_and_env_overrides(tmp_path, monkeypatch):
    path = tmp_path / "app_config.yml"
    path.write_text(
        "backend:\n  api_base_url: https://yaml.example/api\n  timeout_seconds: 5\n"
        "transfer:\n  verification_debounce_seconds: 0\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("KUDA_API_BASE_URL", "https://env.example/api")
    monkeypatch.setenv("INTEGRATIONS_MODE", "MOCK")

    config = load_app_config(path)

    assert config.backend.api_base_url == "https://env.example/api"
    assert config.backend.timeout_seconds == 5
    assert config.transfer.verification_debounce_seconds == 0
    assert config.integrations_mode == "mock"


def test_invalid_config_raises_validation_error(tmp_path):
    path = tmp_path / "app_config.yml"
    path.write_text("backend:\n  timeout_seconds: -1\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        load_app_config(path)


def test_use_real_integrations(monkeypatch):
    assert use_real_integrations(AppConfig(integrations_mode="real")) is True
    assert use_real_integrations(AppConfig(integrations_mode="mock")) is False
    assert use_real_integrations(AppConfig(integrations_mode="auto")) is False

    monkeypatch.setenv("PAYSTACK_SECRET_KEY", "sk_test_x")
    assert use_real_integrations(AppConfig(integrations_mode="auto")) is True
    assert use_real_integrations(AppConfig(integrations_mode="test")) is False


def test_build_clients_selects_by_mode():
    backend, payments = build_clients(AppConfig(integrations_mode="mock"))
    assert isinstance(backend, MockBackendClient)
    assert isinstance(payments, MockPaystackClient)

    backend, payments = build_clients(AppConfig(integrations_mode="real"))
    assert isinstance(backend, RealBackendClient)
    assert isinstance(payments, RealPaystackClient)


def test_build_token_store(tmp_path):
    assert type(build_token_store(AppConfig())) is TokenStore
    store = build_token_store(AppConfig(token_file=str(Path(tmp_path) / "token.json")))
    assert isinstance(store, FileTokenStore)
