"""
Configuration loader for the Kuda client
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "app_config.yml"


class BackendConfig(BaseModel):
    """Backend-as-a-service endpoints"""

    auth_base_url: str = "https://x8ki-letl-twmt.n7.xano.io/api:Ye7qAxAj"
    api_base_url: str = "https://x8ki-letl-twmt.n7.xano.io/api:kQC-7-zf"
    timeout_seconds: float = Field(default=20.0, gt=0)


class PaystackConfig(BaseModel):
    """Payments provider settings (keys come from the environment only)"""

    base_url: str = "https://api.paystack.co"
    country: str = "nigeria"
    currency: str = "NGN"
    timeout_seconds: float = Field(default=20.0, gt=0)


class AccountConfig(BaseModel):
    starting_balance: float = Field(default=20000, ge=0)
    account_number_prefix: str = "1234"


class TransferConfig(BaseModel):
    verification_debounce_seconds: float = Field(default=0.5, ge=0)
    recent_recipients: int = Field(default=3, ge=0)
    history_limit: int = Field(default=20, ge=1)


class DashboardConfig(BaseModel):
    recent_transactions: int = Field(default=4, ge=1)


class AppConfig(BaseModel):
    """Complete application configuration"""

    integrations_mode: str = "auto"
    token_file: Optional[str] = None
    backend: BackendConfig = Field(default_factory=BackendConfig)
    paystack: PaystackConfig = Field(default_factory=PaystackConfig)
    account: AccountConfig = Field(default_factory=AccountConfig)
    transfer: TransferConfig = Field(default_factory=TransferConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)


def _apply_env_overrides(config_data: dict) -> dict:
    backend = config_data.setdefault("backend", {})
    paystack = config_data.setdefault("paystack", {})

    if os.getenv("KUDA_AUTH_BASE_URL"):
        backend["auth_base_url"] = os.environ["KUDA_AUTH_BASE_URL"]
    if os.getenv("KUDA_API_BASE_URL"):
        backend["api_base_url"] = os.environ["KUDA_API_BASE_URL"]
    if os.getenv("PAYSTACK_BASE_URL"):
        paystack["base_url"] = os.environ["PAYSTACK_BASE_URL"]
    if os.getenv("INTEGRATIONS_MODE"):
        config_data["integrations_mode"] = os.environ["INTEGRATIONS_MODE"].strip().lower()
    if os.getenv("KUDA_TOKEN_FILE"):
        config_data["token_file"] = os.environ["KUDA_TOKEN_FILE"]
    return config_data


def load_app_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load and validate application configuration from YAML, then apply env overrides

    Args:
        config_path: Path to config file. Defaults to config/app_config.yml;
            when the default file is absent built-in defaults are used.

    Returns:
        Validated AppConfig object

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    load_dotenv()

    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    path = config_path or DEFAULT_CONFIG_PATH
    config_data: dict = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.info("No config file at %s, using defaults", path)

    config_data = _apply_env_overrides(config_data)

    try:
        config = AppConfig(**config_data)
        logger.info(f"Loaded app config (integrations_mode={config.integrations_mode})")
        return config
    except ValidationError as e:
        logger.error(f"Config validation failed: {e}")
        raise


def use_real_integrations(config: AppConfig) -> bool:
    """Real clients when forced by mode, or implied by configured provider keys."""
    mode = (config.integrations_mode or "").strip().lower()
    if mode in {"real", "live"}:
        return True
    if mode in {"mock", "test"}:
        return False
    return bool(os.getenv("PAYSTACK_SECRET_KEY"))
