"""
Client selection.

The choice between mock and real clients happens here and nowhere else.
"""

import logging
from typing import Optional, Tuple

from kuda.database.token_store import FileTokenStore, TokenStore
from kuda.integrations.clients.mocks import MockBackendClient, MockPaystackClient
from kuda.integrations.clients.real_http import RealBackendClient, RealPaystackClient
from kuda.integrations.contracts.interfaces import BackendClient, PaymentsProvider
from kuda.utils.config_loader import AppConfig, use_real_integrations

logger = logging.getLogger(__name__)


def build_token_store(config: AppConfig) -> TokenStore:
    if config.token_file:
        return FileTokenStore(config.token_file)
    return TokenStore()


def build_clients(
    config: AppConfig,
    token_store: Optional[TokenStore] = None,
) -> Tuple[BackendClient, PaymentsProvider]:
    token_store = token_store or build_token_store(config)

    if use_real_integrations(config):
        logger.info("Using real integrations (backend=%s)", config.backend.api_base_url)
        backend = RealBackendClient(
            token_store=token_store,
            auth_base_url=config.backend.auth_base_url,
            api_base_url=config.backend.api_base_url,
            timeout_seconds=config.backend.timeout_seconds,
            starting_balance=config.account.starting_balance,
            account_number_prefix=config.account.account_number_prefix,
        )
        payments = RealPaystackClient(
            base_url=config.paystack.base_url,
            timeout_seconds=config.paystack.timeout_seconds,
        )
        return backend, payments

    logger.info("Using mock integrations")
    backend = MockBackendClient(
        token_store=token_store,
        starting_balance=config.account.starting_balance,
        account_number_prefix=config.account.account_number_prefix,
    )
    return backend, MockPaystackClient()
