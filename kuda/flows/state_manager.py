"""
Per-client screen state for the HTTP API
"""

import logging
from typing import Callable, TypeVar

from kuda.database.session_cache import SessionCache
from kuda.database.token_store import TokenStore
from kuda.error_handler import ErrorHandler
from kuda.flows.bills import BillsFlow
from kuda.flows.cards import CardsView
from kuda.flows.profile import ProfileFlow
from kuda.flows.transfer import TransferFlow
from kuda.integrations.contracts.interfaces import BackendClient, PaymentsProvider
from kuda.utils.config_loader import AppConfig

logger = logging.getLogger(__name__)

F = TypeVar("F")


class StateManager:
    """
    Keeps one set of screen flows per bearer token.

    Each flow gets the shared backend client bound to the caller's token, so
    the transfer form's in-flight guard and verification cache persist across
    requests from the same client and are isolated from other clients.
    """

    def __init__(
        self,
        session_cache: SessionCache,
        backend: BackendClient,
        payments: PaymentsProvider,
        config: AppConfig,
        error_handler: ErrorHandler = None,
    ):
        self.cache = session_cache
        self.backend = backend
        self.payments = payments
        self.config = config
        self.error_handler = error_handler or ErrorHandler()

    def backend_for(self, token: str) -> BackendClient:
        return self.backend.bind(TokenStore(token))

    def _get_or_create(self, token: str, name: str, factory: Callable[[], F]) -> F:
        flow = self.cache.get(token, name)
        if flow is None:
            flow = factory()
            self.cache.set(token, name, flow)
        return flow

    def transfer_flow(self, token: str) -> TransferFlow:
        cfg = self.config
        return self._get_or_create(
            token,
            "transfer",
            lambda: TransferFlow(
                self.backend_for(token),
                self.payments,
                debounce_seconds=cfg.transfer.verification_debounce_seconds,
                recent_recipients=cfg.transfer.recent_recipients,
                history_limit=cfg.transfer.history_limit,
                country=cfg.paystack.country,
                currency=cfg.paystack.currency,
                error_handler=self.error_handler,
            ),
        )

    def bills_flow(self, token: str) -> BillsFlow:
        return self._get_or_create(token, "bills", lambda: BillsFlow(self.backend_for(token), self.error_handler))

    def cards_view(self, token: str) -> CardsView:
        return self._get_or_create(token, "cards", lambda: CardsView(self.backend_for(token), self.error_handler))

    def profile_flow(self, token: str) -> ProfileFlow:
        return self._get_or_create(token, "profile", lambda: ProfileFlow(self.backend_for(token), self.error_handler))

    def end_session(self, token: str) -> None:
        if token in self.cache:
            logger.info("Clearing screen state for logged-out client")
        self.cache.delete_session(token)
