"""
Cards screen - list, reveal and freeze/unfreeze/block cards
"""

from typing import Dict, List, Optional

from kuda.error_handler import ErrorHandler
from kuda.flows.responses import failure, success
from kuda.integrations.contracts.backend import Card, CardStatus
from kuda.integrations.contracts.interfaces import BackendClient
from kuda.utils.money import format_amount

# action -> (resulting status, past-tense label)
CARD_ACTIONS = {
    "freeze": (CardStatus.FROZEN, "Frozen"),
    "unfreeze": (CardStatus.ACTIVE, "Unfrozen"),
    "block": (CardStatus.BLOCKED, "Blocked"),
}


class CardsView:
    def __init__(self, backend: BackendClient, error_handler: Optional[ErrorHandler] = None):
        self.backend = backend
        self.error_handler = error_handler or ErrorHandler()
        self.show_card_number = False
        self.cards: List[Card] = []

    def toggle_card_number(self) -> bool:
        self.show_card_number = not self.show_card_number
        return self.show_card_number

    def card_view(self, card: Card) -> Dict:
        return {
            "id": card.id,
            "type": card.card_type,
            "number": card.card_number if self.show_card_number else card.masked_number(),
            "expiry": card.expiry,
            "cvv": card.cvv if self.show_card_number else "***",
            "balance": card.balance,
            "balance_text": format_amount(card.balance),
            "status": card.status.value,
        }

    async def load(self) -> Dict:
        try:
            self.cards = await self.backend.list_cards()
        except Exception as e:
            return self.error_handler.handle_exception(e, title="Could not load cards")
        return {"ok": True, "data": {"cards": [self.card_view(c) for c in self.cards]}}

    async def apply_action(self, card_id: str, action: str) -> Dict:
        if action not in CARD_ACTIONS:
            return failure(f"Unknown card action '{action}'")

        status, label = CARD_ACTIONS[action]
        card = next((c for c in self.cards if c.id == str(card_id)), None)
        if card is not None and card.status == CardStatus.BLOCKED:
            return failure("This card is blocked and can no longer be changed.")

        try:
            updated = await self.backend.update_card(str(card_id), {"status": status.value})
        except Exception as e:
            return self.error_handler.handle_exception(e, title=f"Card {label}")

        self.cards = [updated if c.id == updated.id else c for c in self.cards]
        return success(
            f"Card {label}",
            f"Your card has been {label.lower()}.",
            data={"card": self.card_view(updated)},
        )
