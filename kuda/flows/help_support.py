"""
Help & support - FAQ, contact methods and support requests
"""

import logging
from typing import Any, Dict, Optional

from kuda.error_handler import ErrorHandler
from kuda.flows.responses import success
from kuda.integrations.contracts.interfaces import NOTIFICATION, BackendClient
from kuda.utils.validation import optional_str, raise_if_errors, require_str

logger = logging.getLogger(__name__)

FAQ = [
    {
        "question": "How do I transfer money to another bank?",
        "answer": "Go to Transfer, select 'Other Banks', enter recipient details, amount, and your transaction PIN to complete the transfer.",
    },
    {
        "question": "What are the transaction limits?",
        "answer": "Daily transfer limit is ₦1,000,000 for Tier 2 accounts. For higher limits, upgrade to Tier 3 with additional verification.",
    },
    {
        "question": "How do I upgrade my account tier?",
        "answer": "Visit any Kuda office with valid ID, proof of address, and BVN. You can also start the process in-app under Account Settings.",
    },
    {
        "question": "How do I block my card?",
        "answer": "Go to Cards section, select your card, and tap 'Block Card'. You can also call our 24/7 hotline immediately.",
    },
    {
        "question": "What should I do if I forget my transaction PIN?",
        "answer": "Go to Profile > Account Settings > Change Transaction PIN. You'll need to verify your identity through SMS or email.",
    },
    {
        "question": "How do I download my bank statement?",
        "answer": "Go to Transaction History, tap the filter icon, select date range, and tap 'Export Statement' to download PDF.",
    },
]

CONTACT_METHODS = [
    {"title": "Call Us", "description": "24/7 Customer Support", "contact": "+234 1 888 KUDA"},
    {"title": "Email Support", "description": "We reply within 24 hours", "contact": "help@kuda.com"},
    {"title": "Live Chat", "description": "Chat with our support team", "contact": "Available 24/7"},
]


def faq() -> Dict:
    return {"faq": FAQ, "contact_methods": CONTACT_METHODS}


class HelpSupportFlow:
    def __init__(self, backend: BackendClient, error_handler: Optional[ErrorHandler] = None):
        self.backend = backend
        self.error_handler = error_handler or ErrorHandler()

    async def submit_contact(self, form_data: Dict[str, Any]) -> Dict:
        """Record a support request as a notification for the user."""
        try:
            errors: Dict[str, str] = {}
            subject = require_str(form_data, "subject", errors, label="Subject")
            message = require_str(form_data, "message", errors, label="Message")
            raise_if_errors(errors)

            record = await self.backend.resource(NOTIFICATION).create(
                {
                    "type": "support_request",
                    "title": subject,
                    "message": message,
                    "email": optional_str(form_data, "email"),
                    "read": False,
                }
            )
        except Exception as e:
            return self.error_handler.handle_exception(e, title="Error")

        logger.info("Support request %s recorded", record.get("id"))
        return success(
            "Message Sent",
            "Your support request has been submitted. We'll get back to you soon.",
            data={"id": record.get("id")},
        )
