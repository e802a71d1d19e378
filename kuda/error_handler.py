"""Turn failures from screen actions into destructive toasts."""
from typing import Any, Dict, Optional
import logging

from kuda.integrations.errors import ConfigurationError, IntegrationError
from kuda.utils.validation import FormValidationError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


class ErrorHandler:
    def handle_exception(self, exc: Exception, title: str = "Error", context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        context = context or {}
        if isinstance(exc, FormValidationError):
            return {
                "ok": False,
                "toast": {"title": title, "description": exc.message, "variant": "destructive"},
                "field_errors": dict(exc.field_errors),
            }

        if isinstance(exc, (IntegrationError, ConfigurationError)):
            logger.error("%s: %s (context=%s)", title, exc, context)
            description = str(exc) or GENERIC_ERROR_MESSAGE
        else:
            logger.error("Unhandled exception in %s: %s", title, exc, exc_info=True)
            description = GENERIC_ERROR_MESSAGE

        return {
            "ok": False,
            "toast": {"title": title, "description": description, "variant": "destructive"},
            "metadata": {
                "error": str(exc),
                "source": getattr(exc, "source", None),
                "status_code": getattr(exc, "status_code", None),
                "context": context,
            },
        }
