"""
Profile screen - personal info, account settings, password, notifications

Account settings and notification preferences are stored as `user_setting`
records, one per kind, created on first save and patched afterwards.
"""

import logging
from typing import Any, Dict, Optional

from kuda.error_handler import ErrorHandler
from kuda.flows.responses import success
from kuda.integrations.contracts.backend import Record
from kuda.integrations.contracts.interfaces import USER_SETTING, BackendClient
from kuda.integrations.policy.response_wrappers import normalize_record
from kuda.utils.validation import (
    add_error,
    optional_str,
    raise_if_errors,
    require_str,
    validate_email,
    validate_match,
)

logger = logging.getLogger(__name__)

ACCOUNT_SETTINGS = "account"
NOTIFICATION_SETTINGS = "notifications"

DEFAULT_ACCOUNT_SETTINGS = {
    "two_factor": False,
    "biometric": False,
    "sms_alerts": True,
    "email_alerts": True,
}

DEFAULT_NOTIFICATION_SETTINGS = {
    "push": True,
    "email": True,
    "sms": False,
}

# form field -> backend user field
PERSONAL_FIELDS = {
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
    "phone": "phone",
    "address": "address",
}


class ProfileFlow:
    def __init__(self, backend: BackendClient, error_handler: Optional[ErrorHandler] = None):
        self.backend = backend
        self.error_handler = error_handler or ErrorHandler()
        self._settings: Dict[str, Record] = {}

    async def load(self) -> Dict:
        try:
            user = await self.backend.get_me()
            await self._load_settings()
        except Exception as e:
            return self.error_handler.handle_exception(e, title="Could not load profile")

        return {
            "ok": True,
            "data": {
                "name": user.name,
                "initials": user.initials,
                "email": user.email,
                "phone": user.phone,
                "address": user.address,
                "account_number": user.account_number,
                "account_settings": self._values(ACCOUNT_SETTINGS, DEFAULT_ACCOUNT_SETTINGS),
                "notification_preferences": self._values(NOTIFICATION_SETTINGS, DEFAULT_NOTIFICATION_SETTINGS),
            },
        }

    async def _load_settings(self) -> None:
        for record in await self.backend.list_user_settings():
            kind = record.data.get("kind")
            if kind:
                self._settings[kind] = record

    def _values(self, kind: str, defaults: Dict[str, bool]) -> Dict[str, bool]:
        record = self._settings.get(kind)
        stored = record.data.get("values", {}) if record else {}
        return {key: bool(stored.get(key, default)) for key, default in defaults.items()}

    async def update_personal_info(self, form_data: Dict[str, Any]) -> Dict:
        """PATCH /auth/me with only the fields that were sent."""
        try:
            errors: Dict[str, str] = {}
            fields: Dict[str, Any] = {}
            for form_field, user_field in PERSONAL_FIELDS.items():
                if form_field not in form_data:
                    continue
                if form_field == "email":
                    fields[user_field] = validate_email(form_data.get("email"), errors)
                elif form_field in ("first_name", "last_name"):
                    fields[user_field] = require_str(form_data, form_field, errors, label=form_field.replace("_", " ").capitalize())
                else:
                    fields[user_field] = optional_str(form_data, form_field)
            if not fields:
                add_error(errors, "form", "Nothing to update")
            raise_if_errors(errors, message=next(iter(errors.values()), ""))

            if "firstName" in fields or "lastName" in fields:
                current = await self.backend.get_me()
                first = fields.get("firstName", current.first_name)
                last = fields.get("lastName", current.last_name)
                fields["name"] = f"{first} {last}".strip()

            user = await self.backend.update_me(fields)
        except Exception as e:
            return self.error_handler.handle_exception(e, title="Update Failed")

        return success(
            "Profile Updated",
            "Your personal information has been updated.",
            data={"name": user.name, "email": user.email, "phone": user.phone, "address": user.address},
        )

    async def _save_setting(self, kind: str, values: Dict[str, bool]) -> Record:
        if kind not in self._settings:
            await self._load_settings()
        existing = self._settings.get(kind)
        payload = {"kind": kind, "values": values}
        if existing is None:
            raw = await self.backend.resource(USER_SETTING).create(payload)
        else:
            raw = await self.backend.resource(USER_SETTING).update(existing.id, payload)
        record = normalize_record(raw)
        self._settings[kind] = record
        return record

    async def save_account_settings(self, settings: Dict[str, Any]) -> Dict:
        values = {key: bool(settings.get(key, default)) for key, default in DEFAULT_ACCOUNT_SETTINGS.items()}
        try:
            await self._save_setting(ACCOUNT_SETTINGS, values)
        except Exception as e:
            return self.error_handler.handle_exception(e, title="Update Failed")
        return success("Settings Updated", "Your account settings have been saved.", data=values)

    async def save_notification_preferences(self, preferences: Dict[str, Any]) -> Dict:
        values = {key: bool(preferences.get(key, default)) for key, default in DEFAULT_NOTIFICATION_SETTINGS.items()}
        try:
            await self._save_setting(NOTIFICATION_SETTINGS, values)
        except Exception as e:
            return self.error_handler.handle_exception(e, title="Update Failed")
        return success("Notifications Updated", "Your notification preferences have been saved.", data=values)

    def change_password(self, form_data: Dict[str, Any]) -> Dict:
        """
        Client-side checks only. The backend exposes no password endpoint, so
        a valid form is acknowledged without a network call.
        """
        try:
            errors: Dict[str, str] = {}
            require_str(form_data, "current_password", errors, label="Current password")
            new_password = require_str(form_data, "new_password", errors, label="New password")
            require_str(form_data, "confirm_password", errors, label="Password confirmation")
            raise_if_errors(errors)

            validate_match(new_password, form_data.get("confirm_password") or "", errors, "confirm_password", "New passwords do not match")
            raise_if_errors(errors, message="New passwords do not match")
        except Exception as e:
            return self.error_handler.handle_exception(e, title="Error")

        logger.info("Password change accepted")
        return success("Password Changed", "Your password has been updated successfully.")
