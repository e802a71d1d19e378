"""
Auth screens - login, signup and logout
"""

import logging
from typing import Any, Dict, Optional

from kuda.error_handler import ErrorHandler
from kuda.flows.responses import success
from kuda.integrations.contracts.backend import SignupRequest
from kuda.integrations.contracts.interfaces import BackendClient
from kuda.utils.validation import (
    add_error,
    raise_if_errors,
    require_str,
    validate_email,
    validate_match,
)

logger = logging.getLogger(__name__)

SIGNUP_FIELDS = ("first_name", "last_name", "email", "phone", "password", "confirm_password")


class LoginFlow:
    def __init__(self, backend: BackendClient, error_handler: Optional[ErrorHandler] = None):
        self.backend = backend
        self.error_handler = error_handler or ErrorHandler()
        self.loading = False

    async def submit(self, email: str, password: str) -> Dict:
        """Log in; the token is stored by the backend client only on success."""
        self.loading = True
        try:
            errors: Dict[str, str] = {}
            require_str({"email": email}, "email", errors, label="Email")
            require_str({"password": password}, "password", errors, label="Password")
            raise_if_errors(errors)

            await self.backend.login(email.strip(), password)
            logger.info("Login successful")
            return success("Welcome back!", "You have successfully logged in.", redirect="/dashboard")
        except Exception as e:
            return self.error_handler.handle_exception(e, title="Login Failed")
        finally:
            self.loading = False


class SignupFlow:
    def __init__(self, backend: BackendClient, error_handler: Optional[ErrorHandler] = None):
        self.backend = backend
        self.error_handler = error_handler or ErrorHandler()
        self.loading = False

    @staticmethod
    def validate(form_data: Dict[str, Any]) -> SignupRequest:
        errors: Dict[str, str] = {}
        first_name = require_str(form_data, "first_name", errors, label="First name")
        last_name = require_str(form_data, "last_name", errors, label="Last name")
        email = validate_email(form_data.get("email"), errors)
        phone = require_str(form_data, "phone", errors, label="Phone number")
        password = form_data.get("password") or ""
        if not password:
            add_error(errors, "password", "Password is required")
        raise_if_errors(errors)

        validate_match(password, form_data.get("confirm_password") or "", errors, "confirm_password", "Passwords do not match")
        raise_if_errors(errors, message="Passwords do not match")

        return SignupRequest(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            password=password,
        )

    async def submit(self, form_data: Dict[str, Any]) -> Dict:
        self.loading = True
        try:
            request = self.validate(form_data)
            await self.backend.signup(request)
            logger.info("Signup successful")
            return success("Account created!", "Welcome to Kuda. Let's set up your account.", redirect="/onboarding")
        except Exception as e:
            return self.error_handler.handle_exception(e, title="Signup Failed")
        finally:
            self.loading = False


def logout(backend: BackendClient) -> Dict:
    backend.logout()
    return success("Logged out", "You have been successfully logged out.", redirect="/")
