"""
Onboarding flow - welcome, transaction PIN, done
"""

from typing import Dict

from kuda.flows.responses import failure, success
from kuda.utils.validation import PIN_LENGTH, accepts_pin_input


class OnboardingFlow:
    STEPS = {
        1: {"title": "Welcome to Kuda!", "description": "Let's set up your account in a few simple steps"},
        2: {"title": "Create Transaction PIN", "description": "This PIN will be used to authorize transactions"},
        3: {"title": "You're all set!", "description": "Your account is ready. Start banking with Kuda today."},
    }

    def __init__(self):
        self.step = 1
        self.pin = ""
        self.confirm_pin = ""

    def current(self) -> Dict:
        return {"step": self.step, **self.STEPS[self.step], "can_continue": self.can_continue}

    @property
    def can_continue(self) -> bool:
        if self.step == 2:
            return len(self.pin) == PIN_LENGTH and len(self.confirm_pin) == PIN_LENGTH
        return True

    def enter_pin(self, value: str, confirm: bool = False) -> bool:
        """Keystroke-level input: ignore anything that isn't up to 4 digits."""
        if not accepts_pin_input(value):
            return False
        if confirm:
            self.confirm_pin = value
        else:
            self.pin = value
        return True

    def next(self) -> Dict:
        if self.step == 1:
            self.step = 2
            return {"ok": True, **self.current()}

        if self.step == 2:
            if self.pin != self.confirm_pin:
                return failure("PINs do not match")
            if len(self.pin) != PIN_LENGTH:
                return failure(f"PIN must be {PIN_LENGTH} digits")
            self.step = 3
            return {"ok": True, **self.current()}

        return success("Setup complete!", "Your Kuda account is ready to use.", redirect="/dashboard")
