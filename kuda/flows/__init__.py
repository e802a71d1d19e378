"""
Screen flows.

One class per screen. Flows own the screen's view state, run client-side
validation, orchestrate backend and payments calls, and return toast/redirect
result dicts (see `responses.py`) instead of rendering.
"""

from kuda.flows.auth import LoginFlow, SignupFlow, logout
from kuda.flows.bills import BillsFlow
from kuda.flows.cards import CardsView
from kuda.flows.dashboard import DashboardView
from kuda.flows.help_support import HelpSupportFlow
from kuda.flows.onboarding import OnboardingFlow
from kuda.flows.profile import ProfileFlow
from kuda.flows.transfer import TransferFlow

__all__ = [
    "BillsFlow",
    "CardsView",
    "DashboardView",
    "HelpSupportFlow",
    "LoginFlow",
    "OnboardingFlow",
    "ProfileFlow",
    "SignupFlow",
    "TransferFlow",
    "logout",
]
