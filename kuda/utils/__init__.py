"""
Utility modules for the Kuda client
"""
from .config_loader import AppConfig, load_app_config, use_real_integrations
from .debounce import KeyedDebouncer
from .money import (
    format_amount,
    generate_account_number,
    generate_reference,
    kobo_to_naira,
    naira_to_kobo,
)
from .validation import FormValidationError, is_valid_account_number, should_verify_account

__all__ = [
    'AppConfig',
    'load_app_config',
    'use_real_integrations',
    'KeyedDebouncer',
    'format_amount',
    'generate_account_number',
    'generate_reference',
    'kobo_to_naira',
    'naira_to_kobo',
    'FormValidationError',
    'is_valid_account_number',
    'should_verify_account',
]
