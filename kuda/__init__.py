"""Kuda mobile banking client: screen flows over a backend-as-a-service and Paystack."""

__version__ = "1.0.0"
