"""
Contracts (data models).

This folder defines the request/response shapes for the two external systems:
- backend.py: users, transactions, cards, bills and generic records owned by
  the backend-as-a-service
- payments.py: banks, account verification, recipients, transfers and payment
  initialization from the payments provider
- interfaces.py: the abstract clients both mock and real implementations follow

Screens rely on these models, never on ad-hoc dicts from the wire.
"""
