"""
Brokerage bounded context — domain layer.

This module contains the domain model for the brokerage context:
- Accounts and their single linked address
- Trades and their status
- Storage ports and the error taxonomy
"""
