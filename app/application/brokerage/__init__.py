"""
Application layer for the brokerage bounded context.

Managers coordinate domain entities and ports to fulfill
account, address and trade operations. No framework or
infrastructure imports allowed.
"""
