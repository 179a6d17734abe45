"""
Shared module package.

Cross-cutting concerns used across bounded contexts:
error mapping, security headers, rate limiting and logging.
"""
