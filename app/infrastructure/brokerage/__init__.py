"""
Storage adapters for the brokerage bounded context.

Each adapter implements a domain port (ABC). The SQL adapters share
one SQLAlchemy engine; the in-memory adapters share one InMemoryStore.
"""
