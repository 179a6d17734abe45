"""
Application layer package.

Contains the managers that orchestrate domain rules over storage ports.
Managers are stateless; every multi-step write runs inside a unit of work.
This layer depends on domain ports, never on infrastructure.
"""
