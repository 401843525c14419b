"""
Infrastructure package for the time tracker.

Centralizes I/O with the outside world: PostgreSQL connectivity (pool
lifecycle, maintenance connections, migrations) and the external
people-info service (client and local stub). Keep this layer decoupled from
the stores' query logic and from the HTTP layer.
"""

from tracker.infrastructure.db_factory import PoolManager, create_pool, get_sync_connection
from tracker.infrastructure.people_client import PeopleClient

__all__ = [
    "PeopleClient",
    "PoolManager",
    "create_pool",
    "get_sync_connection",
]
