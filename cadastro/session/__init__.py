"""
Módulo de persistência da sessão de login.
Suporta tanto InMemoryAuthSessionStore quanto RedisAuthSessionStore.
"""

from .memory_session_store import InMemoryAuthSessionStore
from .redis_session_store import RedisAuthSessionStore

__all__ = ["InMemoryAuthSessionStore", "RedisAuthSessionStore"]
