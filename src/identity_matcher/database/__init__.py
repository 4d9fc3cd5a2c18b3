"""
Módulo de base de datos.

Provee acceso a Supabase y un backend en memoria con los mismos contratos.
"""

from identity_matcher.database.supabase_client import get_supabase_client, SupabaseClient
from identity_matcher.database.repositories import (
    AssessmentRepository,
    ConsentRepository,
    SupabaseProfileStore,
    UserRepository,
)
from identity_matcher.database.memory import InMemoryStore

__all__ = [
    "get_supabase_client",
    "SupabaseClient",
    "AssessmentRepository",
    "ConsentRepository",
    "SupabaseProfileStore",
    "UserRepository",
    "InMemoryStore",
]
