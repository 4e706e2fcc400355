"""Supabase (PostgREST) implementations of the domain repositories."""

from .client import create_supabase_client
from .supabase_catalog_repository import SupabaseAuthorRepository, SupabaseTagRepository
from .supabase_edit_history_repository import SupabaseEditHistoryRepository
from .supabase_record_repository import SupabaseRecordRepository
from .supabase_user_repository import SupabaseUserRepository

__all__ = [
    "create_supabase_client",
    "SupabaseAuthorRepository",
    "SupabaseTagRepository",
    "SupabaseEditHistoryRepository",
    "SupabaseRecordRepository",
    "SupabaseUserRepository",
]
