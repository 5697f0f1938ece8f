from infrastructure.database.supabase_client import SupabaseSessionProvider, get_supabase, run_sync

__all__ = [
    "SupabaseSessionProvider",
    "get_supabase",
    "run_sync",
]
