import logging
from supabase import create_client, Client
from withme.config import settings

logger = logging.getLogger(__name__)


class SupabaseClient:
    """Process-wide Supabase clients: one on the anon key, one on the service_role key"""

    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls, strict: bool = False) -> Client:
        """Client that bypasses RLS, for guest claims, admin pages, city caching and scripts.

        Without SUPABASE_SERVICE_ROLE_KEY this falls back to the anon client,
        unless strict is set, in which case a RuntimeError is raised.
        """
        if cls._service_client is not None:
            return cls._service_client
        if not settings.supabase_service_role_key:
            if strict:
                raise RuntimeError("SUPABASE_SERVICE_ROLE_KEY is not set")
            logger.warning("SUPABASE_SERVICE_ROLE_KEY not set; using the anon client for privileged calls")
            return cls.get_client()
        cls._service_client = create_client(settings.supabase_url, settings.supabase_service_role_key)
        return cls._service_client


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_service_supabase() -> Client:
    return SupabaseClient.get_service_client()


def get_script_supabase() -> Client:
    """Service client for maintenance scripts; fails fast without the service_role key"""
    return SupabaseClient.get_service_client(strict=True)
