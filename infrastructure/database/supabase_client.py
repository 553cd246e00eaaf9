"""
Supabase client initialization.
Single point of database connection.
"""

import asyncio
import concurrent.futures
import logging
from functools import wraps
from typing import Optional

import httpx
from postgrest.exceptions import APIError
from supabase import create_client, Client

from config.settings import settings
from core.domain.errors import TransientStoreError
from infrastructure.database.errors import map_api_error

logger = logging.getLogger(__name__)

_client: Optional[Client] = None


def get_supabase() -> Client:
    """Create the shared client on first use"""
    global _client
    if _client is not None:
        return _client

    url = settings.supabase_url
    key = settings.supabase_service_key or settings.supabase_key
    if not url or not key:
        logger.error(
            "Supabase credentials not configured! Required env vars: "
            f"SUPABASE_URL ({'set' if url else 'MISSING'}), "
            f"SUPABASE_SERVICE_KEY or SUPABASE_KEY ({'set' if key else 'MISSING'})"
        )
        raise RuntimeError("Supabase credentials not configured")

    # Schema isolation: staging can point at its own schema
    if settings.db_schema != "public":
        from supabase.lib.client_options import ClientOptions
        _client = create_client(url, key, options=ClientOptions(schema=settings.db_schema))
    else:
        _client = create_client(url, key)
    return _client


# Bounded pool for the sync SDK, separate from the default executor
_db_executor = concurrent.futures.ThreadPoolExecutor(
    max_workers=settings.db_max_workers,
    thread_name_prefix="supabase-db",
)


def run_sync(func):
    """
    Decorator to run synchronous Supabase operations in async context.
    Supabase Python SDK is synchronous, so we need this wrapper.

    Each call is bounded by settings.store_timeout_seconds. Timeouts and
    transport failures become TransientStoreError; PostgREST errors are
    mapped to domain errors.
    """
    @wraps(func)
    async def wrapper(*args, **kwargs):
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(
                loop.run_in_executor(_db_executor, lambda: func(*args, **kwargs)),
                timeout=settings.store_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"[DB] {func.__name__} timed out after {settings.store_timeout_seconds}s")
            raise TransientStoreError(f"{func.__name__} timed out") from e
        except APIError as e:
            raise map_api_error(e) from e
        except httpx.HTTPError as e:
            logger.warning(f"[DB] {func.__name__} transport error: {e}")
            raise TransientStoreError(str(e)) from e
    return wrapper
