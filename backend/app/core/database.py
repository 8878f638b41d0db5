"""
Conexión a base de datos PostgreSQL (Supabase)

Este módulo centraliza TODAS las formas de acceso a la base de datos:
- psycopg2 directo (para las queries de los repositorios)
- SQLAlchemy (definición del esquema en app.models)
- Supabase client (Auth admin API)

Author: TM3
Updated: 2025-08-12
"""
import time
import logging
from functools import lru_cache

import psycopg2
from psycopg2.extras import RealDictCursor
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base
from supabase import create_client, Client

from .config import settings

logger = logging.getLogger(__name__)


# ============================================================================
# SQLAlchemy Configuration (schema models)
# ============================================================================

# Base para modelos
Base = declarative_base()

# Sequences used for document numbers (PED-..., REP-...)
DOCUMENT_SEQUENCES = ("pedidos_seq", "report_sequence")


@lru_cache()
def get_engine():
    """
    Lazily build the SQLAlchemy engine

    The engine is only needed for schema management, so it is not created
    at import time.
    """
    if not settings.DATABASE_URL:
        raise Exception("DATABASE_URL not configured")

    return create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,  # Verificar conexión antes de usar
        pool_size=5,
        max_overflow=10,
    )


def create_schema(engine=None):
    """
    Create every table declared in app.models plus the document sequences

    Args:
        engine: SQLAlchemy engine (defaults to get_engine())
    """
    # Import models so they register on Base.metadata
    from app import models  # noqa: F401

    engine = engine or get_engine()

    with engine.begin() as conn:
        for sequence in DOCUMENT_SEQUENCES:
            conn.execute(text(f"CREATE SEQUENCE IF NOT EXISTS {sequence} START 1"))

    Base.metadata.create_all(bind=engine)
    logger.info(f"Schema ready: {len(Base.metadata.tables)} tables")


# ============================================================================
# Supabase Client (Auth admin API)
# ============================================================================

@lru_cache()
def get_supabase_client() -> Client:
    """Supabase client authenticated with the service role key"""
    if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise Exception("SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY not configured")

    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)


def get_supabase() -> Client:
    """
    FastAPI dependency para obtener cliente de Supabase

    Usage:
        @router.post("/comerciales")
        def create(sb: Client = Depends(get_supabase)):
            ...
    """
    return get_supabase_client()


# ============================================================================
# Database Connection with Retry Logic (SSL Failure Recovery)
# ============================================================================

def _connect_with_retry(cursor_factory=None, max_retries=3, retry_delay=1.0):
    database_url = settings.DATABASE_URL
    if not database_url:
        raise Exception("DATABASE_URL not configured")

    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database connection attempt {attempt}/{max_retries}")
            if cursor_factory:
                conn = psycopg2.connect(database_url, cursor_factory=cursor_factory)
            else:
                conn = psycopg2.connect(database_url)

            # Test connection with a simple query
            cursor = conn.cursor()
            cursor.execute("SELECT 1")
            cursor.close()

            logger.debug(f"Database connection successful on attempt {attempt}")
            return conn

        except psycopg2.OperationalError as e:
            last_error = e
            error_msg = str(e)

            if "SSL connection has been closed unexpectedly" in error_msg:
                logger.warning(f"SSL connection error on attempt {attempt}/{max_retries}: {error_msg}")
            else:
                logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {error_msg}")

            if attempt < max_retries:
                # Exponential backoff
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)
            else:
                logger.error(f"All {max_retries} connection attempts failed")
                raise last_error

        except Exception as e:
            # For non-connection errors, fail immediately
            logger.error(f"Unexpected error during connection: {e}")
            raise

    raise last_error if last_error else Exception("Connection failed after all retries")


def get_db_connection_with_retry(max_retries=3, retry_delay=1.0):
    """
    Get a psycopg2 connection with automatic retry on SSL/connection failures

    This function handles intermittent Supabase connection issues by:
    - Retrying failed connections up to max_retries times
    - Adding exponential backoff between retries
    - Logging connection attempts for debugging

    Args:
        max_retries: Maximum number of connection attempts (default: 3)
        retry_delay: Initial delay between retries in seconds (default: 1.0)

    Returns:
        psycopg2 connection object

    Raises:
        psycopg2.OperationalError: If all retry attempts fail
    """
    return _connect_with_retry(max_retries=max_retries, retry_delay=retry_delay)


def get_db_connection_dict_with_retry(max_retries=3, retry_delay=1.0):
    """
    Get a psycopg2 connection with RealDictCursor and automatic retry

    Same as get_db_connection_with_retry but returns dicts instead of tuples.

    Example:
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM pedidos")
        results = cursor.fetchall()  # Returns list of dicts
        cursor.close()
        conn.close()
    """
    return _connect_with_retry(
        cursor_factory=RealDictCursor,
        max_retries=max_retries,
        retry_delay=retry_delay
    )
