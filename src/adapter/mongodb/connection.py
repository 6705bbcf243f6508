import os
import logging
from pymongo import MongoClient
from pymongo.errors import ConnectionFailure, PyMongoError

logger = logging.getLogger(__name__)

# Driver-level logs are noisy at INFO
pymongo_logger = logging.getLogger('pymongo')
pymongo_logger.setLevel(logging.WARNING)

# Multi-document transactions (content link reconcile) need a replica set
# or sharded cluster; MONGO_URL must point at one.
MONGO_URL = os.getenv('MONGO_URL')
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'lexigraph')

_client_cache = None
_connection_attempted = False
_connection_failed = False


def reset_client():
    """Forget the cached client and any failed connection attempt."""
    global _client_cache, _connection_attempted, _connection_failed
    _client_cache = None
    _connection_attempted = False
    _connection_failed = False


def get_mongodb_client() -> MongoClient | None:
    """Get MongoDB client with connection caching and reconnection logic.

    Connection strategy:
    1. Return cached client if healthy (ping succeeds)
    2. If cached client fails, attempt reconnection
    3. If initial connection failed (config issue), don't retry

    Returns:
        MongoDB client or None if connection fails
    """
    global _client_cache, _connection_attempted, _connection_failed

    # Fast path: return cached client if healthy
    if _client_cache:
        try:
            _client_cache.admin.command('ping')
            return _client_cache
        except PyMongoError:
            _client_cache = None
            logger.debug("[MONGODB] Cached client failed ping, attempting reconnection...")

    # Don't retry if initial connection failed (configuration issue)
    if _connection_failed:
        return None

    # Validate connection string is configured
    if not MONGO_URL:
        logger.error("[MONGODB] MONGO_URL not configured.")
        _connection_failed = True
        return None

    # Attempt connection; timeouts are sized for request-time callers
    try:
        client = MongoClient(
            MONGO_URL,
            serverSelectionTimeoutMS=5000,  # fail fast when no replica set member is reachable
            connectTimeoutMS=5000,  # initial TCP connect
            socketTimeoutMS=30000,  # long enough for histogram aggregations over big collections
            maxPoolSize=20,  # reconcile and histogram queries run concurrently per request
            minPoolSize=0,  # no idle connections kept open
            maxIdleTimeMS=30000,  # close idle connections before proxies drop them
            waitQueueTimeoutMS=10000,  # wait up to 10s for a free pooled connection
            retryWrites=True,  # retry single writes once on network errors
            retryReads=True,  # retry reads once on network errors
            # zlib ships with Python; link sets and histograms compress well
            compressors=['zlib'],
            zlibCompressionLevel=1,  # favor speed over ratio
        )
        client.admin.command('ping')  # verify the connection works

        # Track first successful connection
        is_first_connection = not _connection_attempted
        _connection_attempted = True

        # Cache for future calls
        _client_cache = client

        # Log only on first connection
        if is_first_connection:
            logger.info(f"[MONGODB] Connected successfully to {DATABASE_NAME}")

        return client
    except (ConnectionFailure, PyMongoError) as e:
        # Log only on initial failure; later failures are retried on the next call
        if not _connection_attempted:
            logger.error(f"[MONGODB] Initial connection failed: {str(e)[:200]}")
            _connection_failed = True
        return None


def supports_transactions(client: MongoClient) -> bool:
    """True when the deployment is a replica set or mongos.

    Standalone servers accept every other operation but reject
    multi-document transactions at commit time.
    """
    try:
        hello = client.admin.command('hello')
    except PyMongoError as e:
        logger.warning("[MONGODB] Could not determine topology", extra={"error": str(e)})
        return False
    return bool(hello.get('setName')) or hello.get('msg') == 'isdbgrid'
