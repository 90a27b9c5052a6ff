"""Document Store Configuration Management

This module provides centralized configuration for the document store: PostgreSQL
connection parameters, pool and keepalive settings, and the in-memory fallback switch.
"""

from __future__ import annotations

MODULE_DESCRIPTION = r"""Document Store Configuration Management

This module is the configuration hub for the document store that persists users,
bugs and revoked tokens. It reads PostgreSQL connection parameters from the
environment, holds the connection pool and keepalive tunables, and decides
whether the in-memory fallback store may be used when PostgreSQL is not
configured or cannot be reached.

Key Features:
-------------
1. Connection Configuration Management:
   - PostgreSQL connection parameters from environment variables
     (host, port, dbname, user, password)
   - Validation helper that reports missing parameters
   - Debug logging that never prints the password

2. Connection Pool Management:
   - Minimum and maximum pool size
   - Pool checkout timeout, idle timeout and connection lifetime

3. Timeouts and Keepalives:
   - Connection establishment timeout
   - TCP keepalive probes for long-lived pooled connections

4. Fallback Policy:
   - INMEMORY_FALLBACK_ENABLED (env "InMemoryStore_fallback", default "1")
     lets the application start against a non-persistent in-memory store
     when PostgreSQL is unavailable (development and tests)

Environment Variables:
---------------------
- host, port, dbname, user, password: PostgreSQL connection
- DOCSTORE_SSLMODE: sslmode query parameter (default: prefer)
- DOCSTORE_POOL_MIN_SIZE / DOCSTORE_POOL_MAX_SIZE: pool bounds
- InMemoryStore_fallback: 1 enables the in-memory fallback
"""

import os

from dotenv import load_dotenv

from api.utils.debug import print__docstore_debug

load_dotenv()

# ==============================================================================
# CONNECTION TIMEOUTS AND KEEPALIVES
# ==============================================================================
CONNECT_TIMEOUT = 30  # Initial connection timeout (seconds)
KEEPALIVES_IDLE = 300  # Seconds before the first keepalive probe
KEEPALIVES_INTERVAL = 30  # Seconds between keepalive probes
KEEPALIVES_COUNT = 3  # Failed probes before the connection is considered dead

# ==============================================================================
# CONNECTION POOL
# ==============================================================================
DEFAULT_POOL_MIN_SIZE = int(os.environ.get("DOCSTORE_POOL_MIN_SIZE", "1"))
DEFAULT_POOL_MAX_SIZE = int(os.environ.get("DOCSTORE_POOL_MAX_SIZE", "10"))
DEFAULT_POOL_TIMEOUT = 30  # Seconds to wait for a pooled connection
DEFAULT_MAX_IDLE = 600  # Idle connection timeout (seconds)
DEFAULT_MAX_LIFETIME = 3600  # Maximum connection lifetime (seconds)

SSLMODE = os.environ.get("DOCSTORE_SSLMODE", "prefer")

# ==============================================================================
# FALLBACK
# ==============================================================================
INMEMORY_FALLBACK_ENABLED = os.environ.get("InMemoryStore_fallback", "1") == "1"

DOCUMENTS_TABLE = "documents"


def get_db_config():
    """Extract database configuration from environment variables.

    Returns:
        dict: user, password, host, port (default 5432) and dbname.
    """
    print__docstore_debug(
        "DB CONFIG START: Getting database configuration from environment variables"
    )

    config = {
        "user": os.environ.get("user"),
        "password": os.environ.get("password"),
        "host": os.environ.get("host"),
        "port": int(os.environ.get("port", 5432)),
        "dbname": os.environ.get("dbname"),
    }

    # Password is intentionally excluded from debug output
    print__docstore_debug(
        f"DB CONFIG RESULT: host: {config['host']}, port: {config['port']}, "
        f"dbname: {config['dbname']}, user: {config['user']}"
    )
    return config


def check_postgres_env_vars():
    """Return True when every required PostgreSQL variable is set and non-empty."""
    required_vars = ["host", "port", "dbname", "user", "password"]

    missing_vars = [var for var in required_vars if not os.environ.get(var)]

    if missing_vars:
        print__docstore_debug(
            f"ENV VARS MISSING: Missing required environment variables: {missing_vars}"
        )
        return False

    print__docstore_debug(
        "ENV VARS COMPLETE: All required PostgreSQL environment variables are set"
    )
    return True
