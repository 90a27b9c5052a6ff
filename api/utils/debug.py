"""Environment-gated debug printing for the bug tracker.

Every helper prints only when its own environment flag is set to "1", so a
single area (tokens, bug mutations, the document store, the client session)
can be traced without flooding the console with the rest. Output goes to
stdout and is flushed immediately so it interleaves correctly with uvicorn's
access log.

Flags:
    DEBUG                          - general messages, startup and shutdown
    print__token_debug             - JWT issuing and verification
    print__bugs_debug              - bug endpoints and mutation policy
    print__users_debug             - registration, login, profile
    print__docstore_debug          - document store and PostgreSQL pool
    print__client_debug            - client session manager and hooks
    print__http_error_debug        - HTTP error summaries
    print__http_trace_debug        - HTTP error request context
"""

import os
import sys

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()


# ==============================================================================
# DEBUG FUNCTIONS
# ==============================================================================
def _emit(flag: str, prefix: str, msg: str) -> None:
    if os.environ.get(flag, "0") == "1":
        print(f"[{prefix}] {msg}")
        sys.stdout.flush()


def print__debug(msg: str) -> None:
    """Print DEBUG messages when debug mode is enabled.

    Args:
        msg: The message to print
    """
    _emit("DEBUG", "DEBUG", msg)


def print__startup_debug(msg: str) -> None:
    """Print startup debug messages when debug mode is enabled."""
    _emit("DEBUG", "STARTUP-DEBUG", msg)


def print__token_debug(msg: str) -> None:
    """Print print__token_debug messages when token debugging is enabled.

    Args:
        msg: The message to print
    """
    _emit("print__token_debug", "print__token_debug", msg)


def print__bugs_debug(msg: str) -> None:
    """Print print__bugs_debug messages when bug debugging is enabled.

    Args:
        msg: The message to print
    """
    _emit("print__bugs_debug", "print__bugs_debug", msg)


def print__users_debug(msg: str) -> None:
    """Print print__users_debug messages when user debugging is enabled.

    Args:
        msg: The message to print
    """
    _emit("print__users_debug", "print__users_debug", msg)


def print__docstore_debug(msg: str) -> None:
    """Print print__docstore_debug messages when store debugging is enabled.

    Args:
        msg: The message to print
    """
    _emit("print__docstore_debug", "print__docstore_debug", msg)


def print__client_debug(msg: str) -> None:
    """Print print__client_debug messages when client debugging is enabled."""
    _emit("print__client_debug", "print__client_debug", msg)


def print__http_error_debug(msg: str) -> None:
    """Print print__http_error_debug messages when debug mode is enabled.

    Args:
        msg: The message to print
    """
    _emit("print__http_error_debug", "print__http_error_debug", msg)


def print__http_trace_debug(msg: str) -> None:
    """Print HTTP error trace messages when debug mode is enabled.

    Args:
        msg: The message to print
    """
    _emit("print__http_trace_debug", "print__http_trace_debug", f"🔍 {msg}")
