"""HTTP session utilities for conman.

Sessions are created per invocation and passed into the components that
need them; nothing holds a process-wide transport.
"""

import aiohttp

from conman.domain.types import GlobalConfig


def create_timeout(timeout_seconds: int) -> aiohttp.ClientTimeout:
    """Build the bounded timeout used for every external HTTP call."""
    return aiohttp.ClientTimeout(
        total=timeout_seconds * 6,
        sock_read=timeout_seconds * 3,
        sock_connect=timeout_seconds,
    )


def create_http_session(global_config: GlobalConfig) -> aiohttp.ClientSession:
    """Create configured HTTP session.

    Must be called from within a running event loop; the caller owns the
    session and closes it.

    Args:
        global_config: Global configuration dictionary

    Returns:
        Configured aiohttp.ClientSession

    """
    timeout = create_timeout(global_config["network"]["timeout_seconds"])
    connector = aiohttp.TCPConnector(limit=10)
    return aiohttp.ClientSession(timeout=timeout, connector=connector)
