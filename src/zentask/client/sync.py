# src/zentask/client/sync.py

from __future__ import annotations

"""
Optimistic update with compensation.

attempt() runs one tentative mutation:
- apply() changes local state synchronously, before the first await
- remote_call() confirms the change with the server
- on success, commit(result) installs the server's answer
- on any failure, compensate(message) restores the pre-apply snapshot

There is no retry and no cancellation. If two attempts overlap, whichever
finishes last writes state last.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from ..core.errors import ApiError, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

NETWORK_ERROR_MESSAGE = "Network error"


def describe_failure(err: Exception, default: str) -> str:
    """User-facing message for a failed remote call."""
    if isinstance(err, ApiError):
        return str(err) or default
    if isinstance(err, TransportError):
        return NETWORK_ERROR_MESSAGE
    return default


async def attempt(
    apply: Callable[[], None],
    compensate: Callable[[str], None],
    remote_call: Callable[[], Awaitable[T]],
    *,
    commit: Callable[[T], None] | None = None,
    failure_message: str = "Request failed",
) -> bool:
    """Returns True when the server confirmed the change."""
    apply()

    try:
        result = await remote_call()
    except (ApiError, TransportError) as e:
        msg = describe_failure(e, failure_message)
        logger.info("Remote call failed (%s): %s", e.__class__.__name__, e)
        compensate(msg)
        return False
    except Exception as e:
        logger.exception("Remote call crashed")
        compensate(describe_failure(e, failure_message))
        return False

    if commit is not None:
        commit(result)
    return True
