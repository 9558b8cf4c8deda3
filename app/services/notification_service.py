"""
Best-effort notification dispatch
Notifications are side effects of business operations and must never fail them
"""

import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


async def dispatch_best_effort(
    label: str,
    send_func: Callable[..., Awaitable[Any]],
    *args,
    **kwargs,
) -> bool:
    """
    Fire a notification, log any failure and continue.

    Args:
        label: Notification name used in log lines
        send_func: Async dispatcher method to call
        *args, **kwargs: Passed through to send_func

    Returns:
        True when the dispatcher reported success, False on a False result or an error
    """
    try:
        logger.info(f"📧 Dispatching {label} notification")
        result = await send_func(*args, **kwargs)
    except Exception as e:
        logger.error(f"❌ Failed to send {label} notification: {e}")
        return False

    if result is False:
        logger.warning(f"⚠️ {label} notification was not delivered")
        return False

    logger.info(f"✅ {label} notification dispatched")
    return True
