"""Best-effort email delivery.

Email is sent after the credential change has been persisted. A failed send
is logged and reported as False; it never fails the operation that
triggered it.
"""

from collections.abc import Awaitable

from dsagrind.domain.protocols import LoggerProtocol


async def deliver_email(
    send: Awaitable[None],
    *,
    logger: LoggerProtocol,
    email_type: str,
    **context: str,
) -> bool:
    """Await ``send`` and log instead of raising on failure.

    Args:
        send: Pending EmailProtocol call.
        logger: Logger for the failure entry.
        email_type: Template name for the log entry.
        **context: Extra log fields (user_id, ...).

    Returns:
        True if the email was handed to the sender.
    """
    try:
        await send
    except Exception as e:
        logger.error("email_send_failed", error=e, email_type=email_type, **context)
        return False
    return True
