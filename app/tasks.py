"""Celery background tasks."""

import asyncio
import logging

from celery import shared_task

from app.config import get_settings
from app.database import create_engine, create_session_factory, session_scope
from app.services import session_service

logger = logging.getLogger(__name__)


def run_async(coro):
    """Run async function in sync context."""
    return asyncio.run(coro)


@shared_task(bind=True, max_retries=3)
def purge_stale_sessions(self) -> dict:
    """Delete sessions past the retention window, revoked or not.

    Runs daily at 3 AM UTC.
    """
    try:
        purged = run_async(_purge_stale_sessions())
    except Exception as exc:
        logger.exception("Session purge failed")
        raise self.retry(exc=exc, countdown=300)
    return {"status": "success", "purged": purged}


async def _purge_stale_sessions() -> int:
    settings = get_settings()
    # Short-lived engine: each task run gets its own event loop
    engine = create_engine(settings)
    try:
        async with session_scope(create_session_factory(engine)) as db:
            return await session_service.purge_stale_sessions(
                db, retention_days=settings.session_retention_days
            )
    finally:
        await engine.dispose()
