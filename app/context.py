"""Application context: the process-wide resources handed to request handlers."""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.config import Settings
from app.database import create_engine, create_session_factory
from app.services.email_service import EmailService
from app.services.notification_service import BookingNotifier, EmailSender

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Resources acquired at startup and released on shutdown."""

    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    email_service: EmailSender
    notifier: BookingNotifier

    @classmethod
    def create(
        cls,
        settings: Settings,
        database_url: str | None = None,
        email_service: EmailSender | None = None,
    ) -> "AppContext":
        engine = create_engine(settings, database_url)
        email_service = email_service or EmailService(settings)
        return cls(
            settings=settings,
            engine=engine,
            session_factory=create_session_factory(engine),
            email_service=email_service,
            notifier=BookingNotifier(email_service),
        )

    async def close(self) -> None:
        """Flush pending notifications, then release connections."""
        await self.notifier.drain()
        if isinstance(self.email_service, EmailService):
            await self.email_service.close()
        await self.engine.dispose()
        logger.info("Application context closed")
