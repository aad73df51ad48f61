"""
Application context built once by create_app and shared through app.state.
"""

from dataclasses import dataclass
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from room_rental.config import Settings
from room_rental.database import create_engine_from_settings, create_session_factory
from room_rental.utils.file_utils import FileValidator, LocalObjectStorage


@dataclass
class AppContext:
    """Process-wide collaborators handed to request dependencies."""
    
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker
    storage: LocalObjectStorage
    file_validator: FileValidator
    
    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        engine = create_engine_from_settings(settings)
        return cls(
            settings=settings,
            engine=engine,
            session_factory=create_session_factory(engine),
            storage=LocalObjectStorage.from_settings(settings),
            file_validator=FileValidator.from_settings(settings),
        )
    
    async def dispose(self) -> None:
        await self.engine.dispose()
