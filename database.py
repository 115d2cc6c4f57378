from typing import AsyncGenerator, Annotated
from fastapi import Depends, Request
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.ext.asyncio.engine import create_async_engine
from sqlalchemy.ext.asyncio import async_sessionmaker, AsyncSession, AsyncEngine

from config import settings


# Base class for all databases to create with one command
class Base(DeclarativeBase):
    pass


class Database:
    """Engine and session factory for one store, handed to the app explicitly"""

    def __init__(self, url: str | None = None) -> None:
        url = url or settings.database_url
        if not url:
            raise ValueError("URL of database not found")

        self.url = url
        self.engine: AsyncEngine = create_async_engine(url=url)
        self.session: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine, expire_on_commit=False
        )

    def get_engine(self) -> AsyncEngine:
        return self.engine

    async def create_all_tables(self) -> None:
        # models must be imported so their tables are registered on Base
        from models import notesmodel, usermodel  # noqa: F401

        async with self.get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    db: Database = request.app.state.db
    async with db.session() as ses:
        yield ses


sessionDep = Annotated[AsyncSession, Depends(get_session)]
