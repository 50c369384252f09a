from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base
from src.config import settings

engine = create_async_engine(str(settings.SQLALCHEMY_DATABASE_URI), echo=False, pool_pre_ping=True)

# Used by request handlers and by side-channel writers (usage records,
# score cache) that must not share the request's transaction.
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()

# Dependency
async def get_db():
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
