import asyncpg
from marketscout.core.config import settings
from marketscout.core.logger import Logger

logger = Logger("Database")

class Database:
    def __init__(self):
        self.pool: asyncpg.Pool = None

    async def connect(self):
        if settings.DATABASE_URL:
            try:
                self.pool = await asyncpg.create_pool(settings.DATABASE_URL)
                logger.info("✅ Connected to PostgreSQL")
                await self.init_db()
            except Exception as e:
                self.pool = None
                logger.error("Failed to connect to PostgreSQL", e)
        else:
            logger.info("DATABASE_URL not set, signals are kept in memory")

    async def disconnect(self):
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("Closed PostgreSQL connection")

    async def init_db(self):
        """Initialize database tables if they don't exist."""
        if not self.pool:
            return

        async with self.pool.acquire() as conn:
            # Accepted multi-timeframe signals
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS signals (
                    id SERIAL PRIMARY KEY,
                    symbol TEXT NOT NULL,
                    score INTEGER NOT NULL,
                    criteria JSONB NOT NULL,
                    invalidation_price DOUBLE PRECISION NOT NULL,
                    timestamp TIMESTAMPTZ DEFAULT NOW(),
                    type TEXT NOT NULL
                );
            """)

            await conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_signals_time
                ON signals(timestamp DESC);
            """)

            logger.info("Database tables initialized")

db = Database()
