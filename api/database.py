"""
MongoDB connection module.

Holds the single client and database handle used by the API and by the
initialization command.
"""

import asyncio
import logging

from pymongo import ASCENDING, AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from api.config import COLLECTION_NAME, DB_NAME, MONGO_URL, UNIQUE_FIELD

logger = logging.getLogger(__name__)


class MongoConnectionManager:
    """
    Owns one MongoDB client and the database handle derived from it.

    Nothing touches the network until initialize() or get_connection()
    is awaited.
    """

    def __init__(
        self,
        url: str | None = None,
        db_name: str = DB_NAME,
        collection_name: str = COLLECTION_NAME,
        client_factory=AsyncMongoClient,
    ):
        self.url = url or MONGO_URL
        self.db_name = db_name
        self.collection_name = collection_name
        self._client_factory = client_factory
        self._client = None
        self._db: AsyncDatabase | None = None
        self._lock: asyncio.Lock | None = None
        self._lock_loop = None

    @property
    def client(self):
        return self._client

    @property
    def database(self) -> AsyncDatabase | None:
        return self._db

    def _get_lock(self) -> asyncio.Lock:
        # asyncio.Lock binds to the loop that first waits on it; keep one per loop
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def _connect(self):
        client = self._client_factory(self.url)
        try:
            await client.aconnect()
        except Exception:
            await client.close()
            raise
        return client

    async def initialize(self) -> None:
        """
        Connect, ensure the unique index on the product name, then disconnect.

        The connection opened here is always closed before returning, so the
        manager is left without a client whether or not this succeeds.

        Raises:
            pymongo.errors.PyMongoError: connection or index creation failed
        """
        async with self._get_lock():
            await self._teardown()
            client = None
            try:
                client = self._client_factory(self.url)
                await client.aconnect()
                db = client[self.db_name]

                products = db[self.collection_name]
                await products.create_index([(UNIQUE_FIELD, ASCENDING)], unique=True)
                logger.info(
                    "✅ Database initialized and unique index created on '%s' field",
                    UNIQUE_FIELD,
                )
            except Exception:
                logger.exception("❌ Error initializing database %s", self.db_name)
                raise
            finally:
                if client is not None:
                    await client.close()

    async def get_connection(self) -> AsyncDatabase:
        """Return the shared database handle, connecting on first use."""
        if self._db is not None:
            return self._db

        async with self._get_lock():
            if self._db is None:
                if self._client is None:
                    self._client = await self._connect()
                self._db = self._client[self.db_name]
        return self._db

    async def ping(self) -> dict:
        """Run the ping command against the current connection."""
        db = await self.get_connection()
        return await db.command("ping")

    async def close(self) -> None:
        """Close the client if one is open."""
        async with self._get_lock():
            await self._teardown()

    async def _teardown(self) -> None:
        client = self._client
        self._client = None
        self._db = None
        if client is not None:
            await client.close()


default_manager = MongoConnectionManager()


async def init_mongo_db() -> None:
    """Ensure indexes on the default connection."""
    await default_manager.initialize()


async def get_mongo_db_connection() -> AsyncDatabase:
    """Get the MongoDB database instance."""
    return await default_manager.get_connection()


async def close_mongo_connection() -> None:
    await default_manager.close()
