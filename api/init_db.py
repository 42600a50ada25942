"""
Create the MongoDB indexes the product catalog relies on.

Usage:  python -m api.init_db
"""

import asyncio
import logging
import sys

from api.config import LOG_LEVEL
from api.database import init_mongo_db

logger = logging.getLogger(__name__)


def main() -> int:
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    try:
        asyncio.run(init_mongo_db())
    except Exception as e:
        logger.error("❌ Database initialization failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
