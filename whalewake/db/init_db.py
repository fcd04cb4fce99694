from whalewake.db.base import Base
from whalewake.core.logger import logger
import whalewake.models  # noqa: F401  registers the tables on Base.metadata


def init_db(engine):
    logger.info("DB INIT STARTED")
    Base.metadata.create_all(bind=engine)
    logger.info("DB TABLES CREATED")
