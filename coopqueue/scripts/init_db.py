"""
Create database tables. Run from project root:
  python -m coopqueue.scripts.init_db
"""
import logging
import sys

from coopqueue.core.database import engine, init_db

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    try:
        init_db(engine)
    except Exception as e:
        logger.exception("Creating tables failed: %s", e)
        return 1
    logger.info("Tables created on %s", engine.url.render_as_string(hide_password=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
