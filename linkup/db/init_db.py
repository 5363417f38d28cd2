import argparse
import logging

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect

from linkup.db.session import engine
from linkup.db.base import Base

logger = logging.getLogger(__name__)


def _alembic_config() -> Config:
    return Config("alembic.ini")


def init_db(revision: str = "head") -> None:
    """
    Initialize the database by running Alembic migrations.
    """
    command.upgrade(_alembic_config(), revision)
    logger.info(f"Database migrated to {revision}")


def downgrade_db(revision: str) -> None:
    command.downgrade(_alembic_config(), revision)
    logger.info(f"Database downgraded to {revision}")


def create_all_tables() -> bool:
    inspector = inspect(engine)
    existing_tables = inspector.get_table_names()

    Base.metadata.create_all(bind=engine)

    new_tables = set(inspect(engine).get_table_names()) - set(existing_tables)
    if new_tables:
        logger.info(f"Created new tables: {new_tables}")
    return True


def main():
    parser = argparse.ArgumentParser(description="Database migration commands")
    parser.add_argument("--downgrade", action="store_true", help="Downgrade instead of upgrade")
    parser.add_argument("revision", nargs="?", default="head", help="Revision to migrate to")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    if args.downgrade:
        downgrade_db(args.revision)
    else:
        init_db(args.revision)


if __name__ == "__main__":
    main()
