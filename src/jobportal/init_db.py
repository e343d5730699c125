"""Database initialization script."""

from jobportal.config import get_settings
from jobportal.database import Base, Database
from jobportal.logging_config import configure_logging


def init_database(database: Database | None = None) -> list[str]:
    """
    Initialize the database by creating all tables.

    It's safe to run multiple times as it won't recreate existing tables.

    Returns:
        Names of the tables defined on the models
    """
    database = database or Database(get_settings().database_url)
    database.connect()
    return list(Base.metadata.tables.keys())


if __name__ == "__main__":
    configure_logging(get_settings().log_level)
    print(f"Tables created: {', '.join(init_database())}")
