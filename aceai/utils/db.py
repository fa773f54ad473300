# aceai/utils/db.py
from sqlalchemy import select
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from aceai.models.records import (
    Base,
    QuestionRecord,
    QuestionTag,
    SchemaMeta,
    SyllabusRecord,
    SCHEMA_VERSION,
)
from aceai.utils.config import settings
from aceai.utils.logger import logger

# Create an async engine
engine = create_async_engine(
    settings.database_url,
    echo=False,  # Set to True to see SQL queries
)

# Create a session factory
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def _create_question_tables(conn: Connection):
    Base.metadata.create_all(conn, tables=[QuestionRecord.__table__, QuestionTag.__table__])


def _create_syllabus_table(conn: Connection):
    Base.metadata.create_all(conn, tables=[SyllabusRecord.__table__])


# Ordered upgrade steps; the key is the version reached after the step runs.
MIGRATIONS = {
    1: _create_question_tables,
    2: _create_syllabus_table,
}


def _migrate(conn: Connection) -> int:
    Base.metadata.create_all(conn, tables=[SchemaMeta.__table__])
    meta = conn.execute(select(SchemaMeta.id, SchemaMeta.version)).first()
    current = meta.version if meta else 0

    if current > SCHEMA_VERSION:
        raise RuntimeError(
            f"Database schema version {current} is newer than supported version {SCHEMA_VERSION}"
        )

    for version in range(current + 1, SCHEMA_VERSION + 1):
        logger.info(f"Applying knowledge store migration to schema version {version}")
        MIGRATIONS[version](conn)

    if meta is None:
        conn.execute(SchemaMeta.__table__.insert().values(id=1, version=SCHEMA_VERSION))
    elif current != SCHEMA_VERSION:
        conn.execute(
            SchemaMeta.__table__.update().where(SchemaMeta.id == meta.id).values(version=SCHEMA_VERSION)
        )
    return current


async def init_db(db_engine: AsyncEngine = engine) -> None:
    """Creates missing tables and upgrades the schema to SCHEMA_VERSION."""
    async with db_engine.begin() as conn:
        previous = await conn.run_sync(_migrate)
    if previous != SCHEMA_VERSION:
        logger.info(f"Knowledge store schema upgraded from version {previous} to {SCHEMA_VERSION}")
