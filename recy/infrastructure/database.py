"""
Relational record store: engine factory and table definitions.

Tables are declared with SQLAlchemy Core. Schema management belongs to
the deployment; `create_schema` only bootstraps local databases and tests.
"""

import logging

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

ID_LENGTH = 26

metadata = MetaData()

recycling_reports = Table(
    "recycling_reports",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column("submitted_by", String(64), nullable=False),
    Column("wallet_address", String(128)),
    Column("audited", Boolean, nullable=False, default=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

audits = Table(
    "audits",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column(
        "report_id",
        String(ID_LENGTH),
        ForeignKey("recycling_reports.id"),
        nullable=False,
    ),
    Column("audited", Boolean, nullable=False, default=False),
    Column("auditor_id", String(64), nullable=False),
    Column("comments", Text),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("auditor_id", "report_id", name="uq_audits_auditor_report"),
)

_IN_MEMORY_SQLITE = ("sqlite://", "sqlite:///:memory:")


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(dsn: str, **engine_kwargs) -> Engine:
    """Build a SQLAlchemy engine for the record store.

    SQLite engines get foreign key enforcement and, for in-memory
    databases, a single shared connection.

    Args:
        dsn: Database URL.
        **engine_kwargs: Extra `create_engine` arguments.
    """
    if dsn.startswith("sqlite"):
        engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
        if dsn in _IN_MEMORY_SQLITE:
            engine_kwargs.setdefault("poolclass", StaticPool)
    else:
        engine_kwargs.setdefault("pool_pre_ping", True)

    engine = create_engine(dsn, **engine_kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_schema(engine: Engine) -> None:
    """Create the record store tables if they are missing."""
    metadata.create_all(engine)
    logger.info("Record store schema ensured on %s", engine.url.render_as_string(hide_password=True))
