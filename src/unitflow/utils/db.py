"""Schema management for the on-device SQLite store."""

from pathlib import Path

import structlog
from protean.domain import Domain
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url

logger = structlog.get_logger(__name__)

SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for _, provider in domain.providers.items():
        if provider.conn_info["provider"] in SQL_PROVIDERS:
            yield provider


def _ensure_database_dir(database_uri: str) -> None:
    url = make_url(database_uri)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def _register_tables(domain: Domain, provider) -> None:
    # A repository's _dao registers its element's table with the provider metadata
    records = list(domain.registry.aggregates.values()) + list(domain.registry.projections.values())
    for record in records:
        if record.cls.meta_.provider == provider.name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain):
    """Create tables for the log, preferences and cart roster."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            database_uri = provider.conn_info["database_uri"]
            _ensure_database_dir(database_uri)
            _register_tables(domain, provider)
            provider._metadata.create_all(create_engine(database_uri))
            logger.info("Schema created", provider=provider.name, database_uri=database_uri)


def drop_db(domain: Domain):
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _register_tables(domain, provider)
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))
            logger.warning("Schema dropped", provider=provider.name)
