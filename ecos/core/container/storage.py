"""Database providers: sync and async engines, sessions and the alembic configuration for ``schema``."""

from __future__ import annotations

import typing as t
from pathlib import Path

import alembic.config
import sqlalchemy
import sqlalchemy.event
import sqlalchemy.orm
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Factory, Object, Provider, Resource, Singleton
from sqlalchemy.engine.interfaces import DBAPIConnection
from sqlalchemy.engine.url import URL
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine

import ecos.lib.json as json

from ..config.secrets import PostgresqlSecrets
from ..config.storage import PersistentSettings
from ..di import NotReady
from ..provider import LoggingProvider

MIGRATIONS = Path("migrations")


def database_url(settings: PersistentSettings, secrets: PostgresqlSecrets) -> URL:
    pg = settings.postgresql
    return URL.create(
        pg.driver,
        username=secrets.username.get_secret_value() if secrets.username else None,
        password=secrets.password.get_secret_value() if secrets.password else None,
        host=str(pg.host) if pg.host else None,
        port=pg.port,
        database=pg.database,
    )


def provide_alembic_config(
    settings: PersistentSettings, secrets: PostgresqlSecrets, root: Path | NotReady
) -> alembic.config.Config:
    if isinstance(root, NotReady):
        raise RuntimeError("the container must be booted before migrations can be located")

    # alembic interpolates the ini values, a literal % must be doubled
    url = database_url(settings, secrets).render_as_string(hide_password=False).replace("%", "%%")

    cf = alembic.config.Config()
    cf.set_main_option("script_location", str(root / MIGRATIONS))
    cf.set_main_option("sqlalchemy.url", url)
    cf.set_main_option("file_template", "%%(rev)s_%%(slug)s")
    return cf


def provide_engine(
    settings: PersistentSettings, secrets: PostgresqlSecrets, debug: bool, logging: LoggingProvider
) -> sqlalchemy.Engine:
    url = database_url(settings, secrets)
    engine = sqlalchemy.create_engine(
        url,
        echo=settings.echo or debug,
        json_serializer=json.dumps,
        json_deserializer=json.loads,
    )
    sqlalchemy.event.listen(engine, "connect", use_utc)

    logging.get_logger().info(
        "database engine created",
        extra={"url": url.render_as_string(hide_password=True), "echo": engine.echo},
    )
    return engine


def provide_async_engine(
    settings: PersistentSettings, secrets: PostgresqlSecrets, debug: bool, logging: LoggingProvider
) -> AsyncEngine:
    url = database_url(settings, secrets)
    engine = create_async_engine(
        url,
        echo=settings.echo or debug,
        json_serializer=json.dumps,
        json_deserializer=json.loads,
    )
    sqlalchemy.event.listen(engine.sync_engine, "connect", use_utc)

    logging.get_logger().info(
        "async database engine created",
        extra={"url": url.render_as_string(hide_password=True), "echo": engine.echo},
    )
    return engine


def provide_session(engine: sqlalchemy.Engine) -> sqlalchemy.orm.Session:
    """A session that only opens a transaction on ``session.begin()``."""
    return sqlalchemy.orm.Session(engine, autobegin=False, autoflush=False, expire_on_commit=False)


def provide_async_session(engine: AsyncEngine) -> AsyncSession:
    return AsyncSession(engine, autobegin=False, autoflush=False, expire_on_commit=False)


def use_utc(dbapi_conn: DBAPIConnection, _: t.Any) -> None:
    """Have the server hand back TIMESTAMPTZ values in UTC."""
    # the async driver adapts its connection to this cursor interface too
    cursor = dbapi_conn.cursor()
    cursor.execute("SET TIMEZONE TO 'UTC'")
    cursor.close()


class PersistentContainer(DeclarativeContainer):
    config: Configuration = Configuration(strict=True)
    secrets: Configuration = Configuration()
    debug: Provider[bool] = Object()
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()

    settings: Provider[PersistentSettings] = Singleton(PersistentSettings.model_validate, config)
    postgresql_secrets: Provider[PostgresqlSecrets] = Singleton(PostgresqlSecrets.model_validate, secrets.postgresql)

    engine: Provider[sqlalchemy.Engine] = Singleton(
        provide_engine, settings=settings, secrets=postgresql_secrets, debug=debug, logging=logging
    )
    async_engine: Provider[AsyncEngine] = Singleton(
        provide_async_engine, settings=settings, secrets=postgresql_secrets, debug=debug, logging=logging
    )
    session: Provider[sqlalchemy.orm.Session] = Factory(provide_session, engine=engine)
    async_session: Provider[AsyncSession] = Factory(provide_async_session, engine=async_engine)
    alembic_config: Provider[alembic.config.Config] = Singleton(
        provide_alembic_config, settings=settings, secrets=postgresql_secrets, root=root
    )


class StorageContainer(DeclarativeContainer):
    config: Configuration = Configuration(strict=True)
    secrets: Configuration = Configuration()
    debug: Provider[bool] = Object()
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()

    persistent: Provider[PersistentContainer] = Container(
        PersistentContainer, config=config.persistent, secrets=secrets, debug=debug, logging=logging, root=root
    )
