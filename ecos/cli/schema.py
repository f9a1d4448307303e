from __future__ import annotations

import alembic.command
import alembic.config

import ecos.lib.cli as click
from ecos.core import di

AlembicConfig = alembic.config.Config


@click.group("schema")
def schema():
    """Manage the evaluation database schema."""


@schema.command()
@click.argument("revision", default="head")
@di.inject
def up(revision: str, alembic_conf: AlembicConfig = di.Provide["storage.persistent.alembic_config"]):
    alembic.command.upgrade(alembic_conf, revision)


@schema.command()
@click.argument("revision")
@di.inject
def down(revision: str, alembic_conf: AlembicConfig = di.Provide["storage.persistent.alembic_config"]):
    alembic.command.downgrade(alembic_conf, revision)


@schema.command()
@click.option("--verbose", "-v", is_flag=True, default=False)
@di.inject
def current(verbose: bool, alembic_conf: AlembicConfig = di.Provide["storage.persistent.alembic_config"]):
    alembic.command.current(alembic_conf, verbose=verbose)


@schema.command()
@click.option("--verbose", "-v", is_flag=True, default=False)
@di.inject
def history(verbose: bool, alembic_conf: AlembicConfig = di.Provide["storage.persistent.alembic_config"]):
    alembic.command.history(alembic_conf, verbose=verbose, indicate_current=True)


@schema.command()
@click.argument("message")
@di.inject
def generate(message: str, alembic_conf: AlembicConfig = di.Provide["storage.persistent.alembic_config"]):
    """Autogenerate a revision from the difference between tables and database."""
    alembic.command.revision(alembic_conf, message, autogenerate=True)
