from __future__ import annotations

import click
from flask import Flask, current_app

from . import bootstrap


def _target_label(db_config: dict) -> str:
    return (
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


def register_cli(app: Flask) -> None:
    """``flask init-db`` and ``flask seed-db`` against the app's DB_CONFIG."""

    @app.cli.command("init-db")
    def init_db() -> None:
        """Apply schema.sql."""
        db_config = dict(current_app.config["DB_CONFIG"])
        bootstrap.apply_schema(db_config)
        tables = bootstrap.list_tables(db_config)
        click.echo(f"OK: Applied schema.sql -> {_target_label(db_config)} (tables={len(tables)})")

    @app.cli.command("seed-db")
    def seed_db() -> None:
        """Create the demo accounts if missing."""
        db_config = dict(current_app.config["DB_CONFIG"])
        bootstrap.ensure_demo_users(db_config)
        click.echo(f"OK: Seeded demo accounts -> {_target_label(db_config)}")
