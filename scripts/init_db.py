"""Bring the local campaign store up to date and summarize its contents."""

from __future__ import annotations

import sys
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import func, inspect, select
from sqlalchemy.orm import Session

from suenohincha.db.engine import make_engine
from suenohincha.models import Base

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def alembic_config() -> Config:
    cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return cfg


def upgrade_db(target_revision: str = "head") -> None:
    """Apply Alembic migrations up to ``target_revision``."""
    command.upgrade(alembic_config(), target_revision)


def summarize(engine) -> dict[str, int]:
    """Row count per campaign table present in the database."""
    present = set(inspect(engine).get_table_names())
    counts: dict[str, int] = {}
    with Session(engine) as session:
        for table in Base.metadata.sorted_tables:
            if table.name not in present:
                continue
            counts[table.name] = session.scalar(select(func.count()).select_from(table)) or 0
    return counts


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    upgrade_db(args[0] if args else "head")
    engine = make_engine()
    for name, count in summarize(engine).items():
        print(f"{name:<18} {count:>6}")


if __name__ == "__main__":
    main()
