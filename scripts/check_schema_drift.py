"""Exit non-zero when the configured database differs from the ORM models.

Two checks run against ``DB_URL``: the stamped Alembic revision must be the
script head, and autogenerate must find nothing to change.

Exit codes: 0 clean, 1 drift, 2 the check itself failed.
"""

from __future__ import annotations

import sys
from pathlib import Path

from alembic.autogenerate import api as ag_api
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy.exc import SQLAlchemyError

from suenohincha.db.engine import make_engine
from suenohincha.models import Base

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _describe(ops, depth: int = 0) -> list[str]:
    lines = []
    for op in ops:
        lines.append(f"{'  ' * depth}- {op}")
        lines.extend(_describe(getattr(op, "ops", None) or [], depth + 1))
    return lines


def script_head() -> str | None:
    cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return ScriptDirectory.from_config(cfg).get_current_head()


def main() -> int:
    engine = make_engine()
    target = engine.url.render_as_string(hide_password=True)
    problems: list[str] = []
    try:
        with engine.connect() as connection:
            context = MigrationContext.configure(
                connection=connection,
                opts={
                    "compare_type": True,
                    "render_as_batch": connection.dialect.name == "sqlite",
                },
            )
            head = script_head()
            current = context.get_current_revision()
            if current != head:
                problems.append(f"- revision is {current or 'unstamped'}, head is {head}")

            upgrade_ops = ag_api.produce_migrations(context, Base.metadata).upgrade_ops
            if upgrade_ops is not None and not upgrade_ops.is_empty():
                problems.extend(_describe(upgrade_ops.ops or []))
    except SQLAlchemyError as exc:
        print(f"{target}: schema check failed: {exc}", file=sys.stderr)
        return 2

    if problems:
        print(f"{target}: schema drift detected")
        print("\n".join(problems))
        return 1
    print(f"{target}: schema matches models at revision {head}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
