"""SQLAlchemy table definitions for the profile database.

One SQLite file per tool holds one row per profile; the profile fields live
in a JSON ``data`` column so new fields need no migration.
"""

from __future__ import annotations

from pathlib import Path

import sqlalchemy as sa
from sqlalchemy.orm import sessionmaker

TIMESTAMP = sa.DateTime(timezone=True)

METADATA = sa.MetaData()

# ---------------------------------------------------------------------------
# profiles: one row per named configuration
# ---------------------------------------------------------------------------

profiles = sa.Table(
    "profiles",
    METADATA,
    sa.Column("name", sa.Text(), primary_key=True),
    sa.Column("data", sa.JSON(), nullable=False),
    sa.Column("created_at", TIMESTAMP, nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    sa.Column("updated_at", TIMESTAMP, nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
)


# ---------------------------------------------------------------------------
# Engine / session helpers
# ---------------------------------------------------------------------------


def build_engine(*, db_path: str | Path | None = None, echo: bool = False) -> sa.Engine:
    """Create a SQLAlchemy engine for the profile database.

    Args:
        db_path: Override path for the SQLite file. Defaults to
            ``get_settings().store.path``.
        echo: When True, log all SQL statements.
    """
    if db_path is None:
        from pbpup.settings import get_settings

        db_path = get_settings().store.path

    resolved = Path(db_path)
    resolved.parent.mkdir(parents=True, exist_ok=True)
    url = f"sqlite:///{resolved.as_posix()}"
    return sa.create_engine(url, echo=echo, connect_args={"timeout": 30})


def build_session_factory(*, db_path: str | Path | None = None, echo: bool = False) -> sessionmaker:
    """Return a ``sessionmaker`` bound to a fresh engine."""
    engine = build_engine(db_path=db_path, echo=echo)
    return sessionmaker(bind=engine, expire_on_commit=False)
