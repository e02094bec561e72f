import argparse
import time

from sqlalchemy import MetaData, inspect, text

from store_ratings.db.base import Base
from store_ratings.db.session import engine

# registers users, stores and ratings on Base.metadata
from store_ratings.db import models  # noqa: F401


def log(message: str) -> None:
    ts = time.strftime("%Y-%m-%d %H:%M:%S")
    print(f"[{ts}] {message}", flush=True)


def _drop_postgres(conn) -> list[str]:
    schema = conn.dialect.default_schema_name or "public"
    table_names = inspect(conn).get_table_names(schema=schema)
    for table_name in table_names:
        conn.execute(text(f'DROP TABLE IF EXISTS "{schema}"."{table_name}" CASCADE'))
    return table_names


def _drop_reflected(conn) -> list[str]:
    # sqlite has no DROP ... CASCADE; drop in dependency order instead
    metadata = MetaData()
    metadata.reflect(bind=conn)
    table_names = [table.name for table in metadata.sorted_tables]
    metadata.drop_all(bind=conn)
    return table_names


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Drop every table (including alembic_version) in the configured database."
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Do not ask for confirmation.",
    )
    parser.add_argument(
        "--recreate",
        action="store_true",
        help="Create the users, stores and ratings tables again afterwards.",
    )
    args = parser.parse_args()

    log(f"Target database: {engine.url.render_as_string(hide_password=True)}")
    if not args.yes:
        answer = input("Type 'drop' to delete all tables: ").strip()
        if answer.lower() != "drop":
            log("Aborted, nothing dropped.")
            return

    with engine.begin() as conn:
        if conn.dialect.name == "postgresql":
            dropped = _drop_postgres(conn)
        else:
            dropped = _drop_reflected(conn)

    if dropped:
        log(f"Dropped {len(dropped)} table(s): {', '.join(sorted(dropped))}")
    else:
        log("No tables found.")

    if args.recreate:
        Base.metadata.create_all(bind=engine)
        log("Recreated users, stores and ratings.")


if __name__ == "__main__":
    main()
