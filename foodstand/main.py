"""Entry point for the food stand Textual app."""

from __future__ import annotations

from foodstand.config import DB_PATH
from foodstand.logs import configure_logging
from foodstand.persistence import SqliteStore
from foodstand.pos_app import FoodStandApp


def main() -> None:
    """Run the Textual application against the configured sqlite file."""
    configure_logging()
    store = SqliteStore(DB_PATH)
    store.bootstrap_schema()
    FoodStandApp(store).run()


if __name__ == "__main__":
    main()
