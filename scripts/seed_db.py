from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from config import get_settings_module

from school_attendance.container import build_container
from school_attendance.database.bootstrap import apply_schema
from school_attendance.database.seed import seed_defaults


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    container = build_container(db_config=db_config)
    apply_schema(container.conn)
    seed_defaults(container)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
