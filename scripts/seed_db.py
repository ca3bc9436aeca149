from __future__ import annotations

import importlib

from dotenv import load_dotenv

from geo_attendance.database.bootstrap import DEMO_USERS, ensure_demo_users
from geo_attendance.settings import get_settings_module


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    ensure_demo_users(dict(settings.DB_CONFIG))
    for email, _name, password, role in DEMO_USERS:
        print(f"OK: {role:<8} {email} / {password}")


if __name__ == "__main__":
    main()
