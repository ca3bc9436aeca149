from __future__ import annotations

from typing import Optional

import mysql.connector

from ..core.constants import WORKPLACE_SETTINGS_ID
from ..core.exceptions import PersistError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import WorkplaceConfig
from .repository import WorkplaceConfigRepository


class MySQLWorkplaceConfigRepository(WorkplaceConfigRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def read(self) -> Optional[WorkplaceConfig]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "SELECT latitude, longitude, radius_meters FROM settings WHERE id=%s",
                    (WORKPLACE_SETTINGS_ID,),
                )
                row = fetchone(cur)
        except mysql.connector.Error as e:
            raise PersistError(f"Failed to load settings: {e}", e) from e

        if not row:
            return None
        return WorkplaceConfig(
            latitude=float(row["latitude"]),
            longitude=float(row["longitude"]),
            radius_meters=float(row["radius_meters"]),
        )

    def write(self, config: WorkplaceConfig) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO settings(id, latitude, longitude, radius_meters)
                    VALUES(%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE
                        latitude=VALUES(latitude),
                        longitude=VALUES(longitude),
                        radius_meters=VALUES(radius_meters)
                    """,
                    (WORKPLACE_SETTINGS_ID, config.latitude, config.longitude, config.radius_meters),
                )
        except mysql.connector.Error as e:
            raise PersistError(f"Failed to update settings: {e}", e) from e
