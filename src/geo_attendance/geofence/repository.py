from __future__ import annotations

from typing import Optional, Protocol

from .model import WorkplaceConfig


class WorkplaceConfigRepository(Protocol):
    """Storage for the single workplace geofence record."""

    def read(self) -> Optional[WorkplaceConfig]:
        """Return the stored config, or None if it was never written."""

        raise NotImplementedError

    def write(self, config: WorkplaceConfig) -> None:
        """Full replace (upsert). Raises PersistError on failure."""

        raise NotImplementedError
