from __future__ import annotations

import logging

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, PersistError
from ..users.service import SessionUser
from .model import WorkplaceConfig
from .repository import WorkplaceConfigRepository

logger = logging.getLogger(__name__)


class WorkplaceService:
    """Use case: read/replace the workplace geofence."""

    def __init__(self, configs: WorkplaceConfigRepository):
        self._configs = configs

    def get_config(self) -> WorkplaceConfig:
        """Never fails observably: falls back to the default workplace."""
        try:
            config = self._configs.read()
        except PersistError as e:
            logger.warning("[workplace] load failed, using default: %s", e)
            return WorkplaceConfig.default()
        if config is None:
            logger.info("[workplace] not configured yet, using default")
            return WorkplaceConfig.default()
        return config

    def update_config(self, actor: SessionUser, config: WorkplaceConfig) -> WorkplaceConfig:
        if actor.role != Role.ADMIN:
            raise AuthorizationError("Only administrators can change the workplace")

        checked = WorkplaceConfig.parse(config.to_dict())
        self._configs.write(checked)
        logger.info(
            "[workplace] updated by user_id=%s lat=%s lon=%s radius=%s",
            actor.id, checked.latitude, checked.longitude, checked.radius_meters,
        )
        return checked
