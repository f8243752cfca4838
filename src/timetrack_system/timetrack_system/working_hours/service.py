from __future__ import annotations

import logging
from typing import Mapping

from ..common.validators import parse_clock_time
from ..core.exceptions import ValidationError
from .model import FIELD_NAMES, BoundaryConfig
from .repository import WorkingHoursRepository

logger = logging.getLogger(__name__)


class WorkingHoursService:
    def __init__(self, working_hours: WorkingHoursRepository):
        self._working_hours = working_hours

    def get_config(self, company_id: int) -> BoundaryConfig:
        """Tenant boundaries, or the documented defaults when none are stored."""
        config = self._working_hours.get_for_company(int(company_id))
        if config is None:
            logger.debug("No working hours for company %s, using defaults", company_id)
            return BoundaryConfig.default()
        return config

    def provision_default(self, company_id: int) -> BoundaryConfig:
        config = BoundaryConfig.default()
        self._working_hours.upsert(int(company_id), config)
        return config

    def update_config(self, company_id: int, values: Mapping[str, str]) -> BoundaryConfig:
        missing = [name for name in FIELD_NAMES if name not in values]
        if missing:
            raise ValidationError(f"Missing working hour fields: {', '.join(missing)}")

        config = BoundaryConfig(**{name: parse_clock_time(values[name], name) for name in FIELD_NAMES})
        self._working_hours.upsert(int(company_id), config)
        logger.info("Updated working hours for company %s: %s", company_id, config.to_dict())
        return config
