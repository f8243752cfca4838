from __future__ import annotations

import logging
from typing import Optional

from ..core.constants import DEFAULT_SEQUENCE_MAX_RETRIES
from ..core.enums import EntityKind
from ..core.exceptions import AllocationContentionError
from .model import GlobalScope, SequenceScope, TenantScope, format_code
from .repository import SequenceRepository

logger = logging.getLogger(__name__)


class SequenceService:
    """Hands out codes like EMP001, PRO002, LOC003, COM004.

    Each attempt is a full, independent increment; a failed attempt has
    committed nothing, so retrying it cannot skip or repeat a number.
    """

    def __init__(self, sequences: SequenceRepository, *, max_retries: int = DEFAULT_SEQUENCE_MAX_RETRIES):
        self._sequences = sequences
        self._max_retries = max(0, int(max_retries))

    def next_code(self, scope: SequenceScope, prefix: Optional[str] = None) -> str:
        prefix = prefix or scope.entity_kind.default_prefix
        attempts = self._max_retries + 1
        attempt = 0
        while True:
            attempt += 1
            try:
                value = self._sequences.increment(scope, prefix)
            except AllocationContentionError:
                if attempt >= attempts:
                    logger.error("Code allocation for %s failed after %d attempts", scope, attempts)
                    raise
                logger.warning("Code allocation for %s contended (attempt %d/%d), retrying", scope, attempt, attempts)
                continue
            code = format_code(prefix, value)
            logger.info("Allocated code %s for %s", code, scope)
            return code

    def next_company_code(self) -> str:
        return self.next_code(GlobalScope(EntityKind.COMPANY))

    def next_employee_code(self, company_id: int) -> str:
        return self.next_code(TenantScope(int(company_id), EntityKind.EMPLOYEE))

    def next_project_code(self, company_id: int) -> str:
        return self.next_code(TenantScope(int(company_id), EntityKind.PROJECT))

    def next_workplace_code(self, company_id: int) -> str:
        return self.next_code(TenantScope(int(company_id), EntityKind.WORKPLACE))
