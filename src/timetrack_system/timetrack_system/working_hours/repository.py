from __future__ import annotations

from typing import Optional, Protocol

from .model import BoundaryConfig


class WorkingHoursRepository(Protocol):
    def get_for_company(self, company_id: int) -> Optional[BoundaryConfig]:
        raise NotImplementedError

    def upsert(self, company_id: int, config: BoundaryConfig) -> None:
        raise NotImplementedError
