from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..core.constants import CODE_PAD_WIDTH
from ..core.enums import EntityKind


@dataclass(frozen=True)
class GlobalScope:
    """Codes shared across all tenants (company codes)."""

    entity_kind: EntityKind


@dataclass(frozen=True)
class TenantScope:
    """Codes local to one tenant and entity kind."""

    tenant_id: int
    entity_kind: EntityKind


SequenceScope = Union[GlobalScope, TenantScope]


def format_code(prefix: str, value: int, width: int = CODE_PAD_WIDTH) -> str:
    """``format_code("EMP", 7) == "EMP007"``; values wider than ``width`` are kept whole."""
    return f"{prefix}{value:0{width}d}"
