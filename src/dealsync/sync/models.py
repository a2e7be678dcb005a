"""Synchronization layer domain models.

- ModuleName: the five modules of the reference deployment
- ModuleStatus: per-module lifecycle (UNINITIALIZED -> READY)
- RelationshipType / FieldMapping / Relationship: the declared propagation graph
- SyncStatus: last observed propagation outcome of a relationship

Module keys are plain strings so hosts can declare any module set; the
ModuleName members are str-valued and interchangeable with them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from dealsync.sync.paths import FieldPath, format_path, parse_path

ModuleRecord = dict[str, Any]
Transform = Callable[[Any], Any]
UpdateListener = Callable[[ModuleRecord], None]


class ModuleName(StrEnum):
    """Modules of the reference deployment."""

    DEAL_SCREENING = "deal_screening"
    DUE_DILIGENCE = "due_diligence"
    PORTFOLIO = "portfolio"
    WORKFLOW_AUTOMATION = "workflow_automation"
    MARKET_INTELLIGENCE = "market_intelligence"


class ModuleStatus(StrEnum):
    """Lifecycle of a module record. There is no error state."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"


class RelationshipType(StrEnum):
    """Nature of a declared cross-module relationship."""

    DATA_FLOW = "data_flow"
    TRIGGER = "trigger"
    DEPENDENCY = "dependency"
    CORRELATION = "correlation"


class SyncStatus(StrEnum):
    """Outcome of the most recent propagation along a relationship."""

    SYNCED = "synced"
    PENDING = "pending"
    ERROR = "error"


@dataclass(frozen=True)
class FieldMapping:
    """Copy a value from a source path to a target path, optionally transformed.

    Paths are parsed at construction; a malformed declaration raises PathError.
    """

    source_field: str
    target_field: str
    transform: Transform | None = None
    source_path: FieldPath = field(init=False, repr=False, compare=False)
    target_path: FieldPath = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "source_path", parse_path(self.source_field))
        object.__setattr__(self, "target_path", parse_path(self.target_field))

    def describe(self) -> str:
        return f"{format_path(self.source_path)} -> {format_path(self.target_path)}"


@dataclass(frozen=True)
class Relationship:
    """Directed, weighted propagation rule between two modules.

    strength is reporting metadata only; it never gates propagation.
    """

    source_module: str
    target_module: str
    relationship_type: RelationshipType
    strength: float
    mappings: tuple[FieldMapping, ...]

    def __post_init__(self) -> None:
        if not 0.0 <= self.strength <= 1.0:
            raise ValueError(
                f"Relationship {self.key} strength must be within [0, 1], got {self.strength}"
            )
        object.__setattr__(self, "mappings", tuple(self.mappings))

    @property
    def key(self) -> str:
        return f"{self.source_module}-{self.target_module}"
