from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OperationStatus(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    PORT_OCCUPIED = "port_occupied"
    OUT_OF_RANGE = "out_of_range"
    TYPE_NOT_ALLOWED = "type_not_allowed"
    CYCLE = "cycle"


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a graph mutation.

    Rejected operations leave the graph untouched and carry a short
    human-readable ``reason``. ``subject`` names the node or edge the
    operation produced, when there is one.
    """

    status: OperationStatus
    reason: Optional[str] = None
    subject: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == OperationStatus.OK

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, subject: Optional[str] = None) -> "OperationResult":
        return cls(OperationStatus.OK, subject=subject)

    @classmethod
    def rejected(cls, status: OperationStatus, reason: str) -> "OperationResult":
        return cls(status, reason=reason)
