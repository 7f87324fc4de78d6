"""Change records produced by the detector and consumed by the updater."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field


class ChangeStatus(str, Enum):
    """How an instance file relates to its template counterpart."""

    ADDED = "Added"
    MODIFIED = "Modified"
    DELETED = "Deleted"

    def __str__(self) -> str:
        return self.value


class ChangeRecord(BaseModel):
    """One classified difference between an instance tree and its template tree."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: str = Field(..., min_length=1, description="POSIX path relative to the instance root.")
    status: ChangeStatus = Field(..., description="Classification of the change.")
    instance_file: Path = Field(..., description="Absolute path of the file inside the instance tree.")
    template_file: Path = Field(..., description="Absolute path of the '.tmpl' file inside the template tree.")
    diff: str | None = Field(None, description="Human readable payload, only filled in detailed mode.")


def count_by_status(records: Iterable[ChangeRecord]) -> dict[ChangeStatus, int]:
    counts = {status: 0 for status in ChangeStatus}
    for record in records:
        counts[record.status] += 1
    return counts


__all__ = ["ChangeRecord", "ChangeStatus", "count_by_status"]
