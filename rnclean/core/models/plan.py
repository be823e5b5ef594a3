"""
Plan models — the ordered, non-executing preview of a run.

The executor consumes the very same CleanupPlan the preview renders,
so what is shown is what runs.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from rnclean.core.models.operation import Operation


class PlanEntry(BaseModel):
    """One step that would run, or a step that does not apply here."""

    description: str
    status: Literal["planned", "not_applicable"] = "planned"
    reason: str = ""
    operation: Operation | None = None

    @model_validator(mode="after")
    def _planned_needs_operation(self) -> PlanEntry:
        if self.status == "planned" and self.operation is None:
            raise ValueError(f"planned entry '{self.description}' has no operation")
        return self

    @property
    def planned(self) -> bool:
        return self.status == "planned"

    def to_dict(self) -> dict:
        d: dict = {"description": self.description, "status": self.status}
        if self.reason:
            d["reason"] = self.reason
        if self.operation is not None:
            d["invocation"] = self.operation.invocation
            d["cwd"] = self.operation.cwd
            d["destructive"] = self.operation.destructive
            if self.operation.fallback is not None:
                d["fallback"] = self.operation.fallback.invocation
        return d


class CleanupPlan(BaseModel):
    """Ordered plan entries for one run."""

    package_manager: str = ""
    project_root: str = "."
    entries: list[PlanEntry] = Field(default_factory=list)

    def add(self, operation: Operation) -> None:
        self.entries.append(
            PlanEntry(description=operation.description, operation=operation)
        )

    def not_applicable(self, description: str, reason: str) -> None:
        self.entries.append(
            PlanEntry(description=description, status="not_applicable", reason=reason)
        )

    @property
    def planned(self) -> list[PlanEntry]:
        return [e for e in self.entries if e.planned]

    @property
    def operations(self) -> list[Operation]:
        return [e.operation for e in self.entries if e.operation is not None]

    @property
    def descriptions(self) -> list[str]:
        """Descriptions of the entries that will actually execute, in order."""
        return [e.description for e in self.planned]

    def to_dict(self) -> dict:
        return {
            "package_manager": self.package_manager,
            "project_root": self.project_root,
            "total": len(self.entries),
            "planned": len(self.planned),
            "entries": [e.to_dict() for e in self.entries],
        }
