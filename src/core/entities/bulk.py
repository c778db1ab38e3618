"""Bulk stock update entities."""

from typing import Any

from pydantic import BaseModel, Field


class BulkUpdateRow(BaseModel):
    """
    One row of a bulk stock request.

    ``id`` and ``name`` are kept loose because rows come from spreadsheets and
    JSON payloads alike; resolution and coercion happen row by row so that a bad
    row becomes an error entry rather than rejecting the whole batch.
    ``quantity`` is the target final quantity in reconciliation mode and a signed
    delta in adjustment mode.
    """

    id: int | str | None = None
    name: str | None = None
    quantity: Any = None

    def reference(self) -> dict[str, Any]:
        """The row as echoed back in error entries."""
        return self.model_dump(exclude_none=True)


class ReconciledRow(BaseModel):
    """A row that was applied."""

    id: int
    name: str
    old_quantity: int
    new_quantity: int

    @property
    def delta(self) -> int:
        return self.new_quantity - self.old_quantity


class RowError(BaseModel):
    """A row that could not be applied."""

    item: BulkUpdateRow
    error: str
    error_code: str


class SkippedRow(BaseModel):
    """A spreadsheet row dropped during normalization."""

    row_number: int
    reason: str
    values: dict[str, Any] = Field(default_factory=dict)


class BulkUpdateResult(BaseModel):
    """Aggregated outcome of a bulk call, in input order."""

    results: list[ReconciledRow] = Field(default_factory=list)
    errors: list[RowError] = Field(default_factory=list)
    skipped: list[SkippedRow] = Field(default_factory=list)

    @property
    def processed_count(self) -> int:
        return len(self.results) + len(self.errors)

    @property
    def updated_count(self) -> int:
        return len(self.results)
