"""Import Stock Sheet Use Case: reconcile from an uploaded spreadsheet."""

import asyncio
from pathlib import Path

from src.application.dto.responses import BulkUpdateStockResponse
from src.application.use_cases.mappers import bulk_result_to_response
from src.config import get_logger, get_settings
from src.core.entities import BulkUpdateResult
from src.core.exceptions import EmptyInputError, FileTooLargeError, UnsupportedFileTypeError
from src.core.services import BulkReconciliationEngine, normalize_final_quantity_rows

logger = get_logger(__name__)

IMPORT_NOTE = "Stock reconciliation (spreadsheet import)"


class ImportStockSheetUseCase:
    """
    Read a stock count spreadsheet and reconcile every row.

    Rows lacking a usable final quantity or item reference are reported in
    ``skipped`` with their sheet row number; the remaining rows go through the
    same reconciliation as the JSON endpoint.
    """

    def __init__(
        self,
        engine: BulkReconciliationEngine | None = None,
        reader_registry=None,
        max_upload_size: int | None = None,
        allowed_extensions: list[str] | None = None,
    ):
        self._engine = engine
        self._registry = reader_registry

        api_settings = get_settings().api
        self._max_upload_size = max_upload_size or api_settings.max_upload_size
        self._allowed_extensions = allowed_extensions or api_settings.allowed_import_extensions

    async def _get_engine(self) -> BulkReconciliationEngine:
        if self._engine is None:
            from src.application.services import get_bulk_reconciliation_engine

            self._engine = await get_bulk_reconciliation_engine()
        return self._engine

    @property
    def max_upload_size(self) -> int:
        return self._max_upload_size

    def _get_registry(self):
        if self._registry is None:
            from src.infrastructure.spreadsheets import get_spreadsheet_registry

            self._registry = get_spreadsheet_registry()
        return self._registry

    async def execute(
        self,
        content: bytes,
        filename: str,
        user_id: int | None = None,
        declared_size: int | None = None,
    ) -> BulkUpdateResult:
        """
        Execute the import.

        ``declared_size`` is the upload size reported by the client, when known;
        ``content`` may then be a truncated prefix of the file.

        Raises:
            UnsupportedFileTypeError: If the extension is not allowed.
            FileTooLargeError: If the file exceeds the upload limit.
            ParsingFailedError: If the file cannot be read.
            EmptyInputError: If no row is usable.
        """
        extension = Path(filename).suffix.lower()
        if extension not in self._allowed_extensions:
            raise UnsupportedFileTypeError(
                filename=filename,
                extension=extension or "(none)",
                allowed=self._allowed_extensions,
            )
        size = max(len(content), declared_size or 0)
        if size > self._max_upload_size:
            raise FileTooLargeError(filename, size, self._max_upload_size)

        logger.info("stock_import_started", filename=filename, size=size)

        reader = self._get_registry().get_reader(filename)
        # openpyxl and xlrd parse synchronously
        loop = asyncio.get_running_loop()
        sheet_rows = await loop.run_in_executor(None, reader.read_rows, content, filename)
        batch = normalize_final_quantity_rows(sheet_rows)

        for skipped in batch.skipped:
            logger.info(
                "stock_import_row_skipped",
                filename=filename,
                row_number=skipped.row_number,
                reason=skipped.reason,
            )

        if not batch.rows:
            raise EmptyInputError(source=filename, skipped=len(batch.skipped))

        engine = await self._get_engine()
        result = await engine.apply_bulk_final_quantities(
            batch.rows,
            notes=IMPORT_NOTE,
            created_by=user_id,
        )
        result.skipped = batch.skipped

        logger.info(
            "stock_import_complete",
            filename=filename,
            updated=result.updated_count,
            failed=len(result.errors),
            skipped=len(result.skipped),
        )
        return result

    def to_response(self, result: BulkUpdateResult) -> BulkUpdateStockResponse:
        """Convert result to API response."""
        return bulk_result_to_response(result)
