import logging
from typing import Any, Dict, List, Optional

from fastapi.concurrency import run_in_threadpool

from models.common_models import RecordError, UploadResult
from services.csv_ingest_service import Record, parse_csv
from services.errors import ValidationError
from services.file_upload_service import remove_uploaded_file
from services.salesforce_client import BulkResult, SalesforceAdapter, run_adapter_call

logger = logging.getLogger(__name__)


def _read_and_parse(file_path: str) -> List[Record]:
    with open(file_path, "rb") as f:
        return parse_csv(f.read())


def summarize_results(result: BulkResult, total_records: int) -> UploadResult:
    """Aggregate per-record outcomes; a lone dict is treated as a batch of one."""
    results: List[Dict[str, Any]] = result if isinstance(result, list) else [result]
    failed = [r for r in results if not r.get("success")]

    return UploadResult(
        success=True,
        totalRecords=total_records,
        successful=len(results) - len(failed),
        failed=len(failed),
        errors=[RecordError(id=r.get("id"), errors=r.get("errors") or []) for r in failed],
    )


async def _dispatch(
    adapter: SalesforceAdapter,
    object_name: str,
    operation: Optional[str],
    records: List[Record],
    external_id_field: Optional[str],
) -> BulkResult:
    if operation == "insert":
        return await run_adapter_call(adapter.create, object_name, records)
    if operation == "update":
        return await run_adapter_call(adapter.update, object_name, records)
    if operation == "upsert":
        if not external_id_field:
            raise ValidationError("External ID field is required for upsert operation")
        return await run_adapter_call(adapter.upsert, object_name, records, external_id_field)
    raise ValidationError("Invalid operation")


async def process_upload(
    adapter: SalesforceAdapter,
    file_path: str,
    object_name: str,
    operation: Optional[str],
    external_id_field: Optional[str] = None,
) -> UploadResult:
    """
    Parse a staged CSV and push its records to Salesforce.

    The staged file is removed whatever the outcome.
    """
    try:
        records = await run_in_threadpool(_read_and_parse, file_path)
        logger.info("Parsed %d records for %s %s", len(records), operation, object_name)

        result = await _dispatch(adapter, object_name, operation, records, external_id_field)
        summary = summarize_results(result, len(records))
    finally:
        remove_uploaded_file(file_path)

    logger.info(
        "%s %s: %d succeeded, %d failed",
        operation, object_name, summary.successful, summary.failed,
    )
    return summary
