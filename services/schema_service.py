import logging
from typing import List

from models.common_models import FieldSummary, SObjectSummary
from services.errors import ServerError
from services.salesforce_client import SalesforceAdapter, run_adapter_call

logger = logging.getLogger(__name__)


def _label_key(item):
    # Case-insensitive like a locale compare; raw label breaks ties
    return (item.label.casefold(), item.label)


async def list_objects(adapter: SalesforceAdapter) -> List[SObjectSummary]:
    """Objects the user can both create and update, sorted by label."""
    try:
        described = await run_adapter_call(adapter.describe_global)
    except Exception:
        logger.exception("Error fetching objects")
        raise ServerError("Failed to fetch Salesforce objects")

    objects = [
        SObjectSummary(name=obj["name"], label=obj["label"], custom=bool(obj.get("custom")))
        for obj in described.get("sobjects", [])
        if obj.get("createable") and obj.get("updateable")
    ]
    return sorted(objects, key=_label_key)


async def list_fields(adapter: SalesforceAdapter, object_name: str) -> List[FieldSummary]:
    """Fields that can be written on create or update, sorted by label."""
    try:
        described = await run_adapter_call(adapter.describe, object_name)
    except Exception:
        logger.exception("Error fetching fields for %s", object_name)
        raise ServerError("Failed to fetch object fields")

    fields = [
        FieldSummary(
            name=field["name"],
            label=field["label"],
            type=field["type"],
            required=not field.get("nillable") and not field.get("defaultedOnCreate"),
            picklistValues=field.get("picklistValues") or [],
        )
        for field in described.get("fields", [])
        if field.get("createable") or field.get("updateable")
    ]
    return sorted(fields, key=_label_key)
