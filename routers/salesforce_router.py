from typing import List

from fastapi import APIRouter, Depends

from models.common_models import FieldSummary, SObjectSummary
from models.session_models import SessionData
from services.salesforce_client import SalesforceConnector, get_connector
from services.schema_service import list_fields, list_objects
from services.session_service import require_session

router = APIRouter(prefix="/api/salesforce", tags=["salesforce"])

@router.get("/objects", response_model=List[SObjectSummary])
async def get_objects(
    session: SessionData = Depends(require_session),
    connector: SalesforceConnector = Depends(get_connector),
):
    adapter = connector.connect(session.instance_url, session.access_token)
    return await list_objects(adapter)

@router.get("/objects/{object_name}/fields", response_model=List[FieldSummary])
async def get_fields(
    object_name: str,
    session: SessionData = Depends(require_session),
    connector: SalesforceConnector = Depends(get_connector),
):
    adapter = connector.connect(session.instance_url, session.access_token)
    return await list_fields(adapter, object_name)
