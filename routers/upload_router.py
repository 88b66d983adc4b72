import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from models.common_models import UploadResult
from models.session_models import SessionData
from services.errors import ValidationError
from services.file_upload_service import get_upload_dir, save_uploaded_file, validate_csv_upload
from services.salesforce_client import SalesforceConnector, get_connector
from services.session_service import require_session
from services.upload_service import process_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["upload"])

@router.post("/upload", response_model=UploadResult)
async def upload_csv(
    session: SessionData = Depends(require_session),
    csvFile: Optional[UploadFile] = File(None),
    objectName: Optional[str] = Form(None),
    operation: Optional[str] = Form(None),
    externalIdField: Optional[str] = Form(None),
    connector: SalesforceConnector = Depends(get_connector),
    upload_dir: str = Depends(get_upload_dir),
):
    file = validate_csv_upload(csvFile)
    object_name = (objectName or "").strip()
    if not object_name:
        raise ValidationError("Object name is required")

    adapter = connector.connect(session.instance_url, session.access_token)
    file_path = save_uploaded_file(file, upload_dir)

    try:
        return await process_upload(
            adapter,
            file_path,
            object_name,
            (operation or "").strip(),
            (externalIdField or "").strip() or None,
        )
    except ValidationError:
        raise
    except Exception as e:
        # Reported verbatim to the client
        logger.exception("Upload error")
        return JSONResponse(status_code=500, content={"error": str(e)})
