from typing import Any, Dict, List, Optional
from pydantic import BaseModel

class SessionAuthRequest(BaseModel):
    # Optional so that missing values are reported as a 400, not a schema error
    sessionId: Optional[str] = None
    instanceUrl: Optional[str] = None

class SessionAuthResponse(BaseModel):
    success: bool
    userInfo: Dict[str, Any]
    message: str

class AuthStatus(BaseModel):
    authenticated: bool
    userInfo: Optional[Dict[str, Any]] = None
    authMethod: Optional[str] = None

class SessionInfo(BaseModel):
    sessionId: str
    instanceUrl: str
    authMethod: str

class SObjectSummary(BaseModel):
    name: str
    label: str
    custom: bool

class FieldSummary(BaseModel):
    name: str
    label: str
    type: str
    required: bool
    picklistValues: List[Dict[str, Any]] = []

class RecordError(BaseModel):
    id: Optional[str] = None
    errors: List[Any] = []

class UploadResult(BaseModel):
    success: bool
    totalRecords: int
    successful: int
    failed: int
    errors: List[RecordError]
