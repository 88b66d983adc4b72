from typing import Dict, Any, Literal
from pydantic import BaseModel

AuthMethod = Literal["oauth", "session"]

class SessionData(BaseModel):
    access_token: str
    instance_url: str
    user_info: Dict[str, Any] = {}
    auth_method: AuthMethod
