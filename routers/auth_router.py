from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from models.common_models import AuthStatus, SessionAuthRequest, SessionAuthResponse, SessionInfo
from models.session_models import SessionData
from services import auth_service
from services.salesforce_client import SalesforceConnector, get_connector
from services.session_service import SessionContext, get_session_context, require_session

router = APIRouter(tags=["auth"])

@router.get("/auth/salesforce")
async def salesforce_login(connector: SalesforceConnector = Depends(get_connector)):
    return RedirectResponse(auth_service.begin_oauth(connector.oauth), status_code=302)

@router.get("/oauth/callback")
async def oauth_callback(
    code: Optional[str] = None,
    error: Optional[str] = None,
    connector: SalesforceConnector = Depends(get_connector),
    ctx: SessionContext = Depends(get_session_context),
):
    # Provider-side denial arrives as ?error=... without a code
    ok = error is None and await auth_service.complete_oauth(connector, ctx, code)
    return RedirectResponse(f"/?auth={'success' if ok else 'error'}", status_code=302)

@router.post("/api/auth/session", response_model=SessionAuthResponse)
async def session_login(
    req: Optional[SessionAuthRequest] = None,
    connector: SalesforceConnector = Depends(get_connector),
    ctx: SessionContext = Depends(get_session_context),
):
    req = req or SessionAuthRequest()
    user_info = await auth_service.authenticate_with_session_token(
        connector, ctx, req.sessionId, req.instanceUrl
    )
    return SessionAuthResponse(
        success=True,
        userInfo=user_info,
        message="Successfully authenticated with session ID",
    )

@router.get("/api/auth/status", response_model=AuthStatus, response_model_exclude_none=True)
def status(ctx: SessionContext = Depends(get_session_context)):
    return auth_service.auth_status(ctx)

@router.post("/api/auth/logout")
def logout(ctx: SessionContext = Depends(get_session_context)):
    auth_service.logout(ctx)
    return {"success": True}

@router.get("/api/auth/session-info", response_model=SessionInfo)
async def session_info(session: SessionData = Depends(require_session)):
    return auth_service.session_info(session)
