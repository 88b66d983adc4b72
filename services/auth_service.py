import logging
from typing import Any, Dict, Optional

from fastapi.concurrency import run_in_threadpool

from models.common_models import AuthStatus, SessionInfo
from models.session_models import SessionData
from services.errors import AuthError, ValidationError
from services.salesforce_client import SalesforceConnector, SalesforceOAuth, run_adapter_call
from services.session_service import SessionContext

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid session ID or instance URL. Please check your credentials."


def begin_oauth(oauth: SalesforceOAuth) -> str:
    return oauth.authorization_url()


async def complete_oauth(connector: SalesforceConnector, ctx: SessionContext, code: Optional[str]) -> bool:
    """
    Finish the OAuth web-server flow. Returns False on any failure
    instead of raising, the caller only needs success/error for the redirect.
    """
    if not code:
        logger.error("OAuth callback called without an authorization code")
        return False

    try:
        token = await run_adapter_call(connector.oauth.exchange_code, code)
        adapter = connector.connect(token["instance_url"], token["access_token"])
        user_info = await run_adapter_call(adapter.identity)
    except Exception:
        logger.exception("OAuth error")
        return False

    await run_in_threadpool(
        ctx.save,
        SessionData(
            access_token=adapter.session_id,
            instance_url=adapter.instance_url,
            user_info=user_info,
            auth_method="oauth",
        ),
    )
    logger.info("OAuth login for %s", user_info.get("preferred_username") or user_info.get("user_id"))
    return True


async def authenticate_with_session_token(
    connector: SalesforceConnector,
    ctx: SessionContext,
    session_id: Optional[str],
    instance_url: Optional[str],
) -> Dict[str, Any]:
    session_id = (session_id or "").strip()
    instance_url = (instance_url or "").strip().rstrip("/")
    if not session_id or not instance_url:
        raise ValidationError("Session ID and Instance URL are required")

    try:
        adapter = connector.connect(instance_url, session_id)
        user_info = await run_adapter_call(adapter.identity)
    except Exception as e:
        # Only the log gets the real reason
        logger.error("Session authentication error: %s", e)
        raise AuthError(INVALID_CREDENTIALS)

    await run_in_threadpool(
        ctx.save,
        SessionData(
            access_token=session_id,
            instance_url=instance_url,
            user_info=user_info,
            auth_method="session",
        ),
    )
    return user_info


def auth_status(ctx: SessionContext) -> AuthStatus:
    try:
        session = ctx.load()
    except Exception:
        logger.exception("Could not read session state")
        session = None

    if session is None:
        return AuthStatus(authenticated=False)
    return AuthStatus(authenticated=True, userInfo=session.user_info, authMethod=session.auth_method)


def logout(ctx: SessionContext) -> None:
    ctx.destroy()


def session_info(session: SessionData) -> SessionInfo:
    return SessionInfo(
        sessionId=session.access_token,
        instanceUrl=session.instance_url,
        authMethod=session.auth_method,
    )
