"""Auth API Routes"""

import logging
import httpx
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import Response

from src.api.error import ClientError
from src.app.services.auth_service import AuthService
from src.depends import get_auth_service
from src.libs.result import Error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(request: Request, auth_service: AuthService = Depends(get_auth_service)):
    """End the session with the auth provider and drop the cached workspace."""
    session = auth_service.get_session()
    if session is None:
        raise ClientError(
            Error(code="NO_ACTIVE_SESSION", message="You are not signed in"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    try:
        await auth_service.sign_out()
    except httpx.HTTPError as e:
        logger.error(f"Sign out failed for user {session.user_id}: {e}")
        raise ClientError(
            Error(code="SIGN_OUT_FAILED", message="Failed to sign out", reason=str(e)),
            status_code=status.HTTP_502_BAD_GATEWAY,
        )

    request.app.state.workspaces.discard(session.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
