"""
Privileged functions, served under the same path shape the hosted platform uses
(/functions/v1/<name>). Responses use {"error": ...} bodies and carry CORS
headers on every response, including the OPTIONS preflight.
"""

import json
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.roles import ErrorResponse, RoleUpdateRequest, RoleUpdateResult
from app.services.identity import IdentityProvider, get_identity_provider
from app.services.role_update import RoleUpdateError, bearer_token, update_user_role

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def _json(body: dict[str, Any], status_code: int) -> JSONResponse:
    return JSONResponse(content=body, status_code=status_code, headers=CORS_HEADERS)


async def _read_body(request: Request) -> RoleUpdateRequest:
    """Parse the JSON body; anything that is not a JSON object reads as an empty request."""
    raw = await request.body()
    if not raw:
        return RoleUpdateRequest()
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("update-user-role body is not valid JSON")
        return RoleUpdateRequest()
    if not isinstance(data, dict):
        return RoleUpdateRequest()
    return RoleUpdateRequest.model_validate(data)


@router.options("/update-user-role")
def update_user_role_preflight() -> Response:
    """CORS preflight: empty body, CORS headers."""
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post(
    "/update-user-role",
    response_model=RoleUpdateResult,
    responses={status: {"model": ErrorResponse} for status in (400, 401, 403, 404, 500)},
)
async def post_update_user_role(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    identity_provider: Annotated[IdentityProvider, Depends(get_identity_provider)],
) -> JSONResponse:
    """
    Change another user's role (admin only).

    Header: Authorization: Bearer <access token>.
    Body: {"targetUserId": "...", "newRole": "admin|plantManager|productionManager|accountant"}.
    Returns {success, message, previousRole, newRole}; previousRole is "none" when
    the user had no role before.
    """
    token = bearer_token(request.headers.get("Authorization"))
    body = await _read_body(request)
    try:
        result = await update_user_role(
            db,
            identity_provider,
            auth_token=token,
            target_user_id=body.target_user_id,
            new_role=body.new_role,
        )
    except RoleUpdateError as e:
        return _json(ErrorResponse(error=e.message).model_dump(), e.status_code)
    return _json(result.model_dump(by_alias=True), 200)
