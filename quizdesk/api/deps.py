from __future__ import annotations

import structlog
from fastapi import HTTPException, Request

from quizdesk.core.config import get_settings
from quizdesk.services.caller_auth import Caller, resolve_caller

logger = structlog.get_logger(__name__)


def optional_caller(request: Request) -> Caller | None:
    return resolve_caller(request, expected_token=get_settings().gateway_token)


def require_caller(request: Request) -> Caller:
    caller = optional_caller(request)
    if caller is None:
        logger.warning("quiz_api_auth_failed", reason="missing_or_invalid_identity", path=request.url.path)
        raise HTTPException(status_code=401, detail={"code": "E_UNAUTHORIZED"})
    return caller


def require_admin(request: Request) -> Caller:
    caller = require_caller(request)
    if not caller.is_admin:
        logger.warning("quiz_api_auth_failed", reason="admin_required", user_id=caller.user_id)
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"})
    return caller
