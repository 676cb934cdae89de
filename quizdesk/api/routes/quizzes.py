from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

import structlog
from fastapi import APIRouter, HTTPException, Request, status

from quizdesk.api.deps import optional_caller, require_caller
from quizdesk.api.routes.quizzes_models import (
    AttemptStatusResponse,
    QuizResponse,
    SubmissionResponse,
    SubmitRequest,
    SubmitResponse,
    quiz_as_response,
    submission_as_response,
)
from quizdesk.core.config import get_settings
from quizdesk.db.session import SessionLocal
from quizdesk.quizzes.cooldown import cooldown_rejection_message
from quizdesk.quizzes.errors import CooldownActiveError, QuizNotFoundError, SubmissionNotFoundError
from quizdesk.quizzes.service import QuizService

router = APIRouter(prefix="/api/quizzes", tags=["quizzes"])
logger = structlog.get_logger(__name__)


def _include_correct_answers(request: Request) -> bool:
    if not get_settings().quiz_redact_correct_answers:
        return True
    caller = optional_caller(request)
    return caller is not None and caller.is_admin


@router.get("", response_model=list[QuizResponse], response_model_exclude_none=True)
async def list_quizzes(request: Request) -> list[QuizResponse]:
    include_answers = _include_correct_answers(request)
    async with SessionLocal.begin() as session:
        quizzes = await QuizService.list_quizzes(session)
    return [quiz_as_response(quiz, include_correct_answers=include_answers) for quiz in quizzes]


@router.get("/{quiz_id}", response_model=QuizResponse, response_model_exclude_none=True)
async def get_quiz(quiz_id: UUID, request: Request) -> QuizResponse:
    include_answers = _include_correct_answers(request)
    try:
        async with SessionLocal.begin() as session:
            quiz = await QuizService.get_quiz(session, quiz_id)
    except QuizNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_QUIZ_NOT_FOUND"}) from exc
    return quiz_as_response(quiz, include_correct_answers=include_answers)


async def _handle_submission(
    *,
    quiz_id: UUID,
    payload: SubmitRequest,
    request: Request,
    restricted: bool,
) -> SubmitResponse:
    caller = require_caller(request)
    if not restricted and get_settings().legacy_answer_route_admin_only and not caller.is_admin:
        logger.warning("quiz_legacy_answer_route_denied", user_id=caller.user_id, quiz_id=str(quiz_id))
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"})

    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            result = await QuizService.submit(
                session,
                quiz_id=quiz_id,
                user_id=caller.user_id,
                answers=payload.answers,
                terminated=payload.terminated,
                restricted=restricted,
                now_utc=now_utc,
            )
    except CooldownActiveError as exc:
        raise HTTPException(
            status_code=403,
            detail={
                "code": "E_COOLDOWN_ACTIVE",
                "message": cooldown_rejection_message(exc.retry_after_hours),
                "retry_after_hours": exc.retry_after_hours,
            },
        ) from exc
    except QuizNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_QUIZ_NOT_FOUND"}) from exc

    return SubmitResponse(message="Quiz submitted successfully", score=result.score)


@router.post(
    "/{quiz_id}/submit",
    response_model=SubmitResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_quiz(quiz_id: UUID, payload: SubmitRequest, request: Request) -> SubmitResponse:
    return await _handle_submission(
        quiz_id=quiz_id,
        payload=payload,
        request=request,
        restricted=True,
    )


@router.post(
    "/{quiz_id}/answer",
    response_model=SubmitResponse,
    status_code=status.HTTP_201_CREATED,
)
async def answer_quiz(quiz_id: UUID, payload: SubmitRequest, request: Request) -> SubmitResponse:
    # Cooldown bypass kept for administrative resubmission.
    return await _handle_submission(
        quiz_id=quiz_id,
        payload=payload,
        request=request,
        restricted=False,
    )


@router.get(
    "/{quiz_id}/last-submission",
    response_model=SubmissionResponse,
    response_model_exclude_none=True,
)
async def get_last_submission(quiz_id: UUID, request: Request) -> SubmissionResponse:
    caller = require_caller(request)
    try:
        async with SessionLocal.begin() as session:
            submission = await QuizService.get_last_submission(
                session,
                quiz_id=quiz_id,
                user_id=caller.user_id,
            )
    except SubmissionNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_SUBMISSION_NOT_FOUND"}) from exc
    return submission_as_response(submission)


@router.get(
    "/{quiz_id}/check-attempt",
    response_model=AttemptStatusResponse,
    response_model_exclude_none=True,
)
async def check_attempt(quiz_id: UUID, request: Request) -> AttemptStatusResponse:
    caller = require_caller(request)
    now_utc = datetime.now(timezone.utc)
    async with SessionLocal.begin() as session:
        attempt_status = await QuizService.check_attempt(
            session,
            quiz_id=quiz_id,
            user_id=caller.user_id,
            now_utc=now_utc,
        )
    return AttemptStatusResponse(
        attempted=attempt_status.attempted,
        message=attempt_status.message,
        retry_after_hours=attempt_status.retry_after_hours,
    )
