from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

import structlog
from fastapi import APIRouter, Body, HTTPException, Request, status

from quizdesk.api.deps import require_admin
from quizdesk.api.routes.quizzes_models import (
    MessageResponse,
    QuizCreateRequest,
    QuizMutationResponse,
    QuizSummaryResponse,
    QuizUpdateRequest,
    SubmissionResponse,
    quiz_as_response,
    submission_as_response,
    summary_as_response,
)
from quizdesk.db.session import SessionLocal
from quizdesk.quizzes.errors import QuestionIndexError, QuestionValidationError, QuizNotFoundError
from quizdesk.quizzes.service import QuizService

router = APIRouter(prefix="/api/quizzes", tags=["quizzes", "admin"])
logger = structlog.get_logger(__name__)


def _validation_http_error(exc: QuestionValidationError) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={"code": "E_INVALID_QUESTION_FORMAT", "message": exc.message},
    )


def _not_found_http_error() -> HTTPException:
    return HTTPException(status_code=404, detail={"code": "E_QUIZ_NOT_FOUND"})


@router.get("/admin", response_model=list[QuizSummaryResponse])
async def list_quizzes_for_admin(request: Request) -> list[QuizSummaryResponse]:
    require_admin(request)
    async with SessionLocal.begin() as session:
        summaries = await QuizService.list_quiz_summaries(session)
    return [summary_as_response(summary) for summary in summaries]


@router.post("", response_model=QuizMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_quiz(payload: QuizCreateRequest, request: Request) -> QuizMutationResponse:
    caller = require_admin(request)
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            quiz = await QuizService.create_quiz(
                session,
                title=payload.title,
                questions=payload.questions,
                creator_user_id=caller.user_id,
                now_utc=now_utc,
            )
    except QuestionValidationError as exc:
        raise _validation_http_error(exc) from exc
    return QuizMutationResponse(
        message="Quiz created",
        quiz=quiz_as_response(quiz, include_correct_answers=True),
    )


@router.put("/{quiz_id}", response_model=QuizMutationResponse)
async def update_quiz(
    quiz_id: UUID,
    payload: QuizUpdateRequest,
    request: Request,
) -> QuizMutationResponse:
    require_admin(request)
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            quiz = await QuizService.update_quiz(
                session,
                quiz_id=quiz_id,
                title=payload.title,
                questions=payload.questions,
                now_utc=now_utc,
            )
    except QuizNotFoundError as exc:
        raise _not_found_http_error() from exc
    except QuestionValidationError as exc:
        raise _validation_http_error(exc) from exc
    return QuizMutationResponse(
        message="Quiz updated",
        quiz=quiz_as_response(quiz, include_correct_answers=True),
    )


@router.delete("/{quiz_id}", response_model=MessageResponse)
async def delete_quiz(quiz_id: UUID, request: Request) -> MessageResponse:
    caller = require_admin(request)
    try:
        async with SessionLocal.begin() as session:
            await QuizService.delete_quiz(session, quiz_id=quiz_id)
    except QuizNotFoundError as exc:
        raise _not_found_http_error() from exc
    logger.info("admin_quiz_deleted", quiz_id=str(quiz_id), admin_user_id=caller.user_id)
    return MessageResponse(message="Quiz deleted")


@router.post("/{quiz_id}/questions", response_model=QuizMutationResponse)
async def add_question(
    quiz_id: UUID,
    request: Request,
    payload: Any = Body(...),
) -> QuizMutationResponse:
    require_admin(request)
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            quiz = await QuizService.add_question(
                session,
                quiz_id=quiz_id,
                question=payload,
                now_utc=now_utc,
            )
    except QuestionValidationError as exc:
        raise _validation_http_error(exc) from exc
    except QuizNotFoundError as exc:
        raise _not_found_http_error() from exc
    return QuizMutationResponse(
        message="Question added",
        quiz=quiz_as_response(quiz, include_correct_answers=True),
    )


@router.delete("/{quiz_id}/questions/{index}", response_model=QuizMutationResponse)
async def delete_question(quiz_id: UUID, index: int, request: Request) -> QuizMutationResponse:
    require_admin(request)
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            quiz = await QuizService.delete_question(
                session,
                quiz_id=quiz_id,
                index=index,
                now_utc=now_utc,
            )
    except QuizNotFoundError as exc:
        raise _not_found_http_error() from exc
    except QuestionIndexError as exc:
        raise HTTPException(status_code=400, detail={"code": "E_INVALID_QUESTION_INDEX"}) from exc
    return QuizMutationResponse(
        message="Question deleted",
        quiz=quiz_as_response(quiz, include_correct_answers=True),
    )


@router.get("/{quiz_id}/answers", response_model=list[SubmissionResponse])
async def list_quiz_submissions(quiz_id: UUID, request: Request) -> list[SubmissionResponse]:
    require_admin(request)
    async with SessionLocal.begin() as session:
        submissions = await QuizService.list_submissions(session, quiz_id=quiz_id)
    return [submission_as_response(submission) for submission in submissions]
