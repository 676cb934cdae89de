from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any
from uuid import UUID

import httpx
import structlog

from quizdesk.client.errors import TransportError, UnexpectedResponseError
from quizdesk.quizzes.errors import CooldownActiveError, QuizNotFoundError, SubmissionNotFoundError
from quizdesk.quizzes.types import AttemptStatusView, QuestionSpec, QuizView

logger = structlog.get_logger(__name__)

QUIZZES_PATH = "/api/quizzes"
DEFAULT_TIMEOUT_SECONDS = 10.0


def _detail(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    if not isinstance(body, dict):
        return {}
    detail = body.get("detail")
    return detail if isinstance(detail, dict) else {}


def _malformed(response: httpx.Response, exc: Exception) -> UnexpectedResponseError:
    logger.warning(
        "quiz_api_malformed_response",
        status_code=response.status_code,
        url=str(response.request.url),
        error=type(exc).__name__,
    )
    return UnexpectedResponseError(response.status_code, {"error": "malformed_body"})


def _question_from_payload(item: Mapping[str, Any]) -> QuestionSpec:
    # Redacted views omit correct answers.
    correct_answer = item.get("correct_answer")
    return QuestionSpec(
        question_text=str(item.get("question_text", "")),
        options=tuple(str(option) for option in item.get("options") or ()),
        correct_answer=int(correct_answer) if correct_answer is not None else -1,
    )


def _quiz_from_payload(payload: Mapping[str, Any]) -> QuizView:
    return QuizView(
        quiz_id=UUID(str(payload["id"])),
        title=str(payload.get("title", "")),
        questions=tuple(_question_from_payload(item) for item in payload.get("questions") or ()),
    )


class QuizApiClient:
    def __init__(
        self,
        *,
        base_url: str,
        headers: Mapping[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            headers=dict(headers or {}),
            timeout=timeout,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> QuizApiClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("quiz_api_transport_failed", method=method, url=url, error=type(exc).__name__)
            raise TransportError(str(exc)) from exc

    async def fetch_quiz(self, quiz_id: UUID) -> QuizView:
        response = await self._request("GET", f"{QUIZZES_PATH}/{quiz_id}")
        if response.status_code == 404:
            raise QuizNotFoundError
        if response.status_code != 200:
            raise UnexpectedResponseError(response.status_code, _detail(response))
        try:
            return _quiz_from_payload(response.json())
        except (ValueError, KeyError, TypeError) as exc:
            raise _malformed(response, exc) from exc

    async def submit(
        self,
        quiz_id: UUID,
        *,
        answers: Sequence[int | None],
        terminated: bool,
        restricted: bool,
    ) -> int:
        route = "submit" if restricted else "answer"
        response = await self._request(
            "POST",
            f"{QUIZZES_PATH}/{quiz_id}/{route}",
            json={"answers": list(answers), "terminated": terminated},
        )
        if response.status_code in (200, 201):
            try:
                return int(response.json()["score"])
            except (ValueError, KeyError, TypeError) as exc:
                raise _malformed(response, exc) from exc

        detail = _detail(response)
        if response.status_code == 403 and detail.get("code") == "E_COOLDOWN_ACTIVE":
            raise CooldownActiveError(int(detail.get("retry_after_hours") or 0))
        if response.status_code == 404:
            raise QuizNotFoundError
        raise UnexpectedResponseError(response.status_code, detail)

    async def last_submission(self, quiz_id: UUID) -> dict[str, Any]:
        response = await self._request("GET", f"{QUIZZES_PATH}/{quiz_id}/last-submission")
        if response.status_code == 404:
            raise SubmissionNotFoundError
        if response.status_code != 200:
            raise UnexpectedResponseError(response.status_code, _detail(response))
        try:
            return dict(response.json())
        except (ValueError, TypeError) as exc:
            raise _malformed(response, exc) from exc

    async def check_attempt(self, quiz_id: UUID) -> AttemptStatusView:
        response = await self._request("GET", f"{QUIZZES_PATH}/{quiz_id}/check-attempt")
        if response.status_code != 200:
            raise UnexpectedResponseError(response.status_code, _detail(response))
        try:
            body = response.json()
            return AttemptStatusView(
                attempted=bool(body["attempted"]),
                message=body.get("message"),
                retry_after_hours=body.get("retry_after_hours"),
            )
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise _malformed(response, exc) from exc
