from __future__ import annotations

import logging
from typing import Awaitable, Callable, TypeVar

from cv_onion import flows
from cv_onion.core import (
    AnalyzeCvInput,
    AnalyzeCvOutput,
    AnalyzeJobDescriptionInput,
    AnalyzeJobDescriptionOutput,
    MatchCvToJobInput,
    MatchCvToJobOutput,
)
from cv_onion.exceptions import ActionError
from cv_onion.llm import ModelBackend

logger = logging.getLogger(__name__)

R = TypeVar("R")


async def _run(operation: str, call: Callable[[], Awaitable[R]]) -> R:
    try:
        return await call()
    except Exception as e:
        logger.exception("Failed to %s", operation)
        message = str(e)
        if message:
            raise ActionError(f"Failed to {operation}: {message}") from e
        raise ActionError(f"Failed to {operation} due to an unknown error.") from e


class Actions:
    """The three operations as entry points with user-facing error messages."""

    def __init__(self, backend: ModelBackend):
        self.backend = backend

    async def analyze_cv(self, request: AnalyzeCvInput) -> AnalyzeCvOutput:
        return await _run("analyze CV", lambda: flows.analyze_cv(request, self.backend))

    async def analyze_job_description(self, request: AnalyzeJobDescriptionInput) -> AnalyzeJobDescriptionOutput:
        return await _run(
            "analyze job description",
            lambda: flows.analyze_job_description(request, self.backend),
        )

    async def match_cv_to_job(self, request: MatchCvToJobInput) -> MatchCvToJobOutput:
        return await _run("match CV to job", lambda: flows.match_cv_to_job(request, self.backend))
