from __future__ import annotations

from cv_onion.core import (
    AnalyzeCvInput,
    AnalyzeCvOutput,
    AnalyzeJobDescriptionInput,
    AnalyzeJobDescriptionOutput,
    MatchCvToJobInput,
    MatchCvToJobOutput,
)
from cv_onion.llm import ModelBackend
from cv_onion.prompts import (
    ANALYZE_CV_PROMPT,
    ANALYZE_JOB_DESCRIPTION_PROMPT,
    MATCH_CV_TO_JOB_PROMPT,
)


async def analyze_cv(request: AnalyzeCvInput, backend: ModelBackend) -> AnalyzeCvOutput:
    """Identify key skills, experience and qualifications in a CV document."""
    return await backend.generate(ANALYZE_CV_PROMPT, request)


async def analyze_job_description(
    request: AnalyzeJobDescriptionInput, backend: ModelBackend
) -> AnalyzeJobDescriptionOutput:
    """Identify the skills, experience and qualifications a job requires."""
    return await backend.generate(ANALYZE_JOB_DESCRIPTION_PROMPT, request)


async def match_cv_to_job(request: MatchCvToJobInput, backend: ModelBackend) -> MatchCvToJobOutput:
    """Score a CV against a job description and highlight the matching sections."""
    return await backend.generate(MATCH_CV_TO_JOB_PROMPT, request)
