from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from cv_onion.actions import Actions
from cv_onion.core import (
    ALLOWED_MIME_TYPES,
    MAX_FILE_BYTES,
    MAX_FILE_MB,
    MIN_JOB_DESCRIPTION_CHARS,
    AnalyzeCvInput,
    AnalyzeCvOutput,
    AnalyzeJobDescriptionInput,
    AnalyzeJobDescriptionOutput,
    MatchCvToJobInput,
    MatchCvToJobOutput,
    encode_data_uri,
)
from cv_onion.exceptions import TextExtractionError
from cv_onion.services.parse import extract_text

logger = logging.getLogger(__name__)

CV_TEXT_FALLBACK = (
    "Could not extract text content from this file type for matching. "
    "Please use a .txt file for optimal matching analysis or copy/paste CV text."
)

UNEXPECTED_ERROR = "An unexpected error occurred. Please try again."


class SessionState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Upload:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class MatchSession:
    """
    State behind the analysis form: one submission fans out to the three
    actions and either all three results are kept or a single error is.
    """

    def __init__(self, actions: Actions, extractor: Callable[[bytes, str], str] = extract_text):
        self.actions = actions
        self.extractor = extractor
        self.reset()

    def reset(self) -> None:
        self.state = SessionState.IDLE
        self.error: Optional[str] = None
        self.field_errors: Dict[str, str] = {}
        self.file_name: Optional[str] = None
        self.job_description: str = ""
        self.cv_analysis: Optional[AnalyzeCvOutput] = None
        self.job_analysis: Optional[AnalyzeJobDescriptionOutput] = None
        self.match_result: Optional[MatchCvToJobOutput] = None

    @property
    def has_results(self) -> bool:
        return any(r is not None for r in (self.cv_analysis, self.job_analysis, self.match_result))

    @staticmethod
    def validate(job_description: Optional[str], upload: Optional[Upload]) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        if len(job_description or "") < MIN_JOB_DESCRIPTION_CHARS:
            errors["job_description"] = f"Job description must be at least {MIN_JOB_DESCRIPTION_CHARS} characters."

        if upload is None or not upload.filename:
            errors["cv_file"] = "CV file is required."
        elif upload.size > MAX_FILE_BYTES:
            errors["cv_file"] = f"CV file size must be less than {MAX_FILE_MB}MB."
        elif upload.content_type not in ALLOWED_MIME_TYPES:
            errors["cv_file"] = "CV must be a PDF, DOCX, DOC, or TXT file."
        return errors

    def _cv_text(self, upload: Upload) -> str:
        try:
            return self.extractor(upload.data, upload.content_type)
        except TextExtractionError as e:
            logger.warning("Could not read %s as text: %s", upload.filename, e)
            return CV_TEXT_FALLBACK

    async def submit(self, job_description: Optional[str], upload: Optional[Upload]) -> SessionState:
        self.error = None
        self.cv_analysis = None
        self.job_analysis = None
        self.match_result = None
        self.job_description = job_description or ""
        self.file_name = upload.filename if upload and upload.filename else None

        self.field_errors = self.validate(job_description, upload)
        if self.field_errors:
            self.state = SessionState.IDLE
            return self.state

        self.state = SessionState.SUBMITTING
        try:
            cv_data_uri = encode_data_uri(upload.data, upload.content_type)
            cv_text = self._cv_text(upload)

            cv_analysis, job_analysis, match_result = await asyncio.gather(
                self.actions.analyze_cv(AnalyzeCvInput(cv_data_uri=cv_data_uri)),
                self.actions.analyze_job_description(
                    AnalyzeJobDescriptionInput(job_description=job_description)
                ),
                self.actions.match_cv_to_job(
                    MatchCvToJobInput(job_description=job_description, cv_content=cv_text)
                ),
            )
        except Exception as e:
            logger.error("Processing error: %s", e)
            self.error = str(e) or UNEXPECTED_ERROR
            self.state = SessionState.ERROR
            return self.state

        self.cv_analysis = cv_analysis
        self.job_analysis = job_analysis
        self.match_result = match_result
        self.state = SessionState.SUCCESS
        return self.state
