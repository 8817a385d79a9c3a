from __future__ import annotations

import base64
import binascii
import logging
import math
import re
from enum import Enum
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from cv_onion.exceptions import InvalidDataUriError

logger = logging.getLogger(__name__)

MAX_FILE_MB = 5
MAX_FILE_BYTES = MAX_FILE_MB * 1024 * 1024

MIN_JOB_DESCRIPTION_CHARS = 50

TEXT_PLAIN = "text/plain"
PDF = "application/pdf"
MSWORD = "application/msword"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

ALLOWED_MIME_TYPES = {TEXT_PLAIN, PDF, MSWORD, DOCX}

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?:;[\w-]+=[\w.-]+)*;base64,(?P<data>.*)$", re.DOTALL)


class ColorCode(str, Enum):
    GREEN = "green"
    ORANGE = "orange"
    RED = "red"


def color_for_score(score: int) -> ColorCode:
    if score > 75:
        return ColorCode.GREEN
    if score > 50:
        return ColorCode.ORANGE
    return ColorCode.RED


def encode_data_uri(data: bytes, mime_type: str) -> str:
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


def decode_data_uri(uri: str) -> Tuple[str, bytes]:
    """
    Split a 'data:<mimetype>;base64,<encoded_data>' URI into its media type
    and raw bytes.
    """
    m = _DATA_URI_RE.match((uri or "").strip())
    if not m:
        raise InvalidDataUriError("Expected format: 'data:<mimetype>;base64,<encoded_data>'.")
    try:
        data = base64.b64decode(m.group("data"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidDataUriError(f"Invalid base64 payload: {e}") from e
    return m.group("mime").lower(), data


class Schema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnalyzeCvInput(Schema):
    cv_data_uri: str = Field(
        description=(
            "The CV file as a data URI that must include a MIME type and use Base64 encoding. "
            "Expected format: 'data:<mimetype>;base64,<encoded_data>'."
        )
    )

    @field_validator("cv_data_uri")
    @classmethod
    def _check_data_uri(cls, v: str) -> str:
        mime_type, data = decode_data_uri(v)
        if mime_type not in ALLOWED_MIME_TYPES:
            raise InvalidDataUriError(f"Unsupported CV media type: {mime_type}")
        if len(data) > MAX_FILE_BYTES:
            raise InvalidDataUriError(f"CV file size must be less than {MAX_FILE_MB}MB.")
        return v


class AnalyzeCvOutput(Schema):
    skills: List[str] = Field(description="Key skills identified in the CV.")
    experience: str = Field(description="Summary of relevant experience in the CV.")
    qualifications: str = Field(description="Key qualifications listed in the CV.")


class AnalyzeJobDescriptionInput(Schema):
    job_description: str = Field(description="The job description to analyze.")


class AnalyzeJobDescriptionOutput(Schema):
    required_skills: List[str] = Field(description="Skills required by the job description.")
    required_experience: str = Field(description="Summary of the experience the job requires.")
    required_qualifications: str = Field(description="Qualifications the job requires.")


class MatchCvToJobInput(Schema):
    job_description: str = Field(description="The job description.")
    cv_content: str = Field(description="The content of the CV.")


class MatchCvToJobOutput(Schema):
    match_score: int = Field(
        ge=0,
        le=100,
        description="The matching score between the CV and the job description (0-100).",
    )
    highlighted_cv: str = Field(
        description="The CV content with highlighted sections based on the matching score."
    )
    color_code: ColorCode = Field(
        description=(
            "Color code indicating the match score: green for scores above 75%, "
            "orange for scores above 50%, and red for scores of 50% and below."
        )
    )

    @field_validator("match_score", mode="before")
    @classmethod
    def _round_score(cls, v):
        if isinstance(v, float):
            if not math.isfinite(v):
                raise ValueError("match score must be a finite number")
            return int(round(v))
        return v

    @model_validator(mode="after")
    def _derive_color(self) -> "MatchCvToJobOutput":
        expected = color_for_score(self.match_score)
        if self.color_code != expected:
            logger.warning(
                "Color code %s disagrees with score %d; using %s",
                self.color_code.value, self.match_score, expected.value,
            )
            self.color_code = expected
        return self
