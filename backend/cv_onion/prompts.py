from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional, Type

from pydantic import BaseModel

from cv_onion.core import (
    AnalyzeCvInput,
    AnalyzeCvOutput,
    AnalyzeJobDescriptionInput,
    AnalyzeJobDescriptionOutput,
    MatchCvToJobInput,
    MatchCvToJobOutput,
)

_SCHEMA_INSTRUCTIONS = """
Respond ONLY with a valid JSON object matching this schema. Do not add keys. Do not return markdown.

Schema:
{schema}
"""


@dataclass(frozen=True)
class Prompt:
    """
    A fixed instruction template bound to a request and response schema.

    `template` uses str.format slots named after the request's fields.
    `media_field` names a request field holding a data URI; it is sent to the
    model as an inline part rather than substituted into the text.
    """

    name: str
    template: str
    input_model: Type[BaseModel]
    output_model: Type[BaseModel]
    media_field: Optional[str] = None

    def render(self, request: BaseModel) -> str:
        fields = request.model_dump(exclude={self.media_field} if self.media_field else None)
        text = self.template.format(**fields).strip()
        schema = json.dumps(self.output_model.model_json_schema(by_alias=True), indent=2)
        return text + "\n" + _SCHEMA_INSTRUCTIONS.format(schema=schema)

    def media(self, request: BaseModel) -> Optional[str]:
        if not self.media_field:
            return None
        return getattr(request, self.media_field)


ANALYZE_CV_PROMPT = Prompt(
    name="analyzeCvPrompt",
    input_model=AnalyzeCvInput,
    output_model=AnalyzeCvOutput,
    media_field="cv_data_uri",
    template="""
You are an expert resume analyzer. Analyze the provided CV to identify key skills, experience, and qualifications.

CV Content: the attached document.

Skills: List the key skills identified in the CV.

Experience: Summarize the relevant experience highlighted in the CV.

Qualifications: Extract the key qualifications mentioned in the CV.
""",
)

ANALYZE_JOB_DESCRIPTION_PROMPT = Prompt(
    name="analyzeJobDescriptionPrompt",
    input_model=AnalyzeJobDescriptionInput,
    output_model=AnalyzeJobDescriptionOutput,
    template="""
You are an expert recruiter. Analyze the provided job description to identify the required skills, experience, and qualifications.

Job Description: {job_description}

Required Skills: List the skills the role requires.

Required Experience: Summarize the experience the role requires.

Required Qualifications: Extract the qualifications the role requires.
""",
)

MATCH_CV_TO_JOB_PROMPT = Prompt(
    name="matchCvToJobPrompt",
    input_model=MatchCvToJobInput,
    output_model=MatchCvToJobOutput,
    template="""
You are an AI expert in CV analysis and job matching.

You will receive a job description and the content of a CV.
Your task is to analyze both and provide a matching score (0-100) indicating how well the CV aligns with the job requirements.
Additionally, highlight the CV content, showing the sections that match the job requirements by wrapping them in <mark></mark> tags. Finally, assign a color code based on the match score:
- Green: Score above 75%
- Orange: Score above 50% and up to 75%
- Red: Score of 50% or below

Job Description: {job_description}
CV Content: {cv_content}
""",
)
