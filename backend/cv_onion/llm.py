from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, TypeVar

import google.generativeai as genai
from pydantic import BaseModel, ValidationError

from cv_onion.core import decode_data_uri
from cv_onion.exceptions import InvalidDataUriError, ModelBackendError
from cv_onion.prompts import Prompt
from cv_onion.settings import DEFAULT_MODEL_NAME, Settings

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class ModelBackend(Protocol):
    async def generate(self, prompt: Prompt, request: BaseModel) -> BaseModel:
        ...


def _strip_fences(text: str) -> str:
    t = (text or "").strip()
    if t.startswith("```"):
        t = t.replace("```json", "", 1).replace("```JSON", "", 1)
        t = t.strip("`").strip()
    return t


def parse_answer(text: str, output_model: type[T]) -> T:
    """Coerce a raw model answer into the prompt's declared output schema."""
    json_text = _strip_fences(text)
    if not json_text:
        raise ModelBackendError("Model returned an empty answer")
    try:
        return output_model.model_validate_json(json_text)
    except ValidationError as e:
        raise ModelBackendError(
            f"Model answer does not match {output_model.__name__}: {e.error_count()} validation error(s)"
        ) from e


class GeminiBackend:
    """
    Gemini model client. Built once per application from Settings and passed
    to the operations that need it.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model_name: str = DEFAULT_MODEL_NAME,
        temperature: float = 0.2,
    ):
        if not api_key:
            raise ModelBackendError("GOOGLE_API_KEY is not set")
        genai.configure(api_key=api_key)
        self.model_name = model_name
        self._model = genai.GenerativeModel(model_name)
        self._generation_config = genai.GenerationConfig(
            temperature=temperature,
            response_mime_type="application/json",
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiBackend":
        return cls(
            api_key=settings.google_api_key,
            model_name=settings.gemini_model_name,
            temperature=settings.gemini_temperature,
        )

    def _contents(self, prompt: Prompt, request: BaseModel) -> List[Any]:
        contents: List[Any] = []
        media = prompt.media(request)
        if media:
            try:
                mime_type, data = decode_data_uri(media)
            except InvalidDataUriError as e:
                raise ModelBackendError(str(e)) from e
            part: Dict[str, Any] = {"mime_type": mime_type, "data": data}
            contents.append(part)
        contents.append(prompt.render(request))
        return contents

    async def generate(self, prompt: Prompt, request: BaseModel) -> BaseModel:
        contents = self._contents(prompt, request)
        try:
            response = await self._model.generate_content_async(
                contents,
                generation_config=self._generation_config,
            )
            text = response.text
        except Exception as e:
            raise ModelBackendError(f"Gemini request failed: {e}") from e

        logger.debug("%s answered with %d chars", prompt.name, len(text or ""))
        return parse_answer(text, prompt.output_model)
