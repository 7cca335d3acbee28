"""Gemini-backed screenplay producer -- analyze, check a title, refine."""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from .client import GeminiClient
from .config import get_config
from .errors import MalformedResponse, ServiceFailure
from .models.document import Document, document_schema
from .models.knowledge import TitleCheck
from .prompts.screenplay import ANALYZE_TEXT, CHECK_TITLE, REFINE, SCREENPLAY_SYSTEM

logger = logging.getLogger(__name__)


def _title_check_schema() -> dict:
    schema = document_schema()
    defs = schema.pop("$defs", {})
    defs["Document"] = schema
    return {
        "type": "object",
        "properties": {
            "known": {"type": "boolean"},
            "analysis": {"$ref": "#/$defs/Document"},
        },
        "required": ["known"],
        "$defs": defs,
    }


class ScreenplayService:
    """Content-generation collaborator. Each call is one request, never retried."""

    def __init__(self, language: str | None = None) -> None:
        self.language = language

    def _system(self) -> str:
        return SCREENPLAY_SYSTEM.format(language=self.language or get_config().output_language)

    async def _request(self, operation: str, contents: str, schema: dict) -> str:
        try:
            raw = await GeminiClient.generate(
                contents,
                system_instruction=self._system(),
                response_schema=schema,
            )
        except Exception as exc:
            logger.warning("%s request failed: %s", operation, exc)
            raise ServiceFailure(f"{operation} failed: {exc}") from exc
        if not raw or not raw.strip():
            raise ServiceFailure(f"{operation}: empty response from Gemini")
        return raw

    async def analyze_text(self, text: str) -> Document:
        """Screenplay for the extracted text of a book (capped to max_source_chars)."""
        capped = text[: get_config().max_source_chars]
        raw = await self._request("analyze", ANALYZE_TEXT.format(text=capped), document_schema())
        return parse_document(raw)

    async def check_title(self, title: str) -> TitleCheck:
        """Ask whether the producer knows *title*; known=False is a normal outcome."""
        raw = await self._request("check_title", CHECK_TITLE.format(title=title), _title_check_schema())
        try:
            return TitleCheck.model_validate_json(raw)
        except ValidationError as exc:
            raise MalformedResponse(f"check_title: {_summarize(exc)}") from exc

    async def refine(self, document: Document, instruction: str) -> Document:
        """Full replacement screenplay for *document* after *instruction*."""
        contents = REFINE.format(
            document_json=json.dumps(document.to_wire(), ensure_ascii=False),
            instruction=instruction,
        )
        raw = await self._request("refine", contents, document_schema())
        return parse_document(raw)


def _summarize(exc: ValidationError) -> str:
    first = exc.errors()[0] if exc.errors() else {}
    where = ".".join(str(p) for p in first.get("loc", ()))
    return f"{exc.error_count()} schema error(s), first at '{where}': {first.get('msg', '')}"


def parse_document(raw: str) -> Document:
    """Parse a producer payload into a Document.

    Raises:
        MalformedResponse: Not JSON, or not the document shape.
    """
    try:
        return Document.model_validate_json(raw)
    except ValidationError as exc:
        raise MalformedResponse(f"Unusable screenplay: {_summarize(exc)}") from exc
