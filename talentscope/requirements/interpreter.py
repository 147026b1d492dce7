"""Requirement interpretation: free text or document text -> structured requirements.

Any response that fails parsing or schema validation raises
MalformedReasoningOutput. Nothing is guessed or coerced, and nothing is retried.
"""

import logging

from talentscope.core.errors import (
    MalformedReasoningOutput,
    ReasoningUnavailable,
    UnsupportedInput,
)
from talentscope.core.schemas import DocumentExtraction, RequirementSpec
from talentscope.llm.base import LLMProvider
from talentscope.llm.parsing import Malformed, validate_model
from talentscope.requirements.documents import DocumentReader

logger = logging.getLogger(__name__)

REQUIREMENT_FIELDS = ("skills", "experience_level", "technologies", "domain", "summary")
DOCUMENT_FIELDS = ("skills", "requirements", "company_info", "role_type", "summary")

REQUIREMENTS_SYSTEM_PROMPT = (
    "You are an expert technical recruiter and software engineer. Analyze the job "
    "requirements and extract structured information.\n\n"
    "Return ONLY a JSON object (no markdown, no explanation) with these fields:\n"
    "- skills (list[str]): required technical skills\n"
    '- experience_level (string): exactly one of "junior", "mid", "senior", "lead"\n'
    "- technologies (list[str]): specific technologies and frameworks mentioned\n"
    "- domain (string): industry or domain (e.g. fintech, healthcare, e-commerce)\n"
    "- summary (string): brief summary of what they are looking for\n\n"
    "Be specific and comprehensive in your analysis."
)

DOCUMENT_SYSTEM_PROMPT = (
    "You are an expert document parser for job descriptions and requirements. "
    "Extract structured information from the provided text.\n\n"
    "Return ONLY a JSON object (no markdown, no explanation) with these fields:\n"
    "- skills (list[str]): technical skills mentioned\n"
    "- requirements (list[str]): specific requirements or qualifications\n"
    "- company_info (string): brief company description, empty if not available\n"
    "- role_type (string): type of role (frontend, backend, fullstack, devops, ...)\n"
    "- summary (string): clean summary of the position and requirements\n\n"
    "Be thorough in extracting all relevant technical information."
)


class RequirementInterpreter:
    """Turns hiring text into RequirementSpec / DocumentExtraction via an LLM provider."""

    def __init__(
        self,
        provider: LLMProvider,
        *,
        document_reader: DocumentReader | None = None,
    ) -> None:
        self._provider = provider
        self._document_reader = document_reader or DocumentReader()

    async def interpret_requirements(self, text: str) -> RequirementSpec:
        """Interpret free-form requirement text.

        Raises:
            UnsupportedInput: If the text is blank.
            ReasoningUnavailable: If the provider call fails.
            MalformedReasoningOutput: If the response is unparsable or off-schema.
        """
        _require_text(text)
        raw = await self._ask(text, REQUIREMENTS_SYSTEM_PROMPT, max_tokens=1000, temperature=0.3)
        result = validate_model(raw, RequirementSpec, REQUIREMENT_FIELDS)
        if isinstance(result, Malformed):
            raise MalformedReasoningOutput(result.reason, result.raw)
        logger.info(
            "Interpreted requirements: level=%s, %d skills, domain=%r",
            result.experience_level, len(result.skills), result.domain,
        )
        return result

    async def extract_from_document(self, text: str) -> DocumentExtraction:
        """Extract structured job-description content from document text."""
        _require_text(text)
        raw = await self._ask(
            f"Extract information from this document:\n\n{text}",
            DOCUMENT_SYSTEM_PROMPT,
            max_tokens=1000,
            temperature=0.2,
        )
        result = validate_model(raw, DocumentExtraction, DOCUMENT_FIELDS)
        if isinstance(result, Malformed):
            raise MalformedReasoningOutput(result.reason, result.raw)
        return result

    async def interpret_document(self, data: bytes, media_type: str) -> DocumentExtraction:
        """Read an uploaded document and extract its structured content."""
        document = self._document_reader.read(data, media_type)
        logger.info(
            "Extracted %d characters (confidence %.2f) in %.1f ms",
            len(document.text), document.confidence, document.processing_time_ms,
        )
        return await self.extract_from_document(document.text)

    async def _ask(
        self,
        prompt: str,
        system: str,
        *,
        max_tokens: int,
        temperature: float,
    ) -> str:
        try:
            return await self._provider.complete(
                prompt, system=system, max_tokens=max_tokens, temperature=temperature,
            )
        except Exception as e:
            msg = f"{self._provider.provider_id} request failed: {e}"
            raise ReasoningUnavailable(msg) from e


def _require_text(text: str) -> None:
    if not text or not text.strip():
        msg = "requirement text must not be empty"
        raise UnsupportedInput(msg)
