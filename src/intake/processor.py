# src/intake/processor.py — v1
"""Request processor: provider-backed analysis and recommendations.

Two completions per request. The replies are free text with numbered or
markdown headings; extract_section / extract_list_items pull the named parts
out of them. Missing sections come back empty rather than failing.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Sequence
from datetime import datetime, timezone

from reqintake.intake.models import (
    ProcessedRequest,
    RequestAnalysis,
    RequestInput,
    RequestRecommendations,
)
from reqintake.llm.base_client import BaseLLMClient
from reqintake.llm.models import Message
from reqintake.llm.retry import with_retry

logger = logging.getLogger(__name__)

ANALYSIS_SYSTEM = "You are an expert policy analyst reviewing government opinion requests."
RECOMMENDATION_SYSTEM = "You are an expert policy advisor reviewing government opinion requests."

ANALYSIS_SECTIONS = ("Summary", "Key trends", "Impact assessment", "Policy alignment")
RECOMMENDATION_SECTIONS = (
    "Strategic recommendations",
    "Operational recommendations",
    "Implementation timeline",
    "Potential risks",
)

# Leading decoration of a heading or list line: "#", "**", "1.", "2)", "-", "*".
_DECORATION = r"[\s#*\-]*(?:\d+[.)]\s*)?[\s*]*"
_BULLET_RE = re.compile(r"^\s*(?:[-*\u2022]|\d+[.)])\s*")
_MARKDOWN_HEADING_RE = re.compile(r"^\s*#{1,6}\s")


def _numbered(items: Sequence[str]) -> str:
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items, start=1))


def build_analysis_prompt(request: RequestInput) -> str:
    return (
        "Please analyze the following government request:\n\n"
        f"Title: {request.title}\n"
        f"Department: {request.department}\n"
        f"Type: {request.type}\n"
        f"Content: {request.content}\n\n"
        "Provide a comprehensive analysis including:\n"
        f"{_numbered(ANALYSIS_SECTIONS)}"
    )


def build_recommendation_prompt(analysis: RequestAnalysis) -> str:
    return (
        "Based on the following analysis of a government request:\n\n"
        f"{json.dumps(analysis.model_dump(), indent=2)}\n\n"
        "Please provide:\n"
        f"{_numbered(RECOMMENDATION_SECTIONS)}"
    )


def _heading_re(name: str) -> re.Pattern[str]:
    return re.compile(
        rf"^{_DECORATION}{re.escape(name)}\s*\**\s*:?\s*\**(?P<rest>.*)$",
        re.IGNORECASE,
    )


def extract_section(text: str, name: str, stop_at: Sequence[str] = ()) -> str:
    """Body of the section headed ``name``.

    The section ends at the next markdown heading, at a heading for any name
    in ``stop_at``, or at the end of the text. Text following the heading on
    the same line belongs to the section.
    """
    if not text:
        return ""
    heading = _heading_re(name)
    stops = [_heading_re(s) for s in stop_at if s.lower() != name.lower()]

    lines = text.splitlines()
    for index, line in enumerate(lines):
        match = heading.match(line)
        if match is None:
            continue
        collected = [match.group("rest")]
        for follower in lines[index + 1:]:
            if _MARKDOWN_HEADING_RE.match(follower) or any(s.match(follower) for s in stops):
                break
            collected.append(follower)
        return "\n".join(collected).strip()
    return ""


def extract_list_items(text: str, name: str, stop_at: Sequence[str] = ()) -> list[str]:
    """Non-empty lines of a section with bullets and numbering removed."""
    section = extract_section(text, name, stop_at)
    if not section:
        return []
    items = (_BULLET_RE.sub("", line).strip() for line in section.splitlines())
    return [item for item in items if item]


def parse_analysis(text: str) -> RequestAnalysis:
    return RequestAnalysis(
        summary=extract_section(text, "Summary", ANALYSIS_SECTIONS),
        trends=extract_list_items(text, "Key trends", ANALYSIS_SECTIONS),
        impact_assessment=extract_section(text, "Impact assessment", ANALYSIS_SECTIONS),
        policy_alignment=extract_section(text, "Policy alignment", ANALYSIS_SECTIONS),
    )


def parse_recommendations(text: str) -> RequestRecommendations:
    return RequestRecommendations(
        strategic=extract_list_items(text, "Strategic recommendations", RECOMMENDATION_SECTIONS),
        operational=extract_list_items(text, "Operational recommendations", RECOMMENDATION_SECTIONS),
        timeline=extract_section(text, "Implementation timeline", RECOMMENDATION_SECTIONS),
        risks=extract_list_items(text, "Potential risks", RECOMMENDATION_SECTIONS),
    )


class RequestProcessor:
    """Run the analysis and recommendation completions for one request."""

    def __init__(
        self,
        client: BaseLLMClient,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> None:
        self._client = client
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def process(self, request: RequestInput) -> ProcessedRequest:
        """Analyze a request, then derive recommendations from the analysis.

        Raises:
            ProviderRetryExhausted: If a provider call keeps failing.
        """
        analysis_text = await self._ask(ANALYSIS_SYSTEM, build_analysis_prompt(request), "analysis")
        analysis = parse_analysis(analysis_text)

        recommendation_text = await self._ask(
            RECOMMENDATION_SYSTEM, build_recommendation_prompt(analysis), "recommendations"
        )
        recommendations = parse_recommendations(recommendation_text)

        logger.info(
            "Processed request %r", request.title,
            extra={"data": {
                "trends": len(analysis.trends),
                "strategic": len(recommendations.strategic),
                "operational": len(recommendations.operational),
            }},
        )
        return ProcessedRequest(
            request=request,
            analysis=analysis,
            recommendations=recommendations,
            processed_at=datetime.now(timezone.utc),
        )

    async def _ask(self, system: str, prompt: str, operation: str) -> str:
        response = await with_retry(
            self._client.complete,
            [Message(role="user", content=prompt)],
            system=system,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
            operation=f"{self._client.provider_name} {operation}",
        )
        return response.content
