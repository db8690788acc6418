"""
Development suggestions and generated questions.

Generated text is parsed with a line grammar. Each block starts with a
"Category:" line and continues with "Key: value" lines until the next
"Category:". Blank lines and lines starting with "#" are ignored, and a
leading "- " or "* " bullet is allowed.

  Suggestions                      Questions
    Category: <name>                 Category: <name>
    Skill: <activity>     required   Question: <text>        required
    Resource: <material>  optional   Type: rating | text     required
    Application: <habit>  optional

A block with an unknown key, a repeated key, an empty value or a missing
required key is rejected as a whole and returned as a RejectedSegment.
Text before the first "Category:" is rejected the same way. Parsing never
raises on malformed text.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

import structlog

from app.core.enums import ClassificationOutcome, QuestionKind, RelationshipType
from app.core.text_generation import TextGenerator
from app.schemas.scorecard import LowScoreClassification
from app.schemas.suggestions import (
    GeneratedQuestion,
    QuestionGenerateOut,
    RejectedSegment,
    SuggestionItem,
    SuggestionResult,
)

logger = structlog.get_logger(__name__)

NO_DEVELOPMENT_AREAS_MESSAGE = (
    "No specific development areas identified. Continue building on current strengths."
)

QUESTION_SYSTEM_PROMPT = "You are an expert in employee performance evaluation and professional development."
SUGGESTION_SYSTEM_PROMPT = "You are an expert career coach specializing in professional development."

_FIELD = re.compile(r"^(?:[-*]\s+)?([A-Za-z][A-Za-z ]*?)\s*:\s*(.*)$")

SUGGESTION_KEYS = ("category", "skill", "resource", "application")
QUESTION_KEYS = ("category", "question", "type")


@dataclass
class _Block:
    line: int
    lines: list[str] = field(default_factory=list)
    fields: dict[str, str] = field(default_factory=dict)
    error: str | None = None

    def fail(self, reason: str) -> None:
        if self.error is None:
            self.error = reason


def parse_blocks(
    raw: str,
    *,
    keys: tuple[str, ...],
    required: tuple[str, ...],
) -> tuple[list[tuple[int, dict[str, str]]], list[RejectedSegment]]:
    """Split raw text into (start line, fields) blocks per the module grammar."""
    parsed: list[tuple[int, dict[str, str]]] = []
    rejected: list[RejectedSegment] = []
    current: _Block | None = None

    def flush(block: _Block | None) -> None:
        if block is None:
            return
        if block.error is None:
            missing = [k for k in required if k not in block.fields]
            if missing:
                block.fail(f"missing {', '.join(missing)}")
        if block.error:
            rejected.append(RejectedSegment(line=block.line, text="\n".join(block.lines), reason=block.error))
        else:
            parsed.append((block.line, block.fields))

    for lineno, line in enumerate(raw.splitlines(), start=1):
        s = line.strip()
        if not s or s.startswith("#"):
            continue

        m = _FIELD.match(s)
        key = m.group(1).strip().lower() if m else None

        if key == "category":
            flush(current)
            current = _Block(line=lineno)
        elif current is None:
            current = _Block(line=lineno)
            current.fail("text before the first Category line")

        current.lines.append(s)

        if m is None or key not in keys:
            current.fail(f"unrecognised line {lineno}")
            continue
        if key in current.fields:
            current.fail(f"duplicate {key} on line {lineno}")
            continue
        value = m.group(2).strip()
        if not value:
            current.fail(f"empty {key} on line {lineno}")
            continue
        current.fields[key] = value

    flush(current)
    return parsed, rejected


def parse_suggestions(raw: str) -> tuple[list[SuggestionItem], list[RejectedSegment]]:
    blocks, rejected = parse_blocks(raw, keys=SUGGESTION_KEYS, required=("category", "skill"))
    items = [
        SuggestionItem(
            category=b["category"],
            skill_building=b["skill"],
            resource=b.get("resource"),
            application=b.get("application"),
        )
        for _, b in blocks
    ]
    return items, rejected


def parse_questions(
    raw: str,
    *,
    scale_min: float = 1,
    scale_max: float = 5,
) -> tuple[list[GeneratedQuestion], list[RejectedSegment]]:
    blocks, rejected = parse_blocks(raw, keys=QUESTION_KEYS, required=QUESTION_KEYS)
    questions: list[GeneratedQuestion] = []
    for line, b in blocks:
        # "rating (on a 1-5 scale)" -> "rating"
        kind_word = b["type"].split()[0].lower()
        try:
            kind = QuestionKind(kind_word)
        except ValueError:
            rejected.append(
                RejectedSegment(
                    line=line,
                    text=f"Category: {b['category']}\nQuestion: {b['question']}\nType: {b['type']}",
                    reason=f"unknown question type {b['type']!r}",
                )
            )
            continue
        rating = kind == QuestionKind.RATING
        questions.append(
            GeneratedQuestion(
                category=b["category"],
                text=b["question"],
                kind=kind,
                rating_min=scale_min if rating else None,
                rating_max=scale_max if rating else None,
            )
        )
    return questions, rejected


def build_question_prompt(job_title: str, evaluation_type: RelationshipType, scale_min: float, scale_max: float) -> str:
    return (
        f"Generate 10 professional evaluation questions for a {job_title} role.\n"
        f"These questions are for a {evaluation_type.value.replace('_', ' ')} evaluation.\n"
        "Each question should be focused on skills, competencies, and behaviors relevant to the role.\n"
        "Write each question as its own block of exactly three lines:\n\n"
        "Category: <Leadership/Communication/Technical Skills/etc>\n"
        "Question: <question text>\n"
        f"Type: rating (on a {scale_min:g}-{scale_max:g} scale)\n\n"
        "For the last 2 questions, make them open-ended and use 'Type: text' instead.\n"
        "Do not write anything else."
    )


def build_suggestion_prompt(job_title: str, categories: list[str]) -> str:
    return (
        f"As a professional development coach, provide specific development suggestions for a {job_title} "
        f"who needs improvement in the following areas: {', '.join(categories)}.\n"
        "Write one block per area, exactly in this form:\n\n"
        "Category: <area>\n"
        "Skill: <one specific skill-building activity>\n"
        "Resource: <one book, course, or online training>\n"
        "Application: <one practical workplace application>\n\n"
        "Do not write anything else."
    )


class SuggestionService:
    def __init__(self, generator: TextGenerator):
        self._generator = generator

    def generate(self, job_title: str | None, classification: LowScoreClassification) -> SuggestionResult:
        if classification.no_development_areas:
            return SuggestionResult(
                outcome=ClassificationOutcome.NO_DEVELOPMENT_AREAS,
                categories=[],
                message=NO_DEVELOPMENT_AREAS_MESSAGE,
            )

        role = job_title or "professional"
        raw = self._generator.complete(SUGGESTION_SYSTEM_PROMPT, build_suggestion_prompt(role, classification.categories))
        items, rejected = parse_suggestions(raw)
        for seg in rejected:
            logger.warning("suggestions.segment_rejected", line=seg.line, reason=seg.reason)

        return SuggestionResult(
            outcome=ClassificationOutcome.DEVELOPMENT_AREAS,
            categories=list(classification.categories),
            suggestions=items,
            rejected_segments=rejected,
        )

    def generate_many(
        self, requests: Iterable[tuple[str | None, LowScoreClassification]]
    ) -> list[SuggestionResult]:
        """One provider call per distinct (job title, category list) in this batch."""
        results: dict[tuple[str | None, tuple[str, ...]], SuggestionResult] = {}
        out: list[SuggestionResult] = []
        for job_title, classification in requests:
            pair = (job_title, tuple(classification.categories))
            if pair not in results:
                results[pair] = self.generate(job_title, classification)
            out.append(results[pair])
        return out

    def generate_questions(
        self,
        job_title: str,
        evaluation_type: RelationshipType,
        *,
        scale_min: float = 1,
        scale_max: float = 5,
    ) -> QuestionGenerateOut:
        raw = self._generator.complete(
            QUESTION_SYSTEM_PROMPT,
            build_question_prompt(job_title, evaluation_type, scale_min, scale_max),
        )
        questions, rejected = parse_questions(raw, scale_min=scale_min, scale_max=scale_max)
        for seg in rejected:
            logger.warning("questions.segment_rejected", line=seg.line, reason=seg.reason)
        return QuestionGenerateOut(questions=questions, rejected_segments=rejected)
