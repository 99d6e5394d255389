"""Relevance filter and short-label extraction for GitHub Actions job names."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from app.entities.enums import JobFilterPolicy

RELEVANT_KEYWORDS = (
    "build",
    "test",
    "deploy",
    "lint",
    "check",
    "validate",
    "matrix",
    "strategy",
)

PARENTHESIZED_PATTERN = re.compile(r"\([^)]*\)")

MATRIX_CAPTURE_PATTERN = re.compile(r"^[^(]*\((?P<vars>[^)]+)\)")
BUILD_PREFIX_PATTERN = re.compile(r"^build[-_](?P<rest>.+)$", re.IGNORECASE | re.DOTALL)
BUILD_WORD_PATTERN = re.compile(r"\bbuild\s+(?P<rest>.+)$", re.IGNORECASE | re.DOTALL)
LEADING_AFFIX_PATTERN = re.compile(r"^(?:job|task|step)_", re.IGNORECASE)
TRAILING_AFFIX_PATTERN = re.compile(r"_(?:job|task|step)$", re.IGNORECASE)
TYPED_MATRIX_PATTERN = re.compile(r"^(?P<type>[^(]+?)\s*\((?P<vars>[^)]*)\)")


def is_relevant_job(name: str, policy: JobFilterPolicy = JobFilterPolicy.KEYWORDS) -> bool:
    """Decide whether a job belongs on the dashboard."""
    lowered = (name or "").lower()
    if policy == JobFilterPolicy.BUILD_ONLY:
        return "build" in lowered
    if any(keyword in lowered for keyword in RELEVANT_KEYWORDS):
        return True
    return PARENTHESIZED_PATTERN.search(lowered) is not None


def _matrix_capture(name: str) -> Optional[str]:
    # "suite (py3.9, ubuntu)" -> "py3.9, ubuntu"
    match = MATRIX_CAPTURE_PATTERN.search(name)
    return match.group("vars").strip() if match else None


def _build_prefix(name: str) -> Optional[str]:
    # "build-frontend" / "build_frontend" -> "frontend"
    match = BUILD_PREFIX_PATTERN.search(name)
    return match.group("rest").strip() if match else None


def _build_word(name: str) -> Optional[str]:
    # "Build Container Image" -> "Container Image"
    match = BUILD_WORD_PATTERN.search(name)
    return match.group("rest").strip() if match else None


def _build_affixes(name: str) -> Optional[str]:
    # "job_build_linux_task" -> "build_linux"
    if "build" not in name.lower():
        return None
    stripped = LEADING_AFFIX_PATTERN.sub("", name)
    stripped = TRAILING_AFFIX_PATTERN.sub("", stripped)
    return stripped.strip()


def _typed_matrix(name: str) -> Optional[str]:
    # "suite ()" -> "suite ()"
    match = TYPED_MATRIX_PATTERN.search(name)
    if not match:
        return None
    return f"{match.group('type').strip()} ({match.group('vars').strip()})"


@dataclass(frozen=True)
class JobNameMatcher:
    name: str
    match: Callable[[str], Optional[str]]


# Priority order, first non-empty label wins
JOB_NAME_MATCHERS: Tuple[JobNameMatcher, ...] = (
    JobNameMatcher("matrix_capture", _matrix_capture),
    JobNameMatcher("build_prefix", _build_prefix),
    JobNameMatcher("build_word", _build_word),
    JobNameMatcher("build_affixes", _build_affixes),
    JobNameMatcher("typed_matrix", _typed_matrix),
)


def extract_job_name(full_name: str) -> str:
    """
    Extract the short label shown for a job.

    Falls back to the full name when no matcher produces a label, so every
    input, including "", maps to a defined label.
    """
    for matcher in JOB_NAME_MATCHERS:
        label = matcher.match(full_name)
        if label:
            return label
    return full_name
