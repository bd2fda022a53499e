"""
Best-effort coercion of generated text into fixed display shapes.

The upstream model's output format is not guaranteed, so nothing here raises
on bad content: unparseable JSON falls back to a minimal record built from the
raw text, alternate key spellings are resolved through explicit alias tables,
and markdown documents are split into sections by a single pass over their
lines.
"""

import json
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from app.models.schemas import BugAnalysis, BugReportSections, BugSeverity, NormalizedTestCase

_FENCE_RE = re.compile(r"```json\s*\n?([\s\S]*?)\n?\s*```", re.IGNORECASE)
_BULLET_RE = re.compile(r"^\s*[-*]\s+")
_NUMBERED_RE = re.compile(r"^\s*\d+[.)]\s+")
_RULE_RE = re.compile(r"^[-\s]{3,}$")
_HEADING_RE = re.compile(r"^#+\s*(.+)")
_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")

# Ordered candidate keys per logical field; the first key present wins.
ANALYSIS_ALIASES: Dict[str, Tuple[str, ...]] = {
    "severity": ("severity",),
    "category": ("type of bug/error", "type_of_bug_error", "typeOfBugError", "category", "type"),
    "summary": ("summary", "possible cause", "possible_cause", "possibleCause", "cause", "description"),
    "steps": ("steps", "steps to fix", "steps_to_fix", "stepsToFix", "steps to reproduce"),
    "suggestions": ("suggestions", "recommendations"),
}

TEST_CASE_ALIASES: Dict[str, Tuple[str, ...]] = {
    "title": ("title", "name", "test_case", "testCase", "scenario", "description"),
    "steps": ("steps", "test_steps", "testSteps"),
    "expected_result": ("expected_result", "expectedResult", "expected", "expected outcome"),
    "priority": ("priority",),
}

TEST_CASE_CONTAINER_KEYS = ("testCases", "test_cases", "tests")

_STEP_TEXT_KEYS = ("action", "step", "description", "text")


# ---------------------------------------------------------------------------
# Generic helpers
# ---------------------------------------------------------------------------

def strip_json_fence(text: str) -> str:
    """Return the body of a ```json fenced block, or the text unchanged."""
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text


def parse_loose_json(value: Any) -> Tuple[Any, bool]:
    """Parse a string as JSON after fence stripping; non-strings pass through as parsed."""
    if not isinstance(value, str):
        return value, True
    try:
        return json.loads(strip_json_fence(value).strip()), True
    except ValueError:
        return None, False


def first_present(data: Mapping[str, Any], aliases: Sequence[str]) -> Optional[Any]:
    for key in aliases:
        if key in data and data[key] is not None:
            return data[key]
    return None


def as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def as_text_list(value: Any) -> List[str]:
    """Sequences become lists of strings; anything else becomes []."""
    if not isinstance(value, (list, tuple)):
        return []
    return [as_text(item) for item in value]


def strip_emphasis(text: str) -> str:
    return _BOLD_RE.sub(r"\1", text)


def strip_markdown(md: str) -> str:
    """Plain-text rendering of a markdown document for copy and download."""
    text = md.replace("\r", "")
    text = re.sub(r"^#{1,6}\s+", "", text, flags=re.M)
    text = re.sub(r"^[-*+]\s+", "- ", text, flags=re.M)
    text = re.sub(r"`{1,3}([^`]+)`{1,3}", r"\1", text)
    text = re.sub(r"\*\*([^*]+)\*\*", r"\1", text)
    text = re.sub(r"\*([^*\n]+)\*", r"\1", text)
    text = re.sub(r"!\[(.*?)\]\(.*?\)", "", text)
    text = re.sub(r"\[(.*?)\]\(.*?\)", r"\1", text)
    text = re.sub(r"^>\s+", "", text, flags=re.M)
    text = re.sub(r"^-{3,}$", "", text, flags=re.M)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


# ---------------------------------------------------------------------------
# Bug analysis
# ---------------------------------------------------------------------------

def _coerce_severity(value: Any) -> BugSeverity:
    if isinstance(value, str):
        for severity in BugSeverity:
            if value.strip().lower() == severity.value.lower():
                return severity
    return BugSeverity.MEDIUM


def normalize_bug_analysis(value: Any) -> BugAnalysis:
    parsed, ok = parse_loose_json(value)
    if not ok or not isinstance(parsed, dict):
        text = as_text(value)
        return BugAnalysis(
            severity=BugSeverity.MEDIUM,
            category="General",
            summary=text,
            steps=[text] if text else [],
            suggestions=[],
        )

    category = first_present(parsed, ANALYSIS_ALIASES["category"])
    return BugAnalysis(
        severity=_coerce_severity(first_present(parsed, ANALYSIS_ALIASES["severity"])),
        category=as_text(category) if category is not None else "General",
        summary=as_text(first_present(parsed, ANALYSIS_ALIASES["summary"])),
        steps=as_text_list(first_present(parsed, ANALYSIS_ALIASES["steps"])),
        suggestions=as_text_list(first_present(parsed, ANALYSIS_ALIASES["suggestions"])),
    )


# ---------------------------------------------------------------------------
# Test cases
# ---------------------------------------------------------------------------

def _step_text(step: Any) -> str:
    if isinstance(step, dict):
        found = first_present(step, _STEP_TEXT_KEYS)
        if found is not None:
            return as_text(found)
    return as_text(step)


def _normalize_test_case(item: Any) -> NormalizedTestCase:
    if not isinstance(item, dict):
        return NormalizedTestCase(title=as_text(item))

    steps = first_present(item, TEST_CASE_ALIASES["steps"])
    priority = first_present(item, TEST_CASE_ALIASES["priority"])
    return NormalizedTestCase(
        title=as_text(first_present(item, TEST_CASE_ALIASES["title"])),
        steps=[_step_text(step) for step in steps] if isinstance(steps, (list, tuple)) else [],
        expected_result=as_text(first_present(item, TEST_CASE_ALIASES["expected_result"])),
        priority=as_text(priority) if priority is not None else None,
    )


def normalize_test_cases(value: Any) -> List[NormalizedTestCase]:
    if value is None or value == "":
        return []

    parsed, ok = parse_loose_json(value)
    if not ok:
        return [NormalizedTestCase(title=as_text(value))]

    if isinstance(parsed, dict):
        container = first_present(parsed, TEST_CASE_CONTAINER_KEYS)
        parsed = container if isinstance(container, list) else [parsed]
    elif not isinstance(parsed, list):
        parsed = [parsed]

    return [_normalize_test_case(item) for item in parsed]


# ---------------------------------------------------------------------------
# Markdown documents
# ---------------------------------------------------------------------------

def heading_text(line: str) -> Optional[str]:
    """Heading predicate for release notes: the heading's text, or None."""
    match = _HEADING_RE.match(line)
    if match:
        return match.group(1).strip()
    return None


def parse_release_notes(md: str) -> Dict[str, List[str]]:
    sections: Dict[str, List[str]] = {}
    current: Optional[str] = None

    for line in md.splitlines():
        name = heading_text(line)
        if name is not None:
            current = name
            sections.setdefault(current, [])
        elif current is not None and line.strip():
            item = _BULLET_RE.sub("", line).strip()
            if not _RULE_RE.match(item):
                sections[current].append(item)

    return sections


def normalize_release_notes(value: Any) -> Dict[str, List[str]]:
    if isinstance(value, dict):
        return {str(name): as_text_list(items) for name, items in value.items()}
    if not isinstance(value, str):
        return {}
    return parse_release_notes(value)


def _bug_report_heading(label: str, single_hash: bool = False) -> "re.Pattern[str]":
    hashes = "#" if single_hash else "##?"
    return re.compile(rf"^{hashes}\s*(?:{label})\s*[:：]?", re.IGNORECASE)


# (section, pattern, is_list); the first matching pattern wins
BUG_REPORT_HEADINGS: Tuple[Tuple[str, "re.Pattern[str]", bool], ...] = (
    ("title", _bug_report_heading("Title", single_hash=True), False),
    ("severity", _bug_report_heading("Severity"), False),
    ("description", _bug_report_heading("Description"), False),
    ("steps", _bug_report_heading("Steps to Reproduce|Steps to Fix"), True),
    ("expected", _bug_report_heading("Expected Behaviou?r"), False),
    ("actual", _bug_report_heading("Actual Behaviou?r"), False),
    ("environment", _bug_report_heading("Environment"), False),
    ("suggestions", _bug_report_heading("Suggestions"), True),
)

_INLINE_SECTIONS = frozenset({"title", "severity"})


def match_bug_report_heading(line: str) -> Optional[Tuple[str, str, bool]]:
    """Return (section, inline text, is_list) for a known heading line."""
    for section, pattern, is_list in BUG_REPORT_HEADINGS:
        match = pattern.match(line)
        if match:
            return section, line[match.end():].strip(), is_list
    return None


def parse_bug_report(md: str) -> BugReportSections:
    scalars: Dict[str, List[str]] = {}
    lists: Dict[str, List[str]] = {}
    current: Optional[str] = None
    current_is_list = False

    for line in md.splitlines():
        heading = match_bug_report_heading(line)
        if heading is not None:
            current, inline, current_is_list = heading
            if current_is_list:
                lists[current] = []
            elif current in _INLINE_SECTIONS:
                # Title and severity hold only their inline text
                scalars[current] = [inline] if inline else []
                current = None
            else:
                scalars[current] = []
            continue

        if line.lstrip().startswith("#"):
            current = None
            continue

        if current is None or not line.strip():
            continue

        if current_is_list:
            if _BULLET_RE.match(line) or _NUMBERED_RE.match(line):
                item = _NUMBERED_RE.sub("", _BULLET_RE.sub("", line)).strip()
                lists[current].append(item)
        else:
            scalars[current].append(line.strip())

    return BugReportSections(
        **{name: "\n".join(lines) for name, lines in scalars.items()},
        **lists,
    )


def normalize_bug_report(value: Any) -> BugReportSections:
    if isinstance(value, dict):
        data = {
            name: (as_text_list(value.get(name)) if name in ("steps", "suggestions") else as_text(value.get(name)))
            for name in BugReportSections.model_fields
        }
        return BugReportSections(**data)
    if not isinstance(value, str):
        return BugReportSections()
    return parse_bug_report(value)
