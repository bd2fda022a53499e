from app.models.schemas import BugSeverity
from app.services.response_normalizer import (
    heading_text,
    match_bug_report_heading,
    normalize_bug_analysis,
    normalize_bug_report,
    normalize_release_notes,
    normalize_test_cases,
    parse_loose_json,
    strip_emphasis,
    strip_json_fence,
    strip_markdown,
)


def test_json_fence_is_stripped_before_parsing():
    assert strip_json_fence('```json\n{"a":1}\n```') == '{"a":1}'
    assert parse_loose_json('```json\n{"a":1}\n```') == ({"a": 1}, True)
    assert parse_loose_json("not json") == (None, False)


def test_json_fence_tag_is_case_insensitive():
    assert strip_json_fence('```Json\n{"a":1}\n```') == '{"a":1}'
    assert parse_loose_json('```JSON\n[1, 2]\n```') == ([1, 2], True)


def test_analysis_category_alias():
    analysis = normalize_bug_analysis({"type of bug/error": "X"})

    assert analysis.category == "X"
    assert analysis.severity == BugSeverity.MEDIUM


def test_analysis_alias_precedence_and_field_mapping():
    analysis = normalize_bug_analysis({
        "type_of_bug_error": "Race condition",
        "category": "Concurrency",
        "possible cause": "Unsynchronised cache",
        "steps to fix": ["Add a lock", {"step": 2}],
        "severity": "high",
    })

    assert analysis.category == "Race condition"
    assert analysis.summary == "Unsynchronised cache"
    assert analysis.steps == ["Add a lock", '{"step": 2}']
    assert analysis.severity == BugSeverity.HIGH


def test_analysis_non_list_sequences_become_empty():
    analysis = normalize_bug_analysis({"suggestions": "restart it", "steps": None})

    assert analysis.suggestions == []
    assert analysis.steps == []


def test_analysis_fallback_for_prose():
    analysis = normalize_bug_analysis("The server times out under load.")

    assert analysis.severity == BugSeverity.MEDIUM
    assert analysis.category == "General"
    assert analysis.summary == "The server times out under load."
    assert analysis.steps == ["The server times out under load."]
    assert analysis.suggestions == []


def test_analysis_is_idempotent():
    for source in ('{"type of bug/error": "UI", "suggestions": ["Resize"]}', "plain prose"):
        first = normalize_bug_analysis(source)
        second = normalize_bug_analysis(first.model_dump())
        assert second == first


def test_test_cases_shapes():
    assert normalize_test_cases(None) == []
    assert [c.title for c in normalize_test_cases("free text")] == ["free text"]
    assert [c.title for c in normalize_test_cases('["Given A", "Given B"]')] == ["Given A", "Given B"]

    cases = normalize_test_cases({
        "testCases": [
            {
                "name": "Valid login",
                "testSteps": [{"action": "Open page"}, "Submit"],
                "expectedResult": "Dashboard shown",
                "priority": "High",
            }
        ]
    })

    assert len(cases) == 1
    assert cases[0].title == "Valid login"
    assert cases[0].steps == ["Open page", "Submit"]
    assert cases[0].expected_result == "Dashboard shown"
    assert cases[0].priority == "High"


def test_test_cases_are_idempotent():
    first = normalize_test_cases('```json\n[{"title": "T1", "steps": "bad", "expected": "ok"}]\n```')
    second = normalize_test_cases([case.model_dump() for case in first])

    assert first[0].steps == []
    assert second == first


def test_release_note_sections():
    assert normalize_release_notes("## Fixed\n- bug A\n- bug B") == {"Fixed": ["bug A", "bug B"]}


def test_release_notes_skip_preamble_blank_lines_and_rules():
    md = "Intro line\n# v2.0\n\n## Features\n* **Dark mode**\n---\n## Fixed\r\n- crash\r\n"

    sections = normalize_release_notes(md)

    assert sections == {"v2.0": [], "Features": ["**Dark mode**"], "Fixed": ["crash"]}
    assert strip_emphasis(sections["Features"][0]) == "Dark mode"
    assert normalize_release_notes(sections) == sections


def test_heading_predicates():
    assert heading_text("### Breaking Changes ") == "Breaking Changes"
    assert heading_text("- not a heading") is None
    assert match_bug_report_heading("## severity： Critical") == ("severity", "Critical", False)
    assert match_bug_report_heading("## STEPS TO REPRODUCE:") == ("steps", "", True)
    assert match_bug_report_heading("## Title") is None


def test_bug_report_sections():
    md = "\n".join([
        "# Title: Checkout fails",
        "## Severity: High",
        "## Description",
        "Paying with a saved card fails.",
        "It started after the last deploy.",
        "## Steps to Reproduce",
        "1. Add an item",
        "- Pay with saved card",
        "stray prose is ignored",
        "## Expected Behavior",
        "Order is placed.",
        "## Notes",
        "unknown sections are dropped",
        "## Suggestions",
        "* Check the card token",
    ])

    report = normalize_bug_report(md)

    assert report.title == "Checkout fails"
    assert report.severity == "High"
    assert report.description == "Paying with a saved card fails.\nIt started after the last deploy."
    assert report.steps == ["Add an item", "Pay with saved card"]
    assert report.expected == "Order is placed."
    assert report.actual == ""
    assert report.suggestions == ["Check the card token"]
    assert normalize_bug_report(report.model_dump()) == report


def test_bug_report_title_and_severity_keep_only_inline_text():
    report = normalize_bug_report("# Title: Checkout fails\nReported on staging\n## Severity: High\nConfirmed by QA")

    assert report.title == "Checkout fails"
    assert report.severity == "High"
    assert report.description == ""


def test_strip_markdown():
    md = "# Title\n\n\n\n**Bold** and *italic* with `code` and [a link](http://x)\n> quoted\n* item\n---"

    assert strip_markdown(md) == "Title\n\nBold and italic with code and a link\nquoted\n- item"
