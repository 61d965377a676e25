"""
Unit tests for editor diagnostics.
"""
import pytest

from quiztoon import Diagnostic, example_toon, lint


@pytest.fixture
def broken_options():
    """A quiz whose only question has no correct option (question row on line 3)."""
    return (
        "quiz:\n"
        "  title: T\n"
        "questions[1]{orderIndex,type,questionText}:\n"
        "  0,multiple-choice,Q1\n"
        "options[2]{questionIndex,text,isCorrect}:\n"
        "  0,A,false\n"
        "  0,B,false\n"
    )


def test_lint_blank_document():
    """Test that empty buffers are not linted."""
    assert lint("") == []
    assert lint("  \n\n") == []


def test_lint_valid_document():
    """Test that a valid document has no diagnostics."""
    assert lint(example_toon()) == []


def test_lint_reports_line(broken_options):
    """Test that the error lands on the question row."""
    diagnostics = lint(broken_options)

    assert diagnostics == [
        Diagnostic(
            line=4,
            message="Question 1: At least one option must be marked as correct",
            start=len("quiz:\n  title: T\nquestions[1]{orderIndex,type,questionText}:\n"),
            end=len("quiz:\n  title: T\nquestions[1]{orderIndex,type,questionText}:\n  0,multiple-choice,Q1"),
        )
    ]
    assert diagnostics[0].severity == "error"


def test_lint_error_without_line_goes_to_first_line():
    """Test errors that carry no line number."""
    diagnostics = lint("quiz:\n  title: T\n")

    assert len(diagnostics) == 1
    assert diagnostics[0].line == 1
    assert diagnostics[0].message == "At least one question is required"
    assert (diagnostics[0].start, diagnostics[0].end) == (0, len("quiz:"))


def test_lint_missing_title():
    """Test that a missing title is reported on line 1 without the prefix."""
    diagnostics = lint("quiz:\n  description: no title\n")

    assert diagnostics[0].line == 1
    assert diagnostics[0].message == "Quiz title is required"
