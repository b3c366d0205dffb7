from moveguard.model import Location, Severity
from moveguard.reporter import AnalysisError, ErrorReporter


def test_empty_report_plain():
    assert ErrorReporter(color=False).report() == "No issues found\n"


def test_empty_report_coloured_wraps_text():
    out = ErrorReporter().report()
    assert "No issues found" in out
    assert out.startswith("\x1b[")
    assert out.endswith("\x1b[0m\n")


def test_critical_error_with_fix():
    reporter = ErrorReporter(color=False)
    reporter.add_error(
        AnalysisError(Severity.CRITICAL, Location("m.move", 3, 7), "bad", "do better")
    )
    lines = reporter.report().split("\n")
    assert lines[0] == "Critical Error at m.move:3:7"
    assert lines[1] == "bad"
    assert lines[2] == "Suggested fix: do better"
    assert lines[3] == ""


def test_headers_by_severity():
    reporter = ErrorReporter(color=False)
    reporter.add_error(AnalysisError(Severity.HIGH, Location("a", 1, 2), "x"))
    reporter.add_error(AnalysisError(Severity.LOW, Location("b", 5, 6), "y"))
    out = reporter.report()
    assert "Error at a:1:2\nx\n\n" in out
    assert "Warning at b:5:6\ny\n\n" in out
    assert "Suggested fix" not in out


def test_medium_warning_is_not_coloured():
    reporter = ErrorReporter(color=True)
    reporter.add_error(AnalysisError(Severity.MEDIUM, Location("f", 1, 1), "msg"))
    first_line = reporter.report().split("\n")[0]
    assert first_line == "Warning at f:1:1"