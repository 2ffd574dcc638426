"""
Unit tests for DiffFilter.
"""

from gerrit_reviewer.git.parser import DiffParser
from gerrit_reviewer.models.diagnostic import Diagnostic, Location, Position, Range, Severity, Suggestion
from gerrit_reviewer.review.filter import DiffFilter


DIFF = b"""diff --git a/service/api/handler.go b/service/api/handler.go
index 3b18e51..a9f2c4d 100644
--- a/service/api/handler.go
+++ b/service/api/handler.go
@@ -10,4 +10,5 @@ func handler() {
 x := 1
 y := 2
+z := 3
 return x
 }
"""


def make_diagnostic(path="handler.go", line=12, suggestions=None, severity=Severity.WARNING):
    return Diagnostic(
        message="issue",
        location=Location(path=path, range=Range(start=Position(line=line, column=1))),
        severity=severity,
        suggestions=suggestions or [],
    )


def make_suggestion(start_line, end_line):
    return Suggestion(
        range=Range(start=Position(line=start_line, column=1), end=Position(line=end_line, column=4)),
        text="fix",
    )


class TestDiffFilter:
    """Unit tests for DiffFilter class."""

    def setup_method(self):
        self.files = DiffParser().parse(DIFF, strip=1)
        self.filter = DiffFilter(self.files, workdir="service/api")

    def test_added_line_is_in_diff(self):
        comment = self.filter.classify(make_diagnostic(line=12), tool_name="golint")

        assert comment.in_diff_file
        assert not comment.first_suggestion_in_diff_context
        assert comment.should_report
        assert comment.tool_name == "golint"

    def test_context_line_is_not_in_diff(self):
        comment = self.filter.classify(make_diagnostic(line=11))

        assert not comment.in_diff_file

    def test_other_file_is_not_in_diff(self):
        comment = self.filter.classify(make_diagnostic(path="other.go", line=12))

        assert not comment.in_diff_file

    def test_path_is_not_rewritten(self):
        diagnostic = make_diagnostic()

        self.filter.classify(diagnostic)

        assert diagnostic.location.path == "handler.go"

    def test_first_suggestion_in_diff_context(self):
        diagnostic = make_diagnostic(line=30, suggestions=[make_suggestion(11, 13), make_suggestion(40, 40)])

        comment = self.filter.classify(diagnostic)

        assert comment.in_diff_file
        assert comment.first_suggestion_in_diff_context

    def test_first_suggestion_outside_diff_context(self):
        diagnostic = make_diagnostic(line=30, suggestions=[make_suggestion(13, 20)])

        comment = self.filter.classify(diagnostic)

        assert not comment.in_diff_file
        assert not comment.first_suggestion_in_diff_context

    def test_severity_threshold(self):
        diff_filter = DiffFilter(self.files, workdir="service/api", min_severity=Severity.ERROR)

        assert not diff_filter.classify(make_diagnostic(severity=Severity.WARNING)).should_report
        assert diff_filter.classify(make_diagnostic(severity=Severity.ERROR)).should_report
        assert diff_filter.classify(make_diagnostic(severity=Severity.UNKNOWN_SEVERITY)).should_report

    def test_inverted_suggestion_range_is_not_in_diff(self):
        # rdjson end positions without a line decode to line 0
        diagnostic = make_diagnostic(line=50, suggestions=[make_suggestion(11, 0)])

        comment = self.filter.classify(diagnostic)

        assert not comment.in_diff_file
        assert not comment.first_suggestion_in_diff_context

    def test_unset_suggestion_start_is_not_in_diff(self):
        diagnostic = make_diagnostic(line=50, suggestions=[make_suggestion(0, 11)])

        comment = self.filter.classify(diagnostic)

        assert not comment.in_diff_file
        assert not comment.first_suggestion_in_diff_context
