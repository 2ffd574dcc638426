"""
Unit tests for the Gerrit comment formatter.
"""

from gerrit_reviewer.formatting.gerrit import (
    TRUNCATION_NOTICE,
    GerritCommentFormatter,
    gerrit_comment,
)
from gerrit_reviewer.models.diagnostic import Comment, Diagnostic, Location, Position, Range, Source


def make_comment(message="x is unused", code=None, source=None, tool_name=""):
    diagnostic = Diagnostic(
        message=message,
        location=Location(path="a.go", range=Range(start=Position(line=3, column=5))),
        source=source,
        code=code,
    )
    return Comment(diagnostic=diagnostic, in_diff_file=True, tool_name=tool_name)


class TestGerritCommentFormatter:
    """Unit tests for GerritCommentFormatter class."""

    def setup_method(self):
        self.formatter = GerritCommentFormatter()

    def test_plain_message_without_tool(self):
        assert gerrit_comment(make_comment()) == "x is unused"

    def test_tool_name_prefix(self):
        assert gerrit_comment(make_comment(tool_name="golint")) == "[golint] x is unused"

    def test_source_name_used_without_tool_name(self):
        comment = make_comment(source=Source(name="staticcheck"))

        assert self.formatter.format_comment(comment) == "[staticcheck] x is unused"

    def test_rule_line_with_url(self):
        comment = make_comment(
            code="U1000",
            source=Source(name="staticcheck", url="https://staticcheck.dev/docs/checks#U1000"),
            tool_name="golint",
        )

        assert self.formatter.format_comment(comment) == (
            "[golint] x is unused\n\nRule: U1000 (https://staticcheck.dev/docs/checks#U1000)"
        )

    def test_rule_line_without_url(self):
        comment = make_comment(code="SA4006", source=Source(name="staticcheck"))

        assert self.formatter.format_comment(comment) == "[staticcheck] x is unused\n\nRule: SA4006"

    def test_long_comment_is_truncated(self):
        formatter = GerritCommentFormatter(max_comment_length=100)

        body = formatter.format_comment(make_comment(message="a" * 500, tool_name="golint"))

        assert len(body) == 100
        assert body.startswith("[golint] aaa")
        assert body.endswith(TRUNCATION_NOTICE)

    def test_comment_at_limit_is_kept(self):
        formatter = GerritCommentFormatter(max_comment_length=20)

        assert formatter.format_comment(make_comment(message="b" * 20)) == "b" * 20
