"""
Property-based tests for mapping comments to Gerrit robot comments.
"""

from hypothesis import given, strategies as st

from gerrit_reviewer.config import RobotConfig
from gerrit_reviewer.models.diagnostic import (
    Comment,
    Diagnostic,
    Location,
    Position,
    Range,
    Suggestion,
)
from gerrit_reviewer.git.workdir import join_workdir
from gerrit_reviewer.review.commenter import build_review


RUN_INFO = RobotConfig(robot_id="gerrit-reviewer")

positions = st.builds(
    Position,
    line=st.integers(min_value=1, max_value=10000),
    column=st.integers(min_value=1, max_value=500),
)
ranges = st.builds(Range, start=positions, end=positions)
suggestions = st.builds(Suggestion, range=ranges, text=st.text(max_size=20))
paths = st.sampled_from(["a.go", "pkg/b.go", "cmd/main.go"])


@st.composite
def comments(draw):
    diagnostic = Diagnostic(
        message=draw(st.text(min_size=1, max_size=30)),
        location=Location(path=draw(paths), range=draw(ranges)),
        suggestions=draw(st.lists(suggestions, max_size=4)),
    )
    return Comment(
        diagnostic=diagnostic,
        in_diff_file=draw(st.booleans()),
        first_suggestion_in_diff_context=draw(st.booleans()),
        should_report=draw(st.booleans()),
    )


class TestCommentMapping:
    """Property tests for build_review."""

    @given(st.lists(comments(), max_size=20))
    def test_only_reportable_in_diff_comments_are_emitted(self, batch):
        review = build_review(batch, RUN_INFO)

        expected = [c for c in batch if c.in_diff_file and c.should_report]
        assert review.total_comments == len(expected)

        for path, entries in review.robot_comments.items():
            assert [e.message for e in entries] == [
                c.diagnostic.message for c in expected if c.path == path
            ]

    @given(comments())
    def test_anchor_and_offsets(self, comment):
        comment.in_diff_file = True
        comment.should_report = True

        entry = build_review([comment], RUN_INFO).robot_comments[comment.path][0]
        diagnostic_suggestions = comment.diagnostic.suggestions

        if comment.first_suggestion_in_diff_context and diagnostic_suggestions:
            first = diagnostic_suggestions[0].range
            assert entry.line is None
            assert entry.range.start_line == first.start.line
            assert entry.range.start_character == first.start.column - 1
            assert entry.range.end_line == first.end.line
            assert entry.range.end_character == first.end.column - 1
        else:
            assert entry.range is None
            assert entry.line == comment.diagnostic.start_line

    @given(comments())
    def test_fix_suggestions_preserve_order(self, comment):
        comment.in_diff_file = True
        comment.should_report = True

        entry = build_review([comment], RUN_INFO).robot_comments[comment.path][0]
        replacements = [f.replacements[0] for f in entry.fix_suggestions]

        assert len(replacements) == len(comment.diagnostic.suggestions)
        for replacement, suggestion in zip(replacements, comment.diagnostic.suggestions):
            assert replacement.path == comment.path
            assert replacement.replacement == suggestion.text
            assert replacement.range.start_character == suggestion.range.start.column - 1
            assert replacement.range.end_character == suggestion.range.end.column - 1

    @given(st.text(alphabet="abc./_", min_size=1, max_size=30))
    def test_empty_workdir_leaves_path_unchanged(self, path):
        assert join_workdir("", path) == path
