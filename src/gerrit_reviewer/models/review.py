"""
Review Data Models

Gerrit REST API payload for robot comments:
    https://gerrit-review.googlesource.com/Documentation/rest-api-changes.html#review-input

Character offsets are 0-based, line numbers are 1-based.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, field_validator, model_validator


class CommentRange(BaseModel):
    """Gerrit CommentRange"""
    start_line: int
    start_character: int
    end_line: int
    end_character: int

    @field_validator('start_line', 'end_line')
    @classmethod
    def validate_lines(cls, v):
        if v < 0:
            raise ValueError('Line numbers must be non-negative')
        return v


class FixReplacementInfo(BaseModel):
    """Gerrit FixReplacementInfo"""
    path: str
    range: CommentRange
    replacement: str


class FixSuggestionInfo(BaseModel):
    """Gerrit FixSuggestionInfo"""
    description: str = "suggestion"
    replacements: List[FixReplacementInfo]


class RobotCommentInput(BaseModel):
    """Gerrit RobotCommentInput. Exactly one of line or range is set."""
    message: str
    line: Optional[int] = None
    range: Optional[CommentRange] = None
    robot_id: str
    robot_run_id: str = ""
    url: str = ""
    fix_suggestions: List[FixSuggestionInfo] = []

    @model_validator(mode='after')
    def validate_anchor(self):
        if (self.line is None) == (self.range is None):
            raise ValueError('Exactly one of line or range must be set')
        return self


class ReviewInput(BaseModel):
    """Gerrit ReviewInput carrying robot comments keyed by repository path"""
    robot_comments: Dict[str, List[RobotCommentInput]] = {}

    @property
    def total_comments(self) -> int:
        return sum(len(comments) for comments in self.robot_comments.values())

    def to_payload(self) -> Dict:
        """JSON-ready dict with unset optional fields dropped"""
        return self.model_dump(exclude_none=True)
