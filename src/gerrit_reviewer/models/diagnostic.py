"""
Diagnostic Data Models

Analysis findings and the comments that wrap them on their way to Gerrit.
Lines and columns are 1-based throughout this module.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, field_validator


logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Diagnostic severity, ordered from least to most severe by rank()"""
    UNKNOWN_SEVERITY = "UNKNOWN_SEVERITY"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"

    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.UNKNOWN_SEVERITY: 0,
    Severity.INFO: 1,
    Severity.WARNING: 2,
    Severity.ERROR: 3,
}


@dataclass
class Position:
    """Source position. column 0 means the column is unknown."""
    line: int
    column: int = 0

    def __post_init__(self):
        if self.line < 0 or self.column < 0:
            raise ValueError("Line and column must be non-negative")


@dataclass
class Range:
    """Source range; end is optional in producer output and defaults to start"""
    start: Position
    end: Optional[Position] = None

    def __post_init__(self):
        if self.end is None:
            self.end = Position(line=self.start.line, column=self.start.column)


@dataclass
class Location:
    """File location. path is relative to the analysis working directory."""
    path: str
    range: Range


@dataclass
class Suggestion:
    """Replacement text proposed for exactly the given range"""
    range: Range
    text: str


@dataclass
class Source:
    """Tool that produced a diagnostic"""
    name: str
    url: Optional[str] = None


@dataclass
class Diagnostic:
    """A single analysis finding"""
    message: str
    location: Optional[Location]
    severity: Severity = Severity.UNKNOWN_SEVERITY
    source: Optional[Source] = None
    code: Optional[str] = None
    suggestions: List[Suggestion] = field(default_factory=list)

    @property
    def start_line(self) -> int:
        return self.location.range.start.line


@dataclass
class Comment:
    """
    A diagnostic plus the diff classification made for it.

    in_diff_file, first_suggestion_in_diff_context and should_report are
    set by the classifier (see review.filter) before the comment is posted.
    """
    diagnostic: Diagnostic
    in_diff_file: bool = False
    first_suggestion_in_diff_context: bool = False
    should_report: bool = True
    tool_name: str = ""

    @property
    def path(self) -> str:
        return self.diagnostic.location.path


# Pydantic models for rdjson / rdjsonl input
class PositionRequest(BaseModel):
    line: int = 0
    column: int = 0

    @field_validator('line', 'column')
    @classmethod
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError('Line and column must be non-negative')
        return v


class RangeRequest(BaseModel):
    start: PositionRequest
    end: Optional[PositionRequest] = None


class LocationRequest(BaseModel):
    path: str
    range: Optional[RangeRequest] = None

    @field_validator('path')
    @classmethod
    def validate_path(cls, v):
        if not v.strip():
            raise ValueError('Location path cannot be empty')
        return v


class SuggestionRequest(BaseModel):
    range: RangeRequest
    text: str = ""


class SourceRequest(BaseModel):
    name: str
    url: Optional[str] = None


class CodeRequest(BaseModel):
    value: str = ""
    url: Optional[str] = None


class DiagnosticRequest(BaseModel):
    """One rdjson diagnostic as emitted by linters and reviewdog adapters"""
    message: str
    location: LocationRequest
    severity: Severity = Severity.UNKNOWN_SEVERITY
    source: Optional[SourceRequest] = None
    code: Optional[CodeRequest] = None
    suggestions: List[SuggestionRequest] = []

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(
            message=self.message,
            location=Location(
                path=self.location.path,
                range=_to_range(self.location.range or RangeRequest(start=PositionRequest())),
            ),
            severity=self.severity,
            source=Source(name=self.source.name, url=self.source.url) if self.source else None,
            code=self.code.value if self.code and self.code.value else None,
            suggestions=[
                Suggestion(range=_to_range(s.range), text=s.text) for s in self.suggestions
            ],
        )


class DiagnosticResultRequest(BaseModel):
    """rdjson document: a list of diagnostics from one source"""
    source: Optional[SourceRequest] = None
    diagnostics: List[DiagnosticRequest] = []


def _to_range(r: RangeRequest) -> Range:
    start = Position(line=r.start.line, column=r.start.column)
    end = Position(line=r.end.line, column=r.end.column) if r.end else None
    return Range(start=start, end=end)


def parse_rdjsonl(text: str) -> List[Diagnostic]:
    """
    Parse rdjsonl (one diagnostic JSON object per line).

    Args:
        text: rdjsonl document

    Returns:
        Diagnostics in input order

    Raises:
        pydantic.ValidationError: For malformed diagnostics
    """
    diagnostics = []
    for line in text.splitlines():
        if not line.strip():
            continue
        diagnostics.append(DiagnosticRequest.model_validate_json(line).to_diagnostic())
    logger.debug(f"Parsed {len(diagnostics)} rdjsonl diagnostics")
    return diagnostics


def parse_rdjson(text: str) -> List[Diagnostic]:
    """
    Parse an rdjson document. The document-level source is applied to
    diagnostics that carry none of their own.
    """
    result = DiagnosticResultRequest.model_validate(json.loads(text))
    diagnostics = []
    for d in result.diagnostics:
        diagnostic = d.to_diagnostic()
        if diagnostic.source is None and result.source is not None:
            diagnostic.source = Source(name=result.source.name, url=result.source.url)
        diagnostics.append(diagnostic)
    return diagnostics


def parse_diagnostics(text: str) -> List[Diagnostic]:
    """
    Parse either an rdjson document or rdjsonl lines.

    A single JSON object with a "diagnostics" key is read as rdjson;
    anything else is read line by line as rdjsonl.

    Args:
        text: rdjson or rdjsonl input

    Returns:
        Diagnostics in input order
    """
    stripped = text.strip()
    if not stripped:
        return []
    try:
        document = json.loads(stripped)
    except ValueError:
        # More than one line of rdjsonl
        return parse_rdjsonl(text)
    if isinstance(document, dict) and 'diagnostics' in document:
        return parse_rdjson(stripped)
    return parse_rdjsonl(text)
