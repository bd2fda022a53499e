from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any
from enum import Enum


class Feature(str, Enum):
    TEST_CASES = "testcases"
    BUG_ANALYSIS = "bug-analysis"
    BUG_REPORT = "bug-report"
    RELEASE_NOTES = "release-notes"


class BugSeverity(str, Enum):
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


# Generation requests. Required fields are Optional here so that a missing
# field is reported by the gateway as a 400 rather than by FastAPI as a 422.

class GenerateTestCasesRequest(BaseModel):
    description: Optional[str] = Field(None, description="Feature or requirement to derive test cases from")


class AnalyzeBugRequest(BaseModel):
    description: Optional[str] = Field(None, description="Free-form bug description")


class GenerateBugReportRequest(BaseModel):
    description: Optional[str] = Field(None, description="Free-form bug description")
    severity: Optional[str] = Field(None, description="Severity to state in the report")


class GenerateReleaseNotesRequest(BaseModel):
    input: Optional[str] = Field(None, description="Commit messages or changelog")


class GenerationResult(BaseModel):
    raw_text: Optional[str] = None
    parsed: Optional[Any] = None
    structured: bool = False

    @property
    def value(self) -> Any:
        """Parsed JSON when the feature expects it and parsing worked, else the raw text."""
        if self.structured:
            return self.parsed
        return self.raw_text


# API probe

class ProbeRequest(BaseModel):
    method: str = Field(default="GET", description="HTTP method to send")
    url: Optional[str] = Field(None, description="Target URL")
    headers: Dict[str, Any] = Field(default_factory=dict)
    body: Optional[Any] = Field(None, description="Request body; non-strings are sent as JSON")


class ProbeResult(BaseModel):
    status: int
    status_text: str = Field(..., alias="statusText")
    headers: Dict[str, str] = Field(default_factory=dict)
    body: str = ""
    elapsed_millis: int = Field(..., ge=0, alias="responseTime")

    class Config:
        populate_by_name = True


# Normalized display shapes

class BugAnalysis(BaseModel):
    severity: BugSeverity = BugSeverity.MEDIUM
    category: str = "General"
    summary: str = ""
    steps: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class NormalizedTestCase(BaseModel):
    title: str
    steps: List[str] = Field(default_factory=list)
    expected_result: str = ""
    priority: Optional[str] = None


class BugReportSections(BaseModel):
    title: str = ""
    severity: str = ""
    description: str = ""
    steps: List[str] = Field(default_factory=list)
    expected: str = ""
    actual: str = ""
    environment: str = ""
    suggestions: List[str] = Field(default_factory=list)


class NormalizeRequest(BaseModel):
    content: Optional[Any] = Field(None, description="Whatever a generation route returned")


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


# OpenAPI error documentation shared by the feature routes
ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Missing or malformed request field"},
    500: {"model": ErrorResponse, "description": "Upstream or internal failure"},
}
