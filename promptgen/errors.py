from typing import Optional


class PipelineError(Exception):
    """Base class for failures that abort a whole pipeline run."""


class InvalidInput(PipelineError):
    """The problem text is empty or blank. Raised before any network call."""


class UpstreamError(PipelineError):
    """The completion service could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class SchemaViolation(PipelineError):
    """Model output is not valid JSON or does not satisfy its stage schema."""

    def __init__(self, type_name: str, raw: str, reason: str):
        super().__init__(f"{type_name} is not valid JSON for its schema: {reason}\nRaw:\n{raw}")
        self.type_name = type_name
        self.raw = raw
        self.reason = reason
