"""Error response schemas.

All error responses use the same envelope: {"error": {"code": "...", "message": "..."}}.
Exception handlers in main.py build them with ErrorResponse.build().
"""

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Inner error object with a machine-readable code and human-readable message."""

    code: str
    message: str


class ErrorResponse(BaseModel):
    """Top-level error envelope returned by all error responses."""

    error: ErrorDetail

    @classmethod
    def build(cls, code: str, message: str) -> dict[str, object]:
        """Return the envelope as a plain dict, ready for JSONResponse."""
        return cls(error=ErrorDetail(code=code, message=message)).model_dump()
