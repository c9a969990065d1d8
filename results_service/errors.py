from __future__ import annotations

from typing import Any, Dict, Optional


class ResultsServiceError(Exception):
    """Base error rendered as ``{"error": message, **context}``."""

    status_code = 500

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = dict(context or {})

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        body.update(self.context)
        return body


class ValidationError(ResultsServiceError):
    status_code = 400


class NotFoundError(ResultsServiceError):
    status_code = 404
