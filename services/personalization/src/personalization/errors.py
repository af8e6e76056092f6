"""Error taxonomy for the placement and publication pipeline.

Each error carries the HTTP status and machine code it is surfaced with at the
request boundary (see ``personalization.app``).
"""

from __future__ import annotations


class PipelineError(Exception):
    status_code = 500
    code = "pipeline_error"

    def __init__(self, message: str | None = None):
        self.message = message or self.code.replace("_", " ")
        super().__init__(self.message)


class NotFound(PipelineError):
    status_code = 404
    code = "not_found"


class Forbidden(PipelineError):
    status_code = 403
    code = "forbidden"


class InvalidGeometry(PipelineError):
    status_code = 422
    code = "invalid_geometry"


class InvalidTransition(PipelineError):
    status_code = 409
    code = "invalid_transition"


class MissingPlacement(InvalidTransition):
    code = "missing_placement"


class MissingReason(PipelineError):
    status_code = 400
    code = "missing_reason"


class BypassDisabled(PipelineError):
    status_code = 403
    code = "bypass_disabled"


__all__ = [
    "PipelineError",
    "NotFound",
    "Forbidden",
    "InvalidGeometry",
    "InvalidTransition",
    "MissingPlacement",
    "MissingReason",
    "BypassDisabled",
]
