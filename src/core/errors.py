"""Typed error taxonomy for reranking.

Every failure carries a stable ``code`` and the HTTP status it maps to, so the
API layer can render it without inspecting messages.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class RerankError(Exception):
    """Base class for all reranking failures."""

    code = "rerank_error"
    http_status = 500

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = dict(context or {})

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.context:
            payload["context"] = self.context
        return payload


class UnsupportedModeError(RerankError):
    code = "unsupported_mode"
    http_status = 400


class NoRerankerModelError(RerankError):
    code = "no_reranker_model"
    http_status = 404


class NoModelAvailableError(RerankError):
    code = "no_model_available"
    http_status = 404


class LockAcquisitionError(RerankError):
    code = "lock_acquisition_failed"
    http_status = 500


class MetadataUpdateError(RerankError):
    code = "metadata_update_failed"
    http_status = 500


class BackendError(RerankError):
    """Failure reported by the execution graph backend."""

    http_status = 502


class SetInputError(BackendError):
    code = "set_input_failed"


class ComputeError(BackendError):
    code = "compute_failed"


class InvalidOutputEncodingError(BackendError):
    code = "invalid_output_encoding"


class MalformedScorePayloadError(BackendError):
    code = "malformed_score_payload"


__all__ = [
    "BackendError",
    "ComputeError",
    "InvalidOutputEncodingError",
    "LockAcquisitionError",
    "MalformedScorePayloadError",
    "MetadataUpdateError",
    "NoModelAvailableError",
    "NoRerankerModelError",
    "RerankError",
    "SetInputError",
    "UnsupportedModeError",
]
