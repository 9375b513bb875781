"""Pydantic models for API I/O."""

from .optimize import (
    BatchFailureResponse,
    OptimizeBatchResponse,
    OptimizeResponse,
    VerificationResponse,
    ViolationResponse,
)

__all__ = [
    "BatchFailureResponse",
    "OptimizeBatchResponse",
    "OptimizeResponse",
    "VerificationResponse",
    "ViolationResponse",
]
