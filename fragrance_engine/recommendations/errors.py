"""
Failure taxonomy of the ranking pipeline.

A missing preference field or a user without history is not an error:
both simply contribute zero to the affected factor.
"""
from __future__ import annotations


class RecommendationError(Exception):
    """Base class for failures raised below the engine boundary."""


class ModelUnavailable(RecommendationError):
    """The trained scorer could not be loaded or did not answer in time."""


class ComputationFault(RecommendationError):
    """Scoring or boosting could not be computed for this request."""
