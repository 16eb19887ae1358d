# app/domain/errors.py
from __future__ import annotations


class RentGridError(Exception):
    """Base class for errors raised by the heat-map engine."""


class ConfigurationError(RentGridError, ValueError):
    """
    Fatal setup problem detected at construction time:
      - degenerate boundary ring (< 3 vertices)
      - zero/negative cell size, inverted bounding box
      - empty price list handed to the color scale builder
    """


class UpstreamFetchFailure(RentGridError):
    """
    The listing data source could not produce a batch (network, store, bad payload).
    Callers substitute the synthetic sample batch instead of propagating it.
    """

    def __init__(self, source: str, detail: str) -> None:
        super().__init__(f"{source}: {detail}")
        self.source = source
        self.detail = detail
