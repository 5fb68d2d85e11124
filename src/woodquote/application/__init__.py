"""Application layer - use cases and orchestration."""

from .estimate import EstimateCommand, nest_and_price

__all__ = [
    "EstimateCommand",
    "nest_and_price",
]
