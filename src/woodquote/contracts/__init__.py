"""Contracts module - protocols and DTOs shared across layers."""

from .dtos import EstimateResult as EstimateResult
from .protocols import PanelTemplate as PanelTemplate, PriceLookup as PriceLookup

__all__ = ["EstimateResult", "PanelTemplate", "PriceLookup"]
