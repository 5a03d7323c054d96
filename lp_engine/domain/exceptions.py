from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class InvalidTickError(DomainError):
    """Tick outside [MIN_TICK, MAX_TICK]."""


class InvalidSqrtPriceError(DomainError):
    """sqrtPriceX96 outside the representable ratio bounds."""


class InvalidPositionInputError(DomainError):
    """Invalid parameters for position valuation."""


class InvalidSimulationInputError(DomainError):
    """Invalid parameters for return simulation."""


class InvalidPortfolioInputError(DomainError):
    """Invalid parameters for portfolio aggregation."""
