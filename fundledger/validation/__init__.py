"""Request validation package."""

from fundledger.validation.params import parse_criteria

__all__ = ["parse_criteria"]
