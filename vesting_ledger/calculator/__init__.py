"""Vesting calculation module."""

from .vesting import (
    VestingCalculator,
    calc_linear_vested,
    calc_vested_amount,
    calc_vested_to_date,
)

__all__ = [
    "VestingCalculator",
    "calc_linear_vested",
    "calc_vested_amount",
    "calc_vested_to_date",
]
