"""
Temperature units and the qualitative temperature scale.

Pure functions only. Collaborators that display temperatures pick the units;
the model itself always works in Kelvin.
"""

from __future__ import annotations

from enum import Enum

from .constants import TEMPERATURE_LEVEL_THRESHOLDS, ZERO_CELSIUS_K


class TemperatureUnits(Enum):
    KELVIN = "K"
    CELSIUS = "C"
    FAHRENHEIT = "F"

    @classmethod
    def parse(cls, value: TemperatureUnits | str) -> TemperatureUnits:
        if isinstance(value, TemperatureUnits):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError as err:
            raise ValueError(f"Unknown temperature units {value!r}; expected one of K, C, F.") from err


class TemperatureLevel(Enum):
    EXTREMELY_LOW = 0
    VERY_LOW = 1
    LOW = 2
    MODERATE = 3
    HIGH = 4
    VERY_HIGH = 5
    EXTREMELY_HIGH = 6


class EnergyFlow(Enum):
    INFLOW = "inflow"  # net energy flowing into the earth system
    OUTFLOW = "outflow"  # net energy flowing out to space
    BALANCED = "balanced"


def kelvin_to_celsius(kelvin: float) -> float:
    return kelvin - ZERO_CELSIUS_K


def kelvin_to_fahrenheit(kelvin: float) -> float:
    return kelvin_to_celsius(kelvin) * 9.0 / 5.0 + 32.0


def convert_temperature(kelvin: float, units: TemperatureUnits | str) -> float:
    units = TemperatureUnits.parse(units)
    if units is TemperatureUnits.KELVIN:
        return kelvin
    if units is TemperatureUnits.CELSIUS:
        return kelvin_to_celsius(kelvin)
    return kelvin_to_fahrenheit(kelvin)


def temperature_level(kelvin: float) -> TemperatureLevel:
    """
    Place a surface temperature on the seven-step qualitative scale.

    Each threshold is the inclusive lower bound of the next level, so 283 K is
    MODERATE while 282.9 K is LOW.
    """
    level = 0
    for i, threshold in enumerate(TEMPERATURE_LEVEL_THRESHOLDS):
        if kelvin >= threshold:
            level = i + 1
    return TemperatureLevel(level)


def energy_flow(net_inflow: float, in_radiative_balance: bool) -> EnergyFlow:
    """Direction of the net energy flow at the top of the atmosphere."""
    if in_radiative_balance:
        return EnergyFlow.BALANCED
    return EnergyFlow.INFLOW if net_inflow > 0.0 else EnergyFlow.OUTFLOW


__all__ = [
    "TemperatureUnits",
    "TemperatureLevel",
    "EnergyFlow",
    "kelvin_to_celsius",
    "kelvin_to_fahrenheit",
    "convert_temperature",
    "temperature_level",
    "energy_flow",
]
