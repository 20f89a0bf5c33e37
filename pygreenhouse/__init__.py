"""
pygreenhouse: packet-based radiative balance of a ground surface under a stack
of idealized atmospheric layers.

Typical use
-----------
from pygreenhouse import LayersModel, LayersModelConfig

model = LayersModel(LayersModelConfig(initial_active_layers=1))
model.set_source_shining(True)
model.run(600.0)
print(model.surface_temperature_in("C"))
"""

from __future__ import annotations

from .config import LayersModelConfig
from .layer import AbsorbingEmittingLayer
from .model import LayersModel, SimulationState, default_layer_altitudes
from .packets import EMEnergyPacket, EnergyDirection, WavelengthBand
from .rate_tracker import EnergyRateTracker
from .source import SunEnergySource
from .temperature import (
    EnergyFlow,
    TemperatureLevel,
    TemperatureUnits,
    convert_temperature,
    energy_flow,
    kelvin_to_celsius,
    kelvin_to_fahrenheit,
    temperature_level,
)

__all__ = [
    "LayersModelConfig",
    "AbsorbingEmittingLayer",
    "LayersModel",
    "SimulationState",
    "default_layer_altitudes",
    "EMEnergyPacket",
    "EnergyDirection",
    "WavelengthBand",
    "EnergyRateTracker",
    "SunEnergySource",
    "EnergyFlow",
    "TemperatureLevel",
    "TemperatureUnits",
    "convert_temperature",
    "energy_flow",
    "kelvin_to_celsius",
    "kelvin_to_fahrenheit",
    "temperature_level",
]
