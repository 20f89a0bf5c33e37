"""
Construction-time configuration for LayersModel.

Values are treated as immutable for the lifetime of a model. `from_env()`
reads GH_* environment variables; malformed values fall back to the defaults,
and the resulting config is always validated.

Environment:
    GH_EQ_THRESHOLD=0.004   (W/m^2) |net flux| below which a layer may be at equilibrium
    GH_EQ_TIME=2.0          (s) dwell time below the threshold before the flag is set
    GH_BALANCE_THRESHOLD=1.0 (W/m^2) top-of-atmosphere radiative balance tolerance
    GH_MAX_DT=0.5           (s) largest dt accepted by tick()
    GH_INITIALLY_SHINING=0
    GH_TEMP_UNITS=C         (K|C|F)
    GH_MAX_LAYERS=3
    GH_ACTIVE_LAYERS=1
    GH_IR_ABSORPTION=1.0    default infrared absorption of atmosphere layers
    GH_CS_GROUND=120        (J/K)
    GH_CS_LAYER=60          (J/K)
    GH_T_INIT=0.0           (K) initial temperature of every layer
    GH_RATE_WINDOW=1.0      (s)
    GH_LAYERS_DIAG=0        print [Layers] diagnostics
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from . import constants as const
from .temperature import TemperatureUnits


@dataclass(frozen=True)
class LayersModelConfig:
    at_equilibrium_threshold: float = 0.004
    at_equilibrium_time: float = 2.0
    radiative_balance_threshold: float = 1.0
    max_dt: float = 0.5
    initially_shining: bool = False
    default_temperature_units: TemperatureUnits = TemperatureUnits.CELSIUS
    max_atmosphere_layers: int = const.MAX_ATMOSPHERE_LAYERS
    initial_active_layers: int = 1
    default_infrared_absorption: float = 1.0
    ground_heat_capacity: float = const.GROUND_HEAT_CAPACITY
    layer_heat_capacity: float = const.LAYER_HEAT_CAPACITY
    initial_temperature: float = 0.0
    rate_window_s: float = 1.0
    diag: bool = False

    def __post_init__(self) -> None:
        # Accept "K"/"C"/"F" strings as well as enum members
        object.__setattr__(
            self, "default_temperature_units", TemperatureUnits.parse(self.default_temperature_units)
        )
        if not self.at_equilibrium_threshold > 0.0:
            raise ValueError("at_equilibrium_threshold must be positive.")
        if not self.at_equilibrium_time >= 0.0:
            raise ValueError("at_equilibrium_time must be non-negative.")
        if not self.radiative_balance_threshold > 0.0:
            raise ValueError("radiative_balance_threshold must be positive.")
        if not self.max_dt > 0.0:
            raise ValueError("max_dt must be positive.")
        if self.max_atmosphere_layers < 0:
            raise ValueError("max_atmosphere_layers must be non-negative.")
        if not 0 <= self.initial_active_layers <= self.max_atmosphere_layers:
            raise ValueError(
                f"initial_active_layers must be in [0, {self.max_atmosphere_layers}], "
                f"got {self.initial_active_layers}."
            )
        if not 0.0 <= self.default_infrared_absorption <= 1.0:
            raise ValueError("default_infrared_absorption must be in [0, 1].")
        if not (self.ground_heat_capacity > 0.0 and self.layer_heat_capacity > 0.0):
            raise ValueError("Heat capacities must be positive.")
        if not self.initial_temperature >= 0.0:
            raise ValueError("initial_temperature must be non-negative (Kelvin).")
        if not self.rate_window_s > 0.0:
            raise ValueError("rate_window_s must be positive.")

    @classmethod
    def from_env(cls) -> LayersModelConfig:
        def _f(name: str, default: float) -> float:
            try:
                return float(os.getenv(name, str(default)))
            except Exception:
                return default

        def _i(name: str, default: int) -> int:
            try:
                return int(os.getenv(name, str(default)))
            except Exception:
                return default

        def _b(name: str, default: bool) -> bool:
            try:
                return int(os.getenv(name, "1" if default else "0")) == 1
            except Exception:
                return default

        units = os.getenv("GH_TEMP_UNITS", "C").strip().upper()
        if units not in ("K", "C", "F"):
            units = "C"

        max_layers = _i("GH_MAX_LAYERS", const.MAX_ATMOSPHERE_LAYERS)
        return cls(
            at_equilibrium_threshold=_f("GH_EQ_THRESHOLD", 0.004),
            at_equilibrium_time=_f("GH_EQ_TIME", 2.0),
            radiative_balance_threshold=_f("GH_BALANCE_THRESHOLD", 1.0),
            max_dt=_f("GH_MAX_DT", 0.5),
            initially_shining=_b("GH_INITIALLY_SHINING", False),
            default_temperature_units=TemperatureUnits(units),
            max_atmosphere_layers=max_layers,
            initial_active_layers=min(_i("GH_ACTIVE_LAYERS", 1), max(0, max_layers)),
            default_infrared_absorption=_f("GH_IR_ABSORPTION", 1.0),
            ground_heat_capacity=_f("GH_CS_GROUND", const.GROUND_HEAT_CAPACITY),
            layer_heat_capacity=_f("GH_CS_LAYER", const.LAYER_HEAT_CAPACITY),
            initial_temperature=_f("GH_T_INIT", 0.0),
            rate_window_s=_f("GH_RATE_WINDOW", 1.0),
            diag=_b("GH_LAYERS_DIAG", False),
        )


__all__ = ["LayersModelConfig"]
