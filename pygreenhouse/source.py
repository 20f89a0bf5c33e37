"""
SunEnergySource: visible light entering at the top of the atmosphere.

Output per step is OUTPUT_ENERGY_RATE * area * multiplier * dt, delivered as a
single downward visible packet at HEIGHT_OF_ATMOSPHERE.
"""

from __future__ import annotations

import numpy as np

from . import constants as const
from .packets import EMEnergyPacket, EnergyDirection, WavelengthBand
from .rate_tracker import DEFAULT_WINDOW_S, EnergyRateTracker


class SunEnergySource:
    def __init__(
        self,
        surface_area: float = const.SURFACE_AREA,
        *,
        initially_shining: bool = False,
        rate_window_s: float = DEFAULT_WINDOW_S,
    ) -> None:
        self.surface_area = float(surface_area)
        self._initially_shining = bool(initially_shining)
        self.output_energy_rate_tracker = EnergyRateTracker(rate_window_s)
        self.is_shining = self._initially_shining
        self.proportionate_output_rate = 1.0

    def set_shining(self, shining: bool) -> None:
        self.is_shining = bool(shining)

    def set_proportionate_output_rate(self, value: float) -> float:
        """Set the output multiplier, clamped to OUTPUT_PROPORTION_RANGE; return the value used."""
        if not np.isfinite(value):
            raise ValueError(f"Output multiplier must be finite, got {value!r}.")
        lo, hi = const.OUTPUT_PROPORTION_RANGE
        self.proportionate_output_rate = float(np.clip(value, lo, hi))
        return self.proportionate_output_rate

    def produce_energy(self, dt: float, state) -> float:
        """
        Append this step's packet to `state.packets` and return its energy.

        `state` is the model's SimulationState; nothing is produced while dark.
        """
        if not self.is_shining:
            return 0.0
        energy = const.OUTPUT_ENERGY_RATE * self.surface_area * self.proportionate_output_rate * dt
        self.output_energy_rate_tracker.add_energy_info(energy, dt)
        state.packets.append(
            EMEnergyPacket(
                WavelengthBand.VISIBLE,
                energy,
                const.HEIGHT_OF_ATMOSPHERE,
                EnergyDirection.DOWN,
            )
        )
        return energy

    def get_output_energy_rate(self) -> float:
        """Instantaneous output in W/m^2 (not averaged)."""
        return const.OUTPUT_ENERGY_RATE * self.proportionate_output_rate if self.is_shining else 0.0

    def get_average_output_rate(self) -> float:
        """Windowed average output in W."""
        return self.output_energy_rate_tracker.get_average_rate()

    def reset(self) -> None:
        self.output_energy_rate_tracker.reset()
        self.is_shining = self._initially_shining
        self.proportionate_output_rate = 1.0


__all__ = ["SunEnergySource"]
