"""
layer.py

A horizontal slab that absorbs and emits energy (the ground is one too).

Per model step, after packets have been advanced:
  1. absorb(packet) for every packet that crossed the layer:
        absorbed = E_packet * a[band]         (a: per-band absorption table)
  2. finalize_step(dt):
        E_emit = sigma * T^4 * A * dt         (T before this step's update)
        atmosphere layer -> two IR packets of E_emit/2, one up and one down
        ground           -> one IR packet of E_emit, up only
  3.    T <- max(0, T + (E_abs - E_emit) / C)
  4. equilibrium hysteresis on F = (E_abs - E_emit) / (A dt)  (W/m^2):
        |F| < threshold accumulates dt; the flag is set once the dwell
        reaches at_equilibrium_time. Any step at or above the threshold
        clears both flag and dwell.

Emitted packets carry `emitted_by = index` and are only appended to the live
collection by the orchestrator after the interaction pass, so they start
moving one step later.
"""

from __future__ import annotations

import numpy as np

from . import constants as const
from .packets import EMEnergyPacket, EnergyDirection, WavelengthBand


class AbsorbingEmittingLayer:
    """
    One absorbing/emitting layer.

    Parameters
    ----------
    index : int
        Position in the model's layer stack (0 is the ground).
    altitude : float
        Fixed altitude (m).
    absorption : dict[WavelengthBand, float]
        Absorption proportion per band, each in [0, 1]. Missing bands absorb 0.
    heat_capacity : float
        J/K for the whole layer.
    emits_downward : bool
        False for the ground, which radiates upward only.
    initial_temperature : float
        Temperature (K) at construction and after reset().
    """

    def __init__(
        self,
        index: int,
        altitude: float,
        absorption: dict[WavelengthBand, float] | None = None,
        *,
        heat_capacity: float = const.LAYER_HEAT_CAPACITY,
        surface_area: float = const.SURFACE_AREA,
        emits_downward: bool = True,
        initial_temperature: float = 0.0,
        at_equilibrium_threshold: float = 0.004,
        at_equilibrium_time: float = 2.0,
    ) -> None:
        if not heat_capacity > 0.0:
            raise ValueError(f"heat_capacity must be positive, got {heat_capacity!r}.")
        if not surface_area > 0.0:
            raise ValueError(f"surface_area must be positive, got {surface_area!r}.")
        if not initial_temperature >= 0.0:
            raise ValueError(f"initial_temperature must be >= 0 K, got {initial_temperature!r}.")

        self.index = index
        self.altitude = float(altitude)
        self.heat_capacity = float(heat_capacity)
        self.surface_area = float(surface_area)
        self.emits_downward = emits_downward
        self.initial_temperature = float(initial_temperature)
        self.at_equilibrium_threshold = float(at_equilibrium_threshold)
        self.at_equilibrium_time = float(at_equilibrium_time)

        self._absorption = {band: 0.0 for band in WavelengthBand}
        for band, proportion in (absorption or {}).items():
            self.set_absorption_proportion(band, proportion)

        self.is_active = True
        self.reset()

    # ---- configuration ----
    def absorption_proportion(self, band: WavelengthBand) -> float:
        return self._absorption[band]

    def set_absorption_proportion(self, band: WavelengthBand, proportion: float) -> None:
        if not 0.0 <= proportion <= 1.0:
            raise ValueError(f"Absorption proportion must be in [0, 1], got {proportion!r}.")
        self._absorption[WavelengthBand(band)] = float(proportion)

    # ---- state ----
    def reset(self) -> None:
        self.temperature = self.initial_temperature
        self.step_absorbed = 0.0
        self.step_emitted = 0.0
        self.net_flux = 0.0  # W/m^2 of the last finalized step
        self.total_absorbed = 0.0
        self.total_emitted = 0.0
        self.time_below_threshold = 0.0
        self.at_equilibrium = False

    @property
    def retained_energy(self) -> float:
        """Energy absorbed minus energy emitted since construction or reset (J)."""
        return self.total_absorbed - self.total_emitted

    # ---- per-step procedure ----
    def crossed_by(self, packet: EMEnergyPacket) -> bool:
        """True if the packet's last advance took it across this altitude."""
        if packet.emitted_by == self.index:
            return False
        if packet.moving_up:
            return packet.previous_altitude < self.altitude <= packet.altitude
        return packet.altitude <= self.altitude < packet.previous_altitude

    def absorb(self, packet: EMEnergyPacket) -> float:
        """Take this layer's share of the packet's energy; return the amount taken."""
        absorbed = packet.energy * self._absorption[packet.band]
        if absorbed > 0.0 and packet.energy - absorbed < const.NEGLIGIBLE_ENERGY:
            absorbed = packet.energy
        packet.energy -= absorbed
        self.step_absorbed += absorbed
        return absorbed

    def blackbody_energy(self, dt: float) -> float:
        """sigma * T^4 * A * dt at the current temperature (J)."""
        return const.SIGMA * self.temperature**4 * self.surface_area * dt

    def finalize_step(self, dt: float) -> list[EMEnergyPacket]:
        """Emit, update temperature and equilibrium state; return the new packets."""
        emitted = self.blackbody_energy(dt)
        packets: list[EMEnergyPacket] = []
        if emitted > 0.0:
            if self.emits_downward:
                for direction in (EnergyDirection.UP, EnergyDirection.DOWN):
                    packets.append(
                        EMEnergyPacket(
                            WavelengthBand.INFRARED, emitted / 2.0, self.altitude, direction,
                            emitted_by=self.index,
                        )
                    )
            else:
                packets.append(
                    EMEnergyPacket(
                        WavelengthBand.INFRARED, emitted, self.altitude, EnergyDirection.UP,
                        emitted_by=self.index,
                    )
                )

        absorbed = self.step_absorbed
        net = absorbed - emitted
        self.step_emitted = emitted
        self.total_absorbed += absorbed
        self.total_emitted += emitted

        self.temperature = max(0.0, self.temperature + net / self.heat_capacity)
        assert np.isfinite(self.temperature), f"layer {self.index}: non-finite temperature"

        self.net_flux = net / (dt * self.surface_area)
        self._update_equilibrium(dt)

        self.step_absorbed = 0.0
        return packets

    def _update_equilibrium(self, dt: float) -> None:
        if abs(self.net_flux) < self.at_equilibrium_threshold:
            self.time_below_threshold += dt
            if self.time_below_threshold >= self.at_equilibrium_time:
                self.at_equilibrium = True
        else:
            self.time_below_threshold = 0.0
            self.at_equilibrium = False

    def __repr__(self) -> str:
        return (
            f"AbsorbingEmittingLayer(index={self.index}, altitude={self.altitude:.0f} m, "
            f"T={self.temperature:.2f} K, active={self.is_active})"
        )


__all__ = ["AbsorbingEmittingLayer"]
