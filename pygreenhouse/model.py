"""
model.py

LayersModel: orchestrator for the ground, the atmosphere layers, the sun and
the packets in flight.

One step(dt):
  1. sun.produce_energy(dt, state)           new visible packet at the top
  2. advance every live packet by PACKET_SPEED * dt
  3. downward packets meet active layers top-down, upward packets bottom-up;
     each crossing hands the layer its share of the packet's energy
  4. retire packets that are exhausted or have left through the top (the
     latter are added to the escaped-to-space ledger)
  5. every active layer emits and updates temperature/equilibrium; emitted
     packets join the live list only now, so they move from the next step on
  6. energy in/out rate trackers and the clock advance

The caller owns the clock: step() accepts any positive dt, tick() is the
clock-driven entry point that respects the running flag and max_dt.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from . import constants as const
from .config import LayersModelConfig
from .layer import AbsorbingEmittingLayer
from .packets import EMEnergyPacket, WavelengthBand
from .rate_tracker import EnergyRateTracker
from .source import SunEnergySource
from .temperature import TemperatureUnits, convert_temperature


@dataclass
class SimulationState:
    """Clock, live packets and energy ledgers (J) of one model run."""

    t_seconds: float = 0.0
    packets: list[EMEnergyPacket] = field(default_factory=list)
    produced: float = 0.0  # emitted by the sun
    escaped: float = 0.0  # left through the top of the atmosphere
    retired: float = 0.0  # held by layers when they were deactivated


def default_layer_altitudes(n_layers: int) -> np.ndarray:
    """Evenly spaced altitudes strictly between the ground and the top."""
    return np.linspace(0.0, const.HEIGHT_OF_ATMOSPHERE, n_layers + 2)[1:-1]


def _validate_altitudes(altitudes: Sequence[float]) -> list[float]:
    alts = [float(a) for a in altitudes]
    for a in alts:
        if not (np.isfinite(a) and 0.0 < a < const.HEIGHT_OF_ATMOSPHERE):
            raise ValueError(
                f"Layer altitude {a!r} must lie strictly between 0 and {const.HEIGHT_OF_ATMOSPHERE} m."
            )
    for lower, upper in zip(alts, alts[1:]):
        if not upper > lower:
            raise ValueError(f"Layer altitudes must be strictly increasing, got {alts}.")
    return alts


class LayersModel:
    """
    Ground + atmosphere layers driven by a sun.

    Parameters
    ----------
    config : LayersModelConfig, optional
        Defaults to LayersModelConfig().
    layer_altitudes : sequence of float, optional
        Explicit altitudes for the atmosphere layers (m, strictly increasing).
        When given, they replace config.max_atmosphere_layers evenly spaced ones.
    surface_area : float
        Area of every layer and of the sunlit patch (m^2).
    """

    def __init__(
        self,
        config: LayersModelConfig | None = None,
        *,
        layer_altitudes: Sequence[float] | None = None,
        surface_area: float = const.SURFACE_AREA,
    ) -> None:
        self.config = config or LayersModelConfig()
        cfg = self.config
        if layer_altitudes is None:
            layer_altitudes = default_layer_altitudes(cfg.max_atmosphere_layers)
        altitudes = _validate_altitudes(layer_altitudes)
        if cfg.initial_active_layers > len(altitudes):
            raise ValueError(
                f"initial_active_layers={cfg.initial_active_layers} exceeds the {len(altitudes)} layers given."
            )
        self.surface_area = float(surface_area)

        self.sun = SunEnergySource(
            self.surface_area,
            initially_shining=cfg.initially_shining,
            rate_window_s=cfg.rate_window_s,
        )

        layer_kwargs = dict(
            surface_area=self.surface_area,
            initial_temperature=cfg.initial_temperature,
            at_equilibrium_threshold=cfg.at_equilibrium_threshold,
            at_equilibrium_time=cfg.at_equilibrium_time,
        )
        self.ground = AbsorbingEmittingLayer(
            0,
            0.0,
            {WavelengthBand.VISIBLE: 1.0, WavelengthBand.INFRARED: 1.0},
            heat_capacity=cfg.ground_heat_capacity,
            emits_downward=False,
            **layer_kwargs,
        )
        self.atmosphere_layers = [
            AbsorbingEmittingLayer(
                i + 1,
                altitude,
                {WavelengthBand.VISIBLE: 0.0, WavelengthBand.INFRARED: cfg.default_infrared_absorption},
                heat_capacity=cfg.layer_heat_capacity,
                **layer_kwargs,
            )
            for i, altitude in enumerate(altitudes)
        ]
        self.layers: list[AbsorbingEmittingLayer] = [self.ground, *self.atmosphere_layers]

        self.energy_in_tracker = EnergyRateTracker(cfg.rate_window_s)
        self.energy_out_tracker = EnergyRateTracker(cfg.rate_window_s)

        self.state = SimulationState()
        self.is_running = False
        self.temperature_units = cfg.default_temperature_units
        self._apply_active_count(cfg.initial_active_layers)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------
    def step(self, dt: float) -> None:
        """Advance the model by dt seconds (dt > 0). The caller bounds dt."""
        if not dt > 0.0:
            raise ValueError(f"dt must be positive, got {dt!r}.")
        dt = float(dt)
        state = self.state

        produced = self.sun.produce_energy(dt, state)

        distance = const.PACKET_SPEED * dt
        for packet in state.packets:
            packet.advance(distance)

        active = self.active_layers
        downward = [p for p in state.packets if not p.moving_up]
        upward = [p for p in state.packets if p.moving_up]
        for layer in reversed(active):
            for packet in downward:
                if packet.energy > 0.0 and layer.crossed_by(packet):
                    layer.absorb(packet)
        for layer in active:
            for packet in upward:
                if packet.energy > 0.0 and layer.crossed_by(packet):
                    layer.absorb(packet)

        escaped = 0.0
        survivors: list[EMEnergyPacket] = []
        for packet in state.packets:
            packet.emitted_by = None
            if packet.energy <= 0.0:
                continue
            if packet.moving_up and packet.altitude >= const.HEIGHT_OF_ATMOSPHERE:
                escaped += packet.energy
                continue
            assert packet.altitude >= 0.0, "packet passed through the ground"
            survivors.append(packet)

        for layer in active:
            was_at_equilibrium = layer.at_equilibrium
            survivors.extend(layer.finalize_step(dt))
            if self.config.diag and layer.at_equilibrium != was_at_equilibrium:
                verb = "reached" if layer.at_equilibrium else "left"
                print(
                    f"[Layers] layer {layer.index} {verb} equilibrium at t={state.t_seconds + dt:.2f} s "
                    f"(T={layer.temperature:.2f} K)"
                )

        state.packets = survivors
        state.produced += produced
        state.escaped += escaped
        state.t_seconds += dt
        self.energy_in_tracker.add_energy_info(produced, dt)
        self.energy_out_tracker.add_energy_info(escaped, dt)

    def tick(self, dt: float) -> bool:
        """Clock-driven step: only while running, with dt capped at config.max_dt."""
        if not self.is_running:
            return False
        self.step(min(float(dt), self.config.max_dt))
        return True

    def run(self, duration_s: float, dt: float | None = None) -> int:
        """Step with a fixed dt (default max_dt) until duration_s has elapsed; return the step count."""
        dt = self.config.max_dt if dt is None else float(dt)
        if not dt > 0.0:
            raise ValueError(f"dt must be positive, got {dt!r}.")
        n_steps = int(np.ceil(duration_s / dt - const.TIME_EPSILON))
        for _ in range(n_steps):
            self.step(dt)
        return n_steps

    def start(self) -> None:
        self.is_running = True

    def pause(self) -> None:
        self.is_running = False

    def set_running(self, running: bool) -> None:
        self.is_running = bool(running)

    def reset(self) -> None:
        """Return to the freshly constructed configuration."""
        self.sun.reset()
        for layer in self.layers:
            layer.reset()
            for band in WavelengthBand:
                layer.set_absorption_proportion(band, self._default_absorption(layer, band))
        self._apply_active_count(self.config.initial_active_layers)
        self.energy_in_tracker.reset()
        self.energy_out_tracker.reset()
        self.state = SimulationState()
        self.is_running = False
        self.temperature_units = self.config.default_temperature_units

    # ------------------------------------------------------------------
    # Configuration mutators (between steps)
    # ------------------------------------------------------------------
    def set_source_shining(self, shining: bool) -> None:
        self.sun.set_shining(shining)

    def set_source_output_multiplier(self, value: float) -> float:
        return self.sun.set_proportionate_output_rate(value)

    def set_layer_absorption(self, layer_index: int, band: WavelengthBand, proportion: float) -> None:
        if layer_index == 0:
            raise ValueError("The ground absorbs all incident energy; its absorption is fixed.")
        if not 1 <= layer_index < len(self.layers):
            raise ValueError(f"No atmosphere layer with index {layer_index}.")
        self.layers[layer_index].set_absorption_proportion(band, proportion)

    def set_infrared_absorption(self, proportion: float) -> None:
        """Set the infrared absorption of every atmosphere layer."""
        if not 0.0 <= proportion <= 1.0:
            raise ValueError(f"Absorption proportion must be in [0, 1], got {proportion!r}.")
        for layer in self.atmosphere_layers:
            layer.set_absorption_proportion(WavelengthBand.INFRARED, proportion)

    def set_active_layer_count(self, count: int) -> None:
        if int(count) != count or not 0 <= count <= len(self.atmosphere_layers):
            raise ValueError(
                f"Active layer count must be an integer in [0, {len(self.atmosphere_layers)}], got {count!r}."
            )
        self._apply_active_count(int(count))
        if self.config.diag:
            print(f"[Layers] active atmosphere layers: {int(count)}")

    def set_temperature_units(self, units: TemperatureUnits | str) -> None:
        self.temperature_units = TemperatureUnits.parse(units)

    def _apply_active_count(self, count: int) -> None:
        for i, layer in enumerate(self.atmosphere_layers):
            active = i < count
            if layer.is_active and not active:
                self.state.retired += layer.retained_energy
                layer.reset()
            layer.is_active = active

    def _default_absorption(self, layer: AbsorbingEmittingLayer, band: WavelengthBand) -> float:
        if layer is self.ground:
            return 1.0
        if band is WavelengthBand.INFRARED:
            return self.config.default_infrared_absorption
        return 0.0

    # ------------------------------------------------------------------
    # Observables
    # ------------------------------------------------------------------
    @property
    def active_layers(self) -> list[AbsorbingEmittingLayer]:
        """Ground plus active atmosphere layers, by increasing altitude."""
        return [layer for layer in self.layers if layer.is_active]

    @property
    def active_layer_count(self) -> int:
        return sum(1 for layer in self.atmosphere_layers if layer.is_active)

    @property
    def t_seconds(self) -> float:
        return self.state.t_seconds

    @property
    def packets(self) -> list[EMEnergyPacket]:
        return self.state.packets

    @property
    def surface_temperature(self) -> float:
        """Ground temperature (K)."""
        return self.ground.temperature

    def surface_temperature_in(self, units: TemperatureUnits | str | None = None) -> float:
        return convert_temperature(self.ground.temperature, units or self.temperature_units)

    def temperatures(self) -> np.ndarray:
        """Temperatures (K) of all layers, ground first, inactive ones included."""
        return np.array([layer.temperature for layer in self.layers], dtype=float)

    def packet_positions(self) -> np.ndarray:
        """Altitudes (m) of the live packets, for visualization."""
        return np.fromiter((p.altitude for p in self.state.packets), dtype=float, count=len(self.state.packets))

    @property
    def net_energy_in_rate(self) -> float:
        """Averaged energy entering at the top of the atmosphere (W/m^2)."""
        return self.energy_in_tracker.get_average_rate() / self.surface_area

    @property
    def net_energy_out_rate(self) -> float:
        """Averaged energy escaping to space (W/m^2)."""
        return self.energy_out_tracker.get_average_rate() / self.surface_area

    @property
    def net_inflow_of_energy(self) -> float:
        return self.net_energy_in_rate - self.net_energy_out_rate

    @property
    def in_radiative_balance(self) -> bool:
        return abs(self.net_inflow_of_energy) < self.config.radiative_balance_threshold

    @property
    def at_equilibrium(self) -> bool:
        return all(layer.at_equilibrium for layer in self.active_layers)

    @property
    def cumulative_produced(self) -> float:
        return self.state.produced

    @property
    def cumulative_escaped(self) -> float:
        return self.state.escaped

    def __repr__(self) -> str:
        return (
            f"LayersModel(t={self.state.t_seconds:.2f} s, active_layers={self.active_layer_count}, "
            f"T_sfc={self.surface_temperature:.2f} K, packets={len(self.state.packets)})"
        )


__all__ = ["SimulationState", "LayersModel", "default_layer_altitudes"]
