from __future__ import annotations

"""
Side-effect-free energy diagnostics for LayersModel.

Purpose
- Express the energy ledger of a run as a small value object so that callers
  (tests, driver scripts) can check conservation and compute step deltas.
- Provide a snapshot of every observable, used to compare a reset model with a
  freshly built one.

Ledger
    produced == in_flight + escaped + retained + retired
where
    in_flight = energy of the live packets
    escaped   = energy that left through the top of the atmosphere
    retained  = sum over layers of (absorbed - emitted) since their last reset
    retired   = energy held by layers at the moment they were deactivated

Notes
- All functions are pure. Callers decide where to print.
"""

import math
from dataclasses import asdict, dataclass
from typing import Any

import numpy as np

from .packets import WavelengthBand


@dataclass
class EnergyLedger:
    produced: float
    in_flight: float
    escaped: float
    retained: float
    retired: float

    @property
    def accounted(self) -> float:
        return self.in_flight + self.escaped + self.retained + self.retired

    @property
    def residual(self) -> float:
        return self.produced - self.accounted

    def relative_error(self) -> float:
        scale = max(abs(self.produced), 1e-12)
        return abs(self.residual) / scale


def energy_ledger(model) -> EnergyLedger:
    state = model.state
    return EnergyLedger(
        produced=state.produced,
        in_flight=math.fsum(p.energy for p in state.packets),
        escaped=state.escaped,
        retained=math.fsum(layer.retained_energy for layer in model.layers),
        retired=state.retired,
    )


def is_energy_conserved(model, rtol: float = 1e-6, atol: float = 1e-9) -> bool:
    ledger = energy_ledger(model)
    return bool(np.isclose(ledger.accounted, ledger.produced, rtol=rtol, atol=atol))


def ledger_deltas(prev: EnergyLedger, nxt: EnergyLedger) -> dict[str, float]:
    """Return simple deltas (next - prev) for quick checks."""
    return {f"d_{key}": value - getattr(prev, key) for key, value in asdict(nxt).items()}


def state_snapshot(model) -> dict[str, Any]:
    """Every observable of the model as plain Python values."""
    return {
        "t_seconds": model.state.t_seconds,
        "n_packets": len(model.state.packets),
        "produced": model.state.produced,
        "escaped": model.state.escaped,
        "retired": model.state.retired,
        "temperatures": [layer.temperature for layer in model.layers],
        "absorption": [
            {band.value: layer.absorption_proportion(band) for band in WavelengthBand}
            for layer in model.layers
        ],
        "active": [layer.is_active for layer in model.layers],
        "at_equilibrium": [layer.at_equilibrium for layer in model.layers],
        "time_below_threshold": [layer.time_below_threshold for layer in model.layers],
        "retained": [layer.retained_energy for layer in model.layers],
        "energy_in_samples": len(model.energy_in_tracker),
        "energy_out_samples": len(model.energy_out_tracker),
        "net_energy_in_rate": model.net_energy_in_rate,
        "net_energy_out_rate": model.net_energy_out_rate,
        "sun_shining": model.sun.is_shining,
        "sun_multiplier": model.sun.proportionate_output_rate,
        "sun_samples": len(model.sun.output_energy_rate_tracker),
        "is_running": model.is_running,
        "temperature_units": model.temperature_units.value,
    }


def diagnostics_report(model) -> dict[str, float]:
    """Compact numeric report for driver scripts."""
    ledger = energy_ledger(model)
    return {
        "t_seconds": model.state.t_seconds,
        "T_sfc": model.surface_temperature,
        "in_rate": model.net_energy_in_rate,
        "out_rate": model.net_energy_out_rate,
        "net_inflow": model.net_inflow_of_energy,
        "ledger_residual": ledger.residual,
        "ledger_rel_err": ledger.relative_error(),
        "n_packets": float(len(model.state.packets)),
    }


__all__ = [
    "EnergyLedger",
    "energy_ledger",
    "is_energy_conserved",
    "ledger_deltas",
    "state_snapshot",
    "diagnostics_report",
]
