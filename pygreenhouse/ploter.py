from __future__ import annotations

import os

import numpy as np

try:
    import matplotlib.pyplot as plt  # type: ignore
except Exception:
    plt = None

from .temperature import TemperatureUnits, convert_temperature


def _require_matplotlib():
    if plt is None:
        raise RuntimeError("matplotlib is required for plotting. Please install 'matplotlib'.")


def plot_temperature_history(
    t_seconds: np.ndarray,
    temperatures_k: np.ndarray,
    out_path: str,
    *,
    labels: list[str] | None = None,
    units: TemperatureUnits | str = TemperatureUnits.KELVIN,
    title: str = "Layer temperatures",
) -> str:
    """
    Plot per-layer temperature histories and save the figure.

    temperatures_k has shape [n_times, n_layers] (ground in column 0).
    Returns the path written.
    """
    _require_matplotlib()
    units = TemperatureUnits.parse(units)
    t = np.asarray(t_seconds, dtype=float)
    temps = np.atleast_2d(np.asarray(temperatures_k, dtype=float))
    if temps.shape[0] != t.size:
        temps = temps.T
    n_layers = temps.shape[1]
    if labels is None:
        labels = ["ground"] + [f"layer {i}" for i in range(1, n_layers)]

    fig, ax = plt.subplots(figsize=(8, 4.5))
    for k in range(n_layers):
        ax.plot(t, convert_temperature(temps[:, k], units), label=labels[k])
    ax.set_xlabel("time (s)")
    ax.set_ylabel(f"temperature ({units.value})")
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")
    fig.tight_layout()

    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    fig.savefig(out_path, dpi=120)
    plt.close(fig)
    return out_path


def plot_energy_balance(
    t_seconds: np.ndarray,
    in_rate: np.ndarray,
    out_rate: np.ndarray,
    out_path: str,
) -> str:
    """Energy in/out rates at the top of the atmosphere (W/m^2) and their difference."""
    _require_matplotlib()
    t = np.asarray(t_seconds, dtype=float)
    e_in = np.asarray(in_rate, dtype=float)
    e_out = np.asarray(out_rate, dtype=float)

    fig, ax = plt.subplots(figsize=(8, 4.5))
    ax.plot(t, e_in, label="in")
    ax.plot(t, e_out, label="out")
    ax.plot(t, e_in - e_out, label="net", linestyle="--")
    ax.axhline(0.0, color="k", linewidth=0.8)
    ax.set_xlabel("time (s)")
    ax.set_ylabel("energy rate (W/m$^2$)")
    ax.set_title("Top-of-atmosphere energy balance")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")
    fig.tight_layout()

    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    fig.savefig(out_path, dpi=120)
    plt.close(fig)
    return out_path
