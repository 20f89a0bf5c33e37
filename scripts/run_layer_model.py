"""
Run the layered radiative-balance model from the command line.

    python3 -m scripts.run_layer_model --layers 1 --ir-absorption 0.5 --duration 600

Configuration not given on the command line comes from GH_* environment
variables (see pygreenhouse/config.py). Progress is printed every
--report-every simulated seconds; --plot-dir saves temperature and energy
balance figures at the end.
"""

import argparse
import os
import sys
from dataclasses import replace

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np

from pygreenhouse import LayersModel, LayersModelConfig, energy_flow, temperature_level
from pygreenhouse.diagnostics import diagnostics_report


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Layered greenhouse radiative-balance model")
    p.add_argument("--layers", type=int, default=None, help="active atmosphere layers")
    p.add_argument("--ir-absorption", type=float, default=None, help="infrared absorption of every layer [0,1]")
    p.add_argument("--multiplier", type=float, default=1.0, help="sun output relative to Earth's sun")
    p.add_argument("--duration", type=float, default=600.0, help="simulated seconds")
    p.add_argument("--dt", type=float, default=None, help="timestep (default: GH_MAX_DT)")
    p.add_argument("--report-every", type=float, default=60.0, help="seconds between progress lines")
    p.add_argument("--plot-dir", default=None, help="directory for output figures")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    cfg = LayersModelConfig.from_env()
    if args.layers is not None:
        cfg = replace(cfg, initial_active_layers=args.layers, max_atmosphere_layers=max(cfg.max_atmosphere_layers, args.layers))
    if args.ir_absorption is not None:
        cfg = replace(cfg, default_infrared_absorption=args.ir_absorption)
    dt = cfg.max_dt if args.dt is None else args.dt

    model = LayersModel(cfg)
    model.set_source_shining(True)
    used = model.set_source_output_multiplier(args.multiplier)
    print(f"[Run] layers={model.active_layer_count} ir_absorption={cfg.default_infrared_absorption:.2f} "
          f"multiplier={used:.2f} dt={dt} s duration={args.duration} s")

    n_steps = int(np.ceil(args.duration / dt))
    report_every = max(1, int(round(args.report_every / dt)))
    t_hist = np.empty(n_steps)
    temp_hist = np.empty((n_steps, len(model.layers)))
    in_hist = np.empty(n_steps)
    out_hist = np.empty(n_steps)

    for n in range(n_steps):
        model.step(dt)
        t_hist[n] = model.t_seconds
        temp_hist[n] = model.temperatures()
        in_hist[n] = model.net_energy_in_rate
        out_hist[n] = model.net_energy_out_rate
        if (n + 1) % report_every == 0:
            rep = diagnostics_report(model)
            print(f"[Run] t={rep['t_seconds']:.1f} s T_sfc={rep['T_sfc']:.2f} K "
                  f"in={rep['in_rate']:.2f} out={rep['out_rate']:.2f} W/m^2 "
                  f"packets={int(rep['n_packets'])} ledger_rel_err={rep['ledger_rel_err']:.2e}")

    units = model.temperature_units
    print(f"[Run] final surface temperature: {model.surface_temperature:.2f} K "
          f"({model.surface_temperature_in(units):.2f} {units.value}), "
          f"level={temperature_level(model.surface_temperature).name}, "
          f"flow={energy_flow(model.net_inflow_of_energy, model.in_radiative_balance).value}, "
          f"equilibrium={model.at_equilibrium}")

    if args.plot_dir:
        from pygreenhouse.ploter import plot_energy_balance, plot_temperature_history

        p1 = plot_temperature_history(t_hist, temp_hist, os.path.join(args.plot_dir, "temperatures.png"), units=units)
        p2 = plot_energy_balance(t_hist, in_hist, out_hist, os.path.join(args.plot_dir, "energy_balance.png"))
        print(f"[Run] figures saved: {p1}, {p2}")
    return model


if __name__ == "__main__":
    main()
