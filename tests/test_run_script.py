import os

import pytest
from scripts import run_layer_model


def test_main_prints_progress_and_summary(capsys):
    model = run_layer_model.main(["--layers", "2", "--ir-absorption", "0.5", "--duration", "30", "--report-every", "10"])
    out = capsys.readouterr().out
    assert "[Run] layers=2 ir_absorption=0.50" in out
    assert out.count("T_sfc=") == 3
    assert "[Run] final surface temperature:" in out
    assert model.active_layer_count == 2
    assert model.t_seconds == pytest.approx(30.0)


def test_main_clamps_multiplier(capsys):
    model = run_layer_model.main(["--multiplier", "5", "--duration", "1"])
    assert model.sun.proportionate_output_rate == 2.0
    assert "multiplier=2.00" in capsys.readouterr().out


def test_main_saves_figures(tmp_path, capsys):
    pytest.importorskip("matplotlib")
    run_layer_model.main(["--duration", "5", "--plot-dir", str(tmp_path)])
    assert os.path.exists(tmp_path / "temperatures.png")
    assert os.path.exists(tmp_path / "energy_balance.png")
    assert "figures saved" in capsys.readouterr().out
