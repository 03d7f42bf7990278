"""Tests for the similarity command-line interface."""

import json

import pytest
from loguru import logger

import similarity.cli as cli
from similarity.cli import main


@pytest.fixture(autouse=True)
def _drop_log_sinks():
    # main() points loguru at the captured stderr of the running test
    yield
    logger.remove()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "sweep.yaml"
    path.write_text("""
configs:
  m1:
    mach: 1.0
    t_inf: 300
  m1_coarse:
    base: m1
    n: 40
outputs: [profile, plot, summary]
""")
    return path


class TestRun:

    def test_writes_outputs(self, config_file, tmp_path):
        out = tmp_path / "out"
        assert main(['run', str(config_file), '-o', str(out)]) == 0
        for name in ('m1', 'm1_coarse'):
            assert (out / f'{name}_profile.csv').exists()
            assert (out / f'{name}_profiles.png').exists()
            assert (out / f'{name}_convergence.png').exists()

        summary = json.loads((out / 'summary.json').read_text())
        assert set(summary) == {'m1', 'm1_coarse'}
        assert summary['m1']['status'] == 'converged'
        assert summary['m1']['n'] == 50
        assert summary['m1_coarse']['n'] == 40
        assert summary['m1']['wall_temperature'] == summary['m1']['beta']

    def test_profile_csv_columns(self, config_file, tmp_path):
        out = tmp_path / "out"
        main(['run', str(config_file), '-o', str(out)])
        lines = (out / 'm1_profile.csv').read_text().splitlines()
        assert lines[2] == "# eta,y,U,T"
        data = [l for l in lines if not l.startswith('#')]
        assert len(data) == 51
        first = [float(v) for v in data[0].split(',')]
        assert first[:3] == [0.0, 0.0, 0.0]

    def test_missing_config(self, tmp_path, capsys):
        assert main(['run', str(tmp_path / 'nope.yaml')]) == 1
        assert "not found" in capsys.readouterr().out

    def test_bad_config(self, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("similarity:\n  reynolds: 1e5\n")
        assert main(['run', str(path), '-o', str(tmp_path / 'out')]) == 1
        assert "Unknown config keys" in capsys.readouterr().out

    def test_solver_failure_reported(self, tmp_path):
        path = tmp_path / "fail.yaml"
        path.write_text("similarity:\n  beta0: -1.0\noutputs: [summary]\n")
        out = tmp_path / "out"
        assert main(['run', str(path), '-o', str(out)]) == 1
        summary = json.loads((out / 'summary.json').read_text())
        assert summary['default']['status'] == 'failed'
        assert 'baseline' in summary['default']['error']


class TestExample:

    def test_example(self, capsys):
        assert main(['example']) == 0
        out = capsys.readouterr().out
        assert "converged" in out
        assert "f''(0)" in out

    def test_invalid(self, capsys):
        assert main(['example', '--n', '0']) == 1

    def test_no_command(self):
        assert main([]) == 1

    def test_plot_window(self, monkeypatch):
        shown = []
        monkeypatch.setattr(cli.matplotlib, 'use', lambda backend: None)
        monkeypatch.setattr(cli.plt, 'show', lambda: shown.append(True))
        assert main(['example', '--plot']) == 0
        assert shown == [True]
        cli.plt.close('all')

    def test_plot_without_gui_backend(self, monkeypatch, capsys):
        def no_tk(backend):
            raise ImportError(f"Cannot load backend {backend!r}")

        monkeypatch.setattr(cli.matplotlib, 'use', no_tk)
        assert main(['example', '--plot']) == 1
        assert "cannot open a plot window" in capsys.readouterr().out
