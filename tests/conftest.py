"""Shared pytest fixtures for cbmconf tests."""

from pathlib import Path

import pytest


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def files_dir(fixtures_dir: Path) -> Path:
    """Return path to sample build and experiment files."""
    return fixtures_dir / "files"


@pytest.fixture
def acquisition_expt(files_dir: Path) -> Path:
    """Two days of baseline + (9 paired, 1 probe) x 3: 64 trials."""
    return files_dir / "acquisition.expt"


@pytest.fixture
def default_bld(files_dir: Path) -> Path:
    return files_dir / "default.bld"


@pytest.fixture
def baseline_run_text() -> str:
    """One trial definition repeated three times by the experiment."""
    return """\
// single-trial experiment
begin filetype run
    begin section trial_def
        def trial baseline
            int use_cs 1
            int cs_onset 100
            int cs_len 50
            float cs_percent 1.0
            int use_us 1
            int us_onset 150
            int use_pfpc_plast 1
            int use_mfnc_plast 0
        end
        def experiment main
            baseline 3
        end
    end
end
"""
