"""Tests for cbmconf.toml loading and whole-project parsing."""

from pathlib import Path

import pytest

from cbmconf.core.errors import ParseError, SourceError
from cbmconf.core.manifest import load_manifest
from cbmconf.core.parser import parse_project


def write_manifest(directory: Path, text: str) -> Path:
    path = directory / "cbmconf.toml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadManifest:
    def test_full(self, tmp_path: Path):
        path = write_manifest(
            tmp_path,
            """
[project]
name = "eyelid"

[files]
build = "build/default.bld"
experiment = "expt/acquisition.expt"

[parser]
strict = false

[logging]
level = "info"
""",
        )
        mf = load_manifest(path)

        assert mf.name == "eyelid"
        assert mf.root == tmp_path
        assert mf.files.build == tmp_path / "build" / "default.bld"
        assert mf.files.experiment == tmp_path / "expt" / "acquisition.expt"
        assert mf.parser.strict is False
        assert mf.logging.level == "INFO"

    def test_defaults(self, tmp_path: Path):
        mf = load_manifest(write_manifest(tmp_path, ""))

        assert mf.name == tmp_path.name
        assert mf.files.build is None
        assert mf.files.experiment is None
        assert mf.parser.strict is True
        assert mf.logging.level == "WARNING"

    def test_absolute_paths_kept(self, tmp_path: Path, default_bld: Path):
        mf = load_manifest(
            write_manifest(tmp_path, f'[files]\nbuild = "{default_bld.as_posix()}"\n')
        )
        assert mf.files.build == default_bld

    def test_missing(self, tmp_path: Path):
        with pytest.raises(SourceError, match="Could not read manifest"):
            load_manifest(tmp_path / "cbmconf.toml")

    def test_invalid_toml(self, tmp_path: Path):
        with pytest.raises(SourceError, match="Invalid manifest"):
            load_manifest(write_manifest(tmp_path, "[project\nname = "))

    @pytest.mark.parametrize("value", ['"false"', "0", "1"])
    def test_strict_must_be_boolean(self, tmp_path: Path, value: str):
        with pytest.raises(SourceError, match="strict must be true or false"):
            load_manifest(write_manifest(tmp_path, f"[parser]\nstrict = {value}\n"))


class TestParseProject:
    def test_both_files(self, tmp_path: Path, default_bld: Path, acquisition_expt: Path):
        mf = load_manifest(
            write_manifest(
                tmp_path,
                "[files]\n"
                f'build = "{default_bld.as_posix()}"\n'
                f'experiment = "{acquisition_expt.as_posix()}"\n',
            )
        )
        project = parse_project(mf)

        assert project.build is not None
        assert set(project.build.var_sections) == {"connectivity", "activity"}
        assert project.experiment is not None
        assert project.trials is not None
        assert project.trials.num_trials == 64

    def test_build_only(self, tmp_path: Path, default_bld: Path):
        mf = load_manifest(
            write_manifest(tmp_path, f'[files]\nbuild = "{default_bld.as_posix()}"\n')
        )
        project = parse_project(mf)

        assert project.build is not None
        assert project.experiment is None
        assert project.trials is None

    def test_relative_experiment(self, tmp_path: Path, baseline_run_text: str):
        (tmp_path / "expt").mkdir()
        (tmp_path / "expt" / "base.expt").write_text(baseline_run_text, encoding="utf-8")
        mf = load_manifest(write_manifest(tmp_path, '[files]\nexperiment = "expt/base.expt"\n'))

        project = parse_project(mf)
        assert project.trials is not None
        assert project.trials.trial_names == ["baseline"] * 3

    def test_strict_setting_is_honoured(self, tmp_path: Path):
        (tmp_path / "bad.bld").write_text(
            "begin filetype build\nbegin section connectivity\nint num_gr\nend\nend\n",
            encoding="utf-8",
        )
        strict = load_manifest(write_manifest(tmp_path, '[files]\nbuild = "bad.bld"\n'))
        with pytest.raises(ParseError):
            parse_project(strict)

        lenient = load_manifest(
            write_manifest(tmp_path, '[files]\nbuild = "bad.bld"\n[parser]\nstrict = false\n')
        )
        project = parse_project(lenient)
        assert project.build is not None
        assert len(project.build.section("connectivity")) == 0
