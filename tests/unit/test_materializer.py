"""Tests for schedule counting, flattening, and trial resolution."""

import logging
from pathlib import Path

import pydantic
import pytest

from cbmconf.core import ir
from cbmconf.core.errors import InvalidValueError, ResolutionError
from cbmconf.core.materializer import (
    count_trials,
    flatten_trial_names,
    legacy_trial_count,
    materialize,
    parse_repeat_count,
    resolve_trial,
    resolve_trials,
)
from cbmconf.core.parser_impl import parse_experiment_file, parse_experiment_text

from helpers import entries, make_trial


def section(experiment, trials=("A", "B", "C"), blocks=None, sessions=None) -> ir.TrialSection:
    return ir.TrialSection(
        trials={name: make_trial() for name in trials},
        blocks=blocks or {},
        sessions=sessions or {},
        experiment=experiment,
    )


class TestCountTrials:
    def test_direct_trial_references_sum(self):
        ts = section(entries(("A", 2), ("B", 3), ("A", 1)))
        assert count_trials(ts) == 6

    def test_session_of_repeated_block(self):
        ts = section(
            entries(("S", 1)),
            blocks={"BLK": entries(("A", 1), ("B", 2))},
            sessions={"S": entries(("BLK", 4))},
        )
        assert count_trials(ts) == 12

    def test_deep_nesting_is_sum_of_products(self):
        ts = section(
            entries(("S", 2), ("C", 1)),
            blocks={"B1": entries(("A", 3)), "B2": entries(("B1", 2), ("B", 1))},
            sessions={"S": entries(("B2", 2), ("A", 1))},
        )
        # B1 = 3, B2 = 2*3 + 1 = 7, S = 2*7 + 1 = 15, total = 2*15 + 1
        assert count_trials(ts) == 31

    def test_zero_repeats(self):
        ts = section(entries(("A", 0), ("B", 2)))
        assert count_trials(ts) == 2

    def test_empty_experiment(self):
        assert count_trials(section([])) == 0

    def test_unknown_name(self):
        with pytest.raises(ResolutionError, match="'missing' does not name"):
            count_trials(section(entries(("missing", 1))))

    def test_cycle(self):
        ts = section(
            entries(("X", 1)),
            blocks={"X": entries(("A", 1), ("Y", 1)), "Y": entries(("X", 2))},
        )
        with pytest.raises(ResolutionError, match="Circular schedule reference: X -> Y -> X"):
            count_trials(ts)

    def test_same_block_twice_is_not_a_cycle(self):
        ts = section(
            entries(("S", 1)),
            blocks={"X": entries(("A", 2))},
            sessions={"S": entries(("X", 1), ("X", 1))},
        )
        assert count_trials(ts) == 4


class TestRepeatCounts:
    @pytest.mark.parametrize("raw,expected", [("0", 0), ("1", 1), ("+12", 12)])
    def test_valid(self, raw, expected):
        assert parse_repeat_count(ir.ScheduleEntry(name="a", repeat_count=raw)) == expected

    @pytest.mark.parametrize("raw", ["2.5", "1e3", "-1"])
    def test_invalid(self, raw):
        with pytest.raises(InvalidValueError):
            parse_repeat_count(ir.ScheduleEntry(name="a", repeat_count=raw))

    def test_default_is_once(self):
        assert parse_repeat_count(ir.ScheduleEntry(name="a")) == 1


class TestFlatten:
    def test_order_with_block(self):
        ts = section(
            entries(("A", 2), ("BLK", 1)),
            blocks={"BLK": entries(("C", 3))},
        )
        assert flatten_trial_names(ts) == ["A", "A", "C", "C", "C"]

    def test_repeated_nested_order(self):
        ts = section(
            entries(("S", 2)),
            blocks={"BLK": entries(("B", 1), ("C", 1))},
            sessions={"S": entries(("A", 1), ("BLK", 2))},
        )
        assert flatten_trial_names(ts) == ["A", "B", "C", "B", "C"] * 2

    def test_length_matches_count(self):
        ts = section(
            entries(("S", 2), ("C", 1)),
            blocks={"B1": entries(("A", 3)), "B2": entries(("B1", 2), ("B", 1))},
            sessions={"S": entries(("B2", 2), ("A", 1))},
        )
        assert len(flatten_trial_names(ts)) == count_trials(ts)

    def test_wrong_precomputed_total(self):
        ts = section(entries(("A", 3)))
        with pytest.raises(ResolutionError):
            flatten_trial_names(ts, total=2)
        with pytest.raises(ResolutionError, match="filled 3 of 4"):
            flatten_trial_names(ts, total=4)

    def test_unknown_name(self):
        with pytest.raises(ResolutionError):
            flatten_trial_names(section(entries(("A", 1), ("nope", 1))), total=2)


class TestResolve:
    def test_resolve_trial(self):
        ts = ir.TrialSection(trials={"t": make_trial(cs_onset=250, cs_percent=0.75)})
        params = resolve_trial(ts, "t")
        assert params.cs_onset == 250
        assert params.cs_percent == 0.75
        assert params.use_mfnc_plast == 0

    def test_unknown_label(self):
        with pytest.raises(ResolutionError, match="No trial definition named 'ghost'"):
            resolve_trials(section([]), ["A", "ghost"])

    def test_missing_parameter(self):
        trial = make_trial()
        del trial["us_onset"]
        ts = ir.TrialSection(trials={"t": trial})
        with pytest.raises(InvalidValueError, match="does not define 'us_onset'"):
            resolve_trial(ts, "t")

    def test_integral_float_accepted_for_int_parameter(self):
        ts = ir.TrialSection(trials={"t": make_trial(cs_len="500.0")})
        assert resolve_trial(ts, "t").cs_len == 500

    def test_fractional_value_rejected_for_int_parameter(self):
        ts = ir.TrialSection(trials={"t": make_trial(cs_len="12.5")})
        with pytest.raises(InvalidValueError, match="must be an integer"):
            resolve_trial(ts, "t")

    def test_columns(self):
        ts = ir.TrialSection(
            trials={"a": make_trial(cs_onset=1), "b": make_trial(cs_onset=2)},
        )
        data = resolve_trials(ts, ["a", "b", "a"])
        assert data.trial_names == ["a", "b", "a"]
        assert data.cs_onsets == [1, 2, 1]
        assert data.num_trials == len(data) == 3


class TestMaterialize:
    def test_end_to_end_single_trial(self, baseline_run_text: str):
        data = materialize(parse_experiment_text(baseline_run_text))
        assert data.num_trials == 3
        assert data.trial_names == ["baseline"] * 3
        assert data.use_css == [1, 1, 1]
        assert data.cs_onsets == [100, 100, 100]
        assert data.cs_lens == [50, 50, 50]
        assert data.cs_percents == [1.0, 1.0, 1.0]
        assert data.use_uss == [1, 1, 1]
        assert data.us_onsets == [150, 150, 150]
        assert data.use_pfpc_plasts == [1, 1, 1]
        assert data.use_mfnc_plasts == [0, 0, 0]
        assert data.row(0) == data.row(2)

    def test_sample_file(self, acquisition_expt: Path):
        data = materialize(parse_experiment_file(acquisition_expt))
        names = data.trial_names
        assert data.num_trials == 64
        assert names[:2] == ["baseline", "baseline"]
        assert names[2:12] == ["paired"] * 9 + ["probe"]
        assert names[32:34] == ["baseline", "baseline"]
        assert names.count("paired") == 54
        assert names.count("probe") == 6
        assert data.row(11).use_us == 0
        assert data.row(2).us_onset == 700

    def test_legacy_count_divergence_is_logged(self, caplog):
        ts = ir.TrialSection(
            trials={"A": make_trial(), "B": make_trial()},
            blocks={"A": entries(("B", 3))},
            experiment=entries(("A", 2)),
        )
        assert count_trials(ts) == 2
        assert legacy_trial_count(ts) == 6

        with caplog.at_level(logging.WARNING):
            data = materialize(ir.ExperimentFile(trial_section=ts))
        assert data.trial_names == ["A", "A"]
        assert "legacy counter would report 6" in caplog.text

    def test_block_sharing_its_own_trial_label(self, caplog):
        ts = ir.TrialSection(
            trials={"T": make_trial()},
            blocks={"T": entries(("T", 2))},
            experiment=entries(("T", 3)),
        )
        assert count_trials(ts) == 3
        assert legacy_trial_count(ts) is None

        with caplog.at_level(logging.WARNING):
            data = materialize(ir.ExperimentFile(trial_section=ts))
        assert data.trial_names == ["T"] * 3
        assert "legacy counter would never terminate" in caplog.text

    def test_session_reaching_itself_through_block(self):
        ts = ir.TrialSection(
            trials={"S": make_trial(), "A": make_trial()},
            blocks={"B": entries(("S", 1), ("A", 1))},
            sessions={"S": entries(("B", 2))},
            experiment=entries(("S", 1), ("B", 1)),
        )
        assert count_trials(ts) == 3
        assert legacy_trial_count(ts) is None
        assert materialize(ir.ExperimentFile(trial_section=ts)).trial_names == ["S", "S", "A"]

    def test_legacy_count_agrees_on_sample(self, acquisition_expt: Path):
        ts = parse_experiment_file(acquisition_expt).trial_section
        assert legacy_trial_count(ts) == count_trials(ts)


class TestTrialsData:
    def test_misaligned_columns_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            ir.TrialsData(trial_names=["a"], cs_onsets=[1, 2])

    def test_rows_round_trip(self, baseline_run_text: str):
        data = materialize(parse_experiment_text(baseline_run_text))
        assert ir.TrialsData.from_rows(data.rows()) == data
