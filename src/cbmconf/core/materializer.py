"""
Trial hierarchy materializer for cbmconf.

Expands the experiment schedule (experiment -> sessions -> blocks -> trials,
each reference carrying a repeat count) into the flat, time-ordered trial
table consumed by the simulation engine.

Two passes:
1. count_trials computes how many leaf trials the experiment expands to.
2. flatten_trial_names fills exactly that many slots depth-first,
   left-to-right; resolve_trials then copies each trial's parameters.
"""

import logging

from . import ir
from .errors import InvalidValueError, ResolutionError

logger = logging.getLogger(__name__)


def parse_repeat_count(entry: ir.ScheduleEntry) -> int:
    """
    Interpret a schedule entry's repeat count.

    Raises:
        InvalidValueError: If the count is not a non-negative integer
    """
    try:
        count = int(entry.repeat_count)
    except ValueError:
        raise InvalidValueError(
            f"Repeat count {entry.repeat_count!r} for '{entry.name}' is not an integer"
        ) from None
    if count < 0:
        raise InvalidValueError(f"Repeat count {count} for '{entry.name}' is negative")
    return count


def _children(section: ir.TrialSection, name: str) -> ir.Schedule | None:
    """
    Look up a non-leaf schedule by name.

    Returns None for trial names.

    Raises:
        ResolutionError: If the name matches no trial, block, or session
    """
    if name in section.trials:
        return None
    if name in section.blocks:
        return section.blocks[name]
    if name in section.sessions:
        return section.sessions[name]
    raise ResolutionError(f"'{name}' does not name a trial, block, or session")


def _enter(name: str, path: tuple[str, ...]) -> tuple[str, ...]:
    if name in path:
        cycle = " -> ".join(path + (name,))
        raise ResolutionError(f"Circular schedule reference: {cycle}")
    return path + (name,)


def _count(section: ir.TrialSection, schedule: ir.Schedule, path: tuple[str, ...]) -> int:
    total = 0
    for entry in schedule:
        repeat = parse_repeat_count(entry)
        children = _children(section, entry.name)
        if children is None:
            leaves = 1
        else:
            leaves = _count(section, children, _enter(entry.name, path))
        total += repeat * leaves
    return total


def count_trials(section: ir.TrialSection) -> int:
    """
    Count the leaf trials the experiment sequence expands to.

    Each entry contributes its repeat count times the number of leaves its
    name expands to (1 for a trial).

    Raises:
        ResolutionError: On unknown names or cyclic references
        InvalidValueError: On bad repeat counts
    """
    return _count(section, section.experiment, ())


def legacy_trial_count(section: ir.TrialSection) -> int | None:
    """
    Count trials the way older simulator builds did.

    There, each nesting level multiplied an accumulator passed down from the
    caller by its own sum, and names were looked up as sessions first, then
    blocks, with anything else counted as a trial. A label shared by a trial
    and a block or session therefore counts differently here than in
    count_trials.

    Returns:
        The legacy count, or None if the legacy lookup would never
        terminate (a block or session reaching itself through a label that
        count_trials resolves as a trial)
    """

    def helper(schedule: ir.Schedule, accumulator: int, path: tuple[str, ...]) -> int | None:
        level_sum = 0
        for entry in schedule:
            count = parse_repeat_count(entry)
            children = section.sessions.get(entry.name, section.blocks.get(entry.name))
            if children is not None:
                if entry.name in path:
                    return None
                nested = helper(children, count, path + (entry.name,))
                if nested is None:
                    return None
                count = nested
            level_sum += count
        return accumulator * level_sum

    return helper(section.experiment, 1, ())


def flatten_trial_names(section: ir.TrialSection, total: int | None = None) -> list[str]:
    """
    Expand the experiment into one trial name per slot.

    Args:
        section: Parsed trial definitions and schedule
        total: Precomputed count_trials result, if the caller has one

    Returns:
        Trial names in depth-first, left-to-right order

    Raises:
        ResolutionError: On unknown names or cyclic references
    """
    if total is None:
        total = count_trials(section)

    names: list[str | None] = [None] * total
    cursor = 0

    def fill(schedule: ir.Schedule, path: tuple[str, ...]) -> None:
        nonlocal cursor
        for entry in schedule:
            repeat = parse_repeat_count(entry)
            children = _children(section, entry.name)
            if children is None:
                if cursor + repeat > total:
                    raise ResolutionError(
                        f"Schedule expands past the counted {total} trials at '{entry.name}'"
                    )
                names[cursor : cursor + repeat] = [entry.name] * repeat
                cursor += repeat
            else:
                child_path = _enter(entry.name, path)
                for _ in range(repeat):
                    fill(children, child_path)

    fill(section.experiment, ())

    if cursor != total:
        raise ResolutionError(f"Schedule filled {cursor} of {total} trial slots")
    return [name for name in names if name is not None]


def _int_param(trial: ir.TrialDef, trial_name: str, param: str) -> int:
    raw = _raw_param(trial, trial_name, param)
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        value = float(raw)
    except ValueError:
        value = None
    if value is None or not value.is_integer():
        raise InvalidValueError(
            f"Parameter '{param}' of trial '{trial_name}' must be an integer, got {raw!r}"
        )
    return int(value)


def _float_param(trial: ir.TrialDef, trial_name: str, param: str) -> float:
    raw = _raw_param(trial, trial_name, param)
    try:
        return float(raw)
    except ValueError:
        raise InvalidValueError(
            f"Parameter '{param}' of trial '{trial_name}' must be a number, got {raw!r}"
        ) from None


def _raw_param(trial: ir.TrialDef, trial_name: str, param: str) -> str:
    variable = trial.get(param)
    if variable is None:
        raise InvalidValueError(f"Trial '{trial_name}' does not define '{param}'")
    return variable.value


def resolve_trial(section: ir.TrialSection, trial_name: str) -> ir.TrialParameters:
    """
    Read the table parameters of one trial definition.

    Raises:
        ResolutionError: If no trial has this name
        InvalidValueError: If a parameter is missing or not numeric
    """
    trial = section.trials.get(trial_name)
    if trial is None:
        raise ResolutionError(f"No trial definition named '{trial_name}'")

    values: dict[str, int | float] = {
        param: _int_param(trial, trial_name, param) for param in ir.TRIAL_INT_PARAMS
    }
    for param in ir.TRIAL_FLOAT_PARAMS:
        values[param] = _float_param(trial, trial_name, param)
    return ir.TrialParameters(trial_name=trial_name, **values)


def resolve_trials(section: ir.TrialSection, names: list[str]) -> ir.TrialsData:
    """Build the column table for an expanded list of trial names."""
    resolved: dict[str, ir.TrialParameters] = {}
    rows = []
    for name in names:
        if name not in resolved:
            resolved[name] = resolve_trial(section, name)
        rows.append(resolved[name])
    return ir.TrialsData.from_rows(rows)


def materialize(experiment: ir.ExperimentFile) -> ir.TrialsData:
    """
    Expand a parsed run file into its trial table.

    Raises:
        ResolutionError: On unknown names or cyclic references
        InvalidValueError: On bad repeat counts or trial parameters
    """
    section = experiment.trial_section
    total = count_trials(section)

    legacy = legacy_trial_count(section)
    if legacy is None:
        logger.warning(
            "%s: schedule expands to %d trials; the legacy counter would never terminate",
            experiment.file,
            total,
        )
    elif legacy != total:
        logger.warning(
            "%s: schedule expands to %d trials; the legacy counter would report %d",
            experiment.file,
            total,
            legacy,
        )

    logger.debug("%s: materializing %d trials", experiment.file, total)
    names = flatten_trial_names(section, total)
    return resolve_trials(section, names)
