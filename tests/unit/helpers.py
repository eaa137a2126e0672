"""Builders for run-file text and IR objects used across unit tests."""

from cbmconf.core import ir

TRIAL_TEMPLATE = """\
        def trial {name}
            int use_cs {use_cs}
            int cs_onset {cs_onset}
            int cs_len {cs_len}
            float cs_percent {cs_percent}
            int use_us {use_us}
            int us_onset {us_onset}
            int use_pfpc_plast {use_pfpc_plast}
            int use_mfnc_plast {use_mfnc_plast}
        end
"""

BASELINE = {
    "use_cs": 1,
    "cs_onset": 100,
    "cs_len": 50,
    "cs_percent": 1.0,
    "use_us": 1,
    "us_onset": 150,
    "use_pfpc_plast": 1,
    "use_mfnc_plast": 0,
}


def trial_def(name: str, **overrides) -> str:
    """Render a ``def trial`` block, defaulting to the baseline parameters."""
    return TRIAL_TEMPLATE.format(name=name, **{**BASELINE, **overrides})


def schedule_def(kind: str, label: str, *lines: str) -> str:
    """Render a ``def block|session|experiment`` block, one entry per line."""
    body = "".join(f"            {line}\n" for line in lines)
    return f"        def {kind} {label}\n{body}        end\n"


def run_file(trial_def_body: str, extra_sections: str = "") -> str:
    """Wrap a trial_def body in a complete run file."""
    return (
        "begin filetype run\n"
        f"{extra_sections}"
        "    begin section trial_def\n"
        f"{trial_def_body}"
        "    end\n"
        "end\n"
    )


def make_trial(**overrides) -> ir.TrialDef:
    values = {**BASELINE, **overrides}
    return {
        name: ir.Variable(
            type_name="float" if name == "cs_percent" else "int",
            identifier=name,
            value=str(value),
        )
        for name, value in values.items()
    }


def entries(*pairs: tuple[str, int | str]) -> list[ir.ScheduleEntry]:
    return [ir.ScheduleEntry(name=name, repeat_count=str(count)) for name, count in pairs]
