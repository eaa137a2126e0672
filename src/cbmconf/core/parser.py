import logging
from dataclasses import dataclass

from . import ir
from .manifest import ProjectManifest
from .materializer import materialize
from .parser_impl import parse_build_file, parse_experiment_file

logger = logging.getLogger(__name__)


@dataclass
class ParsedProject:
    """Everything the simulation engine needs from one manifest."""

    build: ir.BuildFile | None = None
    experiment: ir.ExperimentFile | None = None
    trials: ir.TrialsData | None = None


def parse_project(manifest: ProjectManifest) -> ParsedProject:
    """
    Parse the manifest's build and experiment files and materialize trials.

    Either file may be omitted from the manifest.

    Args:
        manifest: Loaded project manifest

    Returns:
        ParsedProject with whichever parts the manifest names
    """
    project = ParsedProject()
    strict = manifest.parser.strict

    if manifest.files.build is not None:
        project.build = parse_build_file(manifest.files.build, strict=strict)
        logger.info(
            "Parsed build file %s: %d sections",
            manifest.files.build,
            len(project.build.var_sections),
        )

    if manifest.files.experiment is not None:
        project.experiment = parse_experiment_file(manifest.files.experiment, strict=strict)
        project.trials = materialize(project.experiment)
        logger.info(
            "Parsed experiment file %s: %d trials",
            manifest.files.experiment,
            project.trials.num_trials,
        )

    return project
