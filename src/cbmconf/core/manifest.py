import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .errors import SourceError

DEFAULT_MANIFEST = "cbmconf.toml"


@dataclass
class FilesConfig:
    """Input files, resolved against the manifest's directory."""

    build: Path | None = None
    experiment: Path | None = None


@dataclass
class ParserConfig:
    """Parser behaviour."""

    strict: bool = True  # False: log structural errors and keep going


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class ProjectManifest:
    name: str
    root: Path
    files: FilesConfig = field(default_factory=FilesConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _resolve(root: Path, value: str | None) -> Path | None:
    if not value:
        return None
    path = Path(value)
    return path if path.is_absolute() else root / path


def load_manifest(path: Path) -> ProjectManifest:
    """
    Load a cbmconf.toml project manifest.

    Example:

        [project]
        name = "eyelid"

        [files]
        build = "build/default.bld"
        experiment = "expt/acquisition.expt"

        [parser]
        strict = true

        [logging]
        level = "INFO"

    Raises:
        SourceError: If the manifest is missing, not valid TOML, or has a
            setting of the wrong type
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SourceError(f"Could not read manifest {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise SourceError(f"Invalid manifest {path}: {e}") from e

    root = path.parent
    project = data.get("project", {})
    files_data = data.get("files", {})
    parser_data = data.get("parser", {})
    logging_data = data.get("logging", {})

    strict = parser_data.get("strict", True)
    if not isinstance(strict, bool):
        raise SourceError(
            f"Invalid manifest {path}: [parser] strict must be true or false, got {strict!r}"
        )

    return ProjectManifest(
        name=project.get("name", root.name),
        root=root,
        files=FilesConfig(
            build=_resolve(root, files_data.get("build")),
            experiment=_resolve(root, files_data.get("experiment")),
        ),
        parser=ParserConfig(strict=strict),
        logging=LoggingConfig(level=str(logging_data.get("level", "WARNING")).upper()),
    )
