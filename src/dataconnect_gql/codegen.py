"""Connector configuration and invocation of the Data Connect code generator."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONNECTOR_FILE_NAME = "connector.yaml"
GQL_SUFFIX = ".gql"
DEFAULT_EXECUTABLE = "firebase"

MSG_SUCCEEDED = "Code generation succeeded."
MSG_FAILED = "Code generation failed."
MSG_NO_CONNECTOR = f"{CONNECTOR_FILE_NAME} not found in project root."


class ConnectorConfigError(ValueError):
    """Raised when a connector file cannot be read or has the wrong shape."""


@dataclass
class SdkTarget:
    """One ``generate`` entry of a connector file."""

    kind: str
    output_dir: Path | None = None
    package: str | None = None


@dataclass
class ConnectorConfig:
    """Parsed ``connector.yaml``."""

    path: Path
    connector_id: str | None = None
    generate: list[SdkTarget] = field(default_factory=list)

    def output_dirs(self) -> list[Path]:
        """Return the resolved output directories of all SDK targets."""
        return [t.output_dir for t in self.generate if t.output_dir is not None]


@dataclass
class CodegenResult:
    """Outcome of a code generation run."""

    success: bool
    message: str
    exit_code: int | None = None


def find_connector_yaml(base_path: str | Path) -> Path | None:
    """Return the connector file in *base_path*, or None if it does not exist."""
    candidate = Path(base_path) / CONNECTOR_FILE_NAME
    return candidate if candidate.is_file() else None


def _sdk_targets(kind: str, value: Any, base_dir: Path) -> list[SdkTarget]:
    entries = value if isinstance(value, list) else [value]
    targets: list[SdkTarget] = []
    for entry in entries:
        if entry is None:
            targets.append(SdkTarget(kind=kind))
            continue
        if not isinstance(entry, dict):
            raise ConnectorConfigError(f"Invalid '{kind}' entry: expected a mapping")
        output_dir = entry.get("outputDir")
        targets.append(
            SdkTarget(
                kind=kind,
                output_dir=(base_dir / output_dir).resolve() if output_dir else None,
                package=entry.get("package"),
            )
        )
    return targets


def load_connector_config(path: str | Path) -> ConnectorConfig:
    """Load a connector file, resolving output directories against its folder."""
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConnectorConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConnectorConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConnectorConfigError(f"{path}: top level must be a mapping")

    generate = data.get("generate") or {}
    if not isinstance(generate, dict):
        raise ConnectorConfigError(f"{path}: 'generate' must be a mapping")

    targets: list[SdkTarget] = []
    for kind, value in generate.items():
        targets.extend(_sdk_targets(kind, value, path.parent))

    return ConnectorConfig(
        path=path,
        connector_id=data.get("connectorId"),
        generate=targets,
    )


def codegen_command(connector_file: Path, executable: str = DEFAULT_EXECUTABLE) -> list[str]:
    """Build the code generator command line."""
    return [
        executable,
        "data-connect",
        "codegen",
        f"--config={connector_file.resolve()}",
    ]


def run_codegen(
    connector_file: str | Path,
    project_dir: str | Path,
    executable: str = DEFAULT_EXECUTABLE,
) -> CodegenResult:
    """Run the code generator for *connector_file* inside *project_dir*."""
    command = codegen_command(Path(connector_file), executable)
    logger.info("Running %s", " ".join(command))
    try:
        completed = subprocess.run(
            command,
            cwd=str(project_dir),
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        logger.exception("Failed to launch code generator")
        return CodegenResult(success=False, message=f"Failed to run codegen: {e}")

    if completed.returncode == 0:
        logger.info("Code generation finished")
        return CodegenResult(success=True, message=MSG_SUCCEEDED, exit_code=0)

    logger.warning(
        "Code generation exited with %d: %s",
        completed.returncode,
        (completed.stderr or "").strip(),
    )
    return CodegenResult(success=False, message=MSG_FAILED, exit_code=completed.returncode)


def codegen_for_saved_file(
    file_path: str | Path,
    base_path: str | Path,
    executable: str = DEFAULT_EXECUTABLE,
) -> CodegenResult | None:
    """Regenerate code after a document was saved.

    Returns None for files that are not ``.gql`` documents.
    """
    if Path(file_path).suffix != GQL_SUFFIX:
        return None

    connector_file = find_connector_yaml(base_path)
    if connector_file is None:
        logger.info("No %s in %s", CONNECTOR_FILE_NAME, base_path)
        return CodegenResult(success=False, message=MSG_NO_CONNECTOR)
    return run_codegen(connector_file, base_path, executable)
