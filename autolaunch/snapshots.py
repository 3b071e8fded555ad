"""Saving, loading and removing snapshots of project directories."""

from __future__ import annotations

import json
import logging
import shutil
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Protocol, Sequence

from .settings import default_snapshots_path

log = logging.getLogger(__name__)

METADATA_FILE = "snapshot_metadata.json"

EXCLUDE_PATTERNS = (
    ".git",
    "node_modules",
    "target",
    "__pycache__",
    ".venv",
    "venv",
    "dist",
    "build",
    ".cache",
)


class EnvironmentType(str, Enum):
    """Kind of environment a snapshot was taken for."""

    DOCKER = "docker"
    DIRECT = "direct"


def _require(data: dict[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None


@dataclass
class Dependency:
    """A package the project depends on."""

    name: str
    version: str | None = None
    dev: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "version": self.version, "dev": self.dev}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Dependency:
        return cls(
            name=_require(data, "name"),
            version=_require(data, "version"),
            dev=bool(_require(data, "dev")),
        )


class ProjectInfo(Protocol):
    """What a snapshot needs to know about an analysed project."""

    stack: Any
    entry_command: str | None
    dependencies: Sequence[Dependency]


@dataclass
class SnapshotMetadata:
    """Everything needed to start a project again from its snapshot."""

    entry_command: str | None
    ports: list[int] = field(default_factory=list)
    environment_variables: list[tuple[str, str]] = field(default_factory=list)
    dependencies: list[Dependency] = field(default_factory=list)
    tech_stack: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "entry_command": self.entry_command,
            "ports": list(self.ports),
            "environment_variables": [[k, v] for k, v in self.environment_variables],
            "dependencies": [dep.to_dict() for dep in self.dependencies],
            "tech_stack": self.tech_stack,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SnapshotMetadata:
        try:
            return cls(
                entry_command=_require(data, "entry_command"),
                ports=[int(port) for port in _require(data, "ports")],
                environment_variables=[
                    (str(key), str(value))
                    for key, value in _require(data, "environment_variables")
                ],
                dependencies=[
                    Dependency.from_dict(dep) for dep in _require(data, "dependencies")
                ],
                tech_stack=_require(data, "tech_stack"),
            )
        except TypeError as exc:
            raise ValueError(f"invalid snapshot metadata: {exc}") from exc


@dataclass
class ProjectSnapshot:
    """Record describing a snapshot that was created."""

    id: str
    project_id: str
    snapshot_path: str
    environment_type: str
    metadata: str
    created_at: str
    size_bytes: int


def _copy_tree(source: Path, destination: Path, exclude: Sequence[str]) -> None:
    destination.mkdir(parents=True, exist_ok=True)
    for entry in source.iterdir():
        if any(pattern in entry.name for pattern in exclude):
            log.debug("Skipping excluded entry: %s", entry)
            continue
        target = destination / entry.name
        if entry.is_dir():
            _copy_tree(entry, target, exclude)
        else:
            shutil.copy(entry, target)


def _directory_size(path: Path) -> int:
    if path.is_file():
        return path.stat().st_size
    return sum(
        _directory_size(entry) if entry.is_dir() else entry.stat().st_size
        for entry in path.iterdir()
    )


class SnapshotManager:
    """Stores project snapshots, one directory per snapshot."""

    def __init__(self, snapshots_dir: str | Path | None = None) -> None:
        self.snapshots_dir = Path(
            snapshots_dir if snapshots_dir is not None else default_snapshots_path()
        )
        if not self.snapshots_dir.exists():
            log.info("Creating snapshots directory: %s", self.snapshots_dir)
            self.snapshots_dir.mkdir(parents=True, exist_ok=True)

    def _snapshot_dirs(self):
        if not self.snapshots_dir.exists():
            return
        for entry in sorted(self.snapshots_dir.iterdir()):
            metadata_path = entry / METADATA_FILE
            if entry.is_dir() and metadata_path.exists():
                yield entry, metadata_path

    def create_snapshot(
        self,
        project_id: str,
        project_path: str | Path,
        project_info: ProjectInfo,
        environment_type: EnvironmentType,
        ports: Sequence[int],
        environment_variables: Sequence[tuple[str, str]],
    ) -> ProjectSnapshot:
        """Copy the project and its launch metadata into a new snapshot."""
        log.info("Creating snapshot for project: %s", project_id)
        snapshot_id = str(uuid.uuid4())
        snapshot_path = self.snapshots_dir / snapshot_id
        snapshot_path.mkdir(parents=True, exist_ok=True)

        _copy_tree(Path(project_path), snapshot_path, EXCLUDE_PATTERNS)

        metadata = SnapshotMetadata(
            entry_command=project_info.entry_command,
            ports=list(ports),
            environment_variables=[(k, v) for k, v in environment_variables],
            dependencies=list(project_info.dependencies),
            tech_stack=str(project_info.stack),
        )
        metadata_path = snapshot_path / METADATA_FILE
        metadata_path.write_text(json.dumps(metadata.to_dict(), indent=2), encoding="utf-8")

        size_bytes = _directory_size(snapshot_path)
        log.info("Snapshot size: %d bytes", size_bytes)

        snapshot = ProjectSnapshot(
            id=snapshot_id,
            project_id=project_id,
            snapshot_path=str(snapshot_path),
            environment_type=EnvironmentType(environment_type).value,
            metadata=json.dumps(metadata.to_dict(), separators=(",", ":")),
            created_at=datetime.now(timezone.utc).isoformat(),
            size_bytes=size_bytes,
        )
        log.info("Snapshot created: %s", snapshot.id)
        return snapshot

    def load_snapshot(self, snapshot_id: str) -> tuple[Path, SnapshotMetadata]:
        """Return the snapshot's directory and its metadata."""
        log.info("Loading snapshot: %s", snapshot_id)
        snapshot_path = self.snapshots_dir / snapshot_id
        if not snapshot_path.exists():
            raise FileNotFoundError(f"Snapshot not found: {snapshot_id}")
        data = json.loads((snapshot_path / METADATA_FILE).read_text(encoding="utf-8"))
        return snapshot_path, SnapshotMetadata.from_dict(data)

    def delete_snapshot(self, snapshot_id: str) -> None:
        """Remove a snapshot and all its files; a missing one is ignored."""
        snapshot_path = self.snapshots_dir / snapshot_id
        if not snapshot_path.exists():
            log.warning("Snapshot not found: %s", snapshot_id)
            return
        shutil.rmtree(snapshot_path)
        log.info("Snapshot deleted: %s", snapshot_id)

    def list_snapshots(self, project_id: str) -> list[str]:
        """Return the ids of all stored snapshots."""
        log.debug("Listing snapshots for project: %s", project_id)
        return [entry.name for entry, _ in self._snapshot_dirs()]

    def cleanup_old_snapshots(self, max_age_days: int) -> list[str]:
        """Delete snapshots whose metadata is older than the given age."""
        log.info("Removing snapshots older than %d days", max_age_days)
        max_age = timedelta(days=max_age_days)
        now = datetime.now(timezone.utc)
        deleted = []
        for entry, metadata_path in list(self._snapshot_dirs()):
            modified = datetime.fromtimestamp(metadata_path.stat().st_mtime, timezone.utc)
            if now - modified > max_age:
                self.delete_snapshot(entry.name)
                deleted.append(entry.name)
        log.info("Removed %d old snapshots", len(deleted))
        return deleted