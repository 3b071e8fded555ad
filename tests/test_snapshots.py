import json
import os
import time
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from autolaunch.snapshots import (
    Dependency,
    EnvironmentType,
    ProjectSnapshot,
    SnapshotManager,
    SnapshotMetadata,
)


@dataclass
class SampleProjectInfo:
    stack: str = "NodeJs(18.0.0)"
    entry_command: str | None = "npm start"
    dependencies: list = field(
        default_factory=lambda: [
            Dependency(name="react", version="18.0.0", dev=False),
            Dependency(name="typescript", version="5.0.0", dev=True),
        ]
    )


@pytest.fixture
def manager(tmp_path):
    return SnapshotManager(tmp_path / "snapshots")


@pytest.fixture
def project(tmp_path):
    path = tmp_path / "test_project"
    path.mkdir()
    return path


def test_manager_creates_directory(tmp_path):
    target = tmp_path / "a" / "b"
    SnapshotManager(target)
    assert target.is_dir()


def test_create_snapshot_saves_files(manager, project):
    (project / "index.js").write_bytes(b"console.log('Hello World');")
    snapshot = manager.create_snapshot(
        "test_project_id",
        project,
        SampleProjectInfo(),
        EnvironmentType.DIRECT,
        [3000],
        [("NODE_ENV", "production")],
    )
    assert isinstance(snapshot, ProjectSnapshot)
    assert snapshot.id
    assert snapshot.project_id == "test_project_id"
    assert snapshot.size_bytes > 0
    assert snapshot.environment_type == "direct"
    assert (Path(snapshot.snapshot_path) / "index.js").read_bytes() == b"console.log('Hello World');"
    compact = json.loads(snapshot.metadata)
    assert compact["ports"] == [3000]
    assert compact["environment_variables"] == [["NODE_ENV", "production"]]
    assert compact["tech_stack"] == "NodeJs(18.0.0)"


def test_load_snapshot_returns_metadata(manager, project):
    (project / "app.py").write_bytes(b"print('Hello')")
    snapshot = manager.create_snapshot(
        "test_project_id",
        project,
        SampleProjectInfo(),
        EnvironmentType.DOCKER,
        [8080, 8081],
        [("PORT", "8080"), ("DEBUG", "true")],
    )
    assert snapshot.environment_type == "docker"
    loaded_path, metadata = manager.load_snapshot(snapshot.id)
    assert loaded_path.exists()
    assert metadata.entry_command == "npm start"
    assert metadata.ports == [8080, 8081]
    assert len(metadata.environment_variables) == 2
    assert len(metadata.dependencies) == 2
    assert metadata.dependencies[1] == Dependency("typescript", "5.0.0", True)


def test_delete_snapshot_removes_all_files(manager, project):
    (project / "main.rs").write_bytes(b"fn main() {}")
    snapshot = manager.create_snapshot(
        "test_project_id", project, SampleProjectInfo(), EnvironmentType.DIRECT, [], []
    )
    snapshot_path = Path(snapshot.snapshot_path)
    assert snapshot_path.exists()
    manager.delete_snapshot(snapshot.id)
    assert not snapshot_path.exists()


def test_delete_nonexistent_snapshot_succeeds(manager):
    assert manager.delete_snapshot("nonexistent_snapshot_id") is None
    assert manager.list_snapshots("any") == []


def test_load_missing_snapshot_raises(manager):
    with pytest.raises(FileNotFoundError, match="missing_id"):
        manager.load_snapshot("missing_id")


def test_snapshot_excludes_node_modules(manager, project):
    node_modules = project / "node_modules"
    node_modules.mkdir()
    (node_modules / "large_package.js").write_bytes(b"\0" * (1024 * 1024))
    (project / "index.js").write_bytes(b"console.log('test');")

    snapshot = manager.create_snapshot(
        "test_project_id", project, SampleProjectInfo(), EnvironmentType.DIRECT, [], []
    )
    assert snapshot.size_bytes < 100_000
    assert not (Path(snapshot.snapshot_path) / "node_modules").exists()


def test_exclusion_matches_name_substrings(manager, project):
    (project / "rebuild.txt").write_text("x")
    (project / ".gitignore").write_text("x")
    (project / "keep.txt").write_text("x")
    snapshot = manager.create_snapshot(
        "p", project, SampleProjectInfo(), EnvironmentType.DIRECT, [], []
    )
    copied = sorted(p.name for p in Path(snapshot.snapshot_path).iterdir())
    assert copied == ["keep.txt", "snapshot_metadata.json"]


def test_snapshot_preserves_directory_structure(manager, project):
    components = project / "src" / "components"
    components.mkdir(parents=True)
    (project / "package.json").write_bytes(b"{}")
    (project / "src" / "index.js").write_bytes(b"// main")
    (components / "App.js").write_bytes(b"// component")

    snapshot = manager.create_snapshot(
        "test_project_id", project, SampleProjectInfo(), EnvironmentType.DIRECT, [], []
    )
    loaded_path, _ = manager.load_snapshot(snapshot.id)
    assert (loaded_path / "package.json").exists()
    assert (loaded_path / "src" / "index.js").exists()
    assert (loaded_path / "src" / "components" / "App.js").read_bytes() == b"// component"


def test_multiple_snapshots_for_same_project(manager, project):
    (project / "main.go").write_bytes(b"package main")
    info = SampleProjectInfo()
    first = manager.create_snapshot("test_project_id", project, info, EnvironmentType.DIRECT, [8080], [])
    second = manager.create_snapshot("test_project_id", project, info, EnvironmentType.DOCKER, [9090], [])

    assert first.id != second.id
    assert first.project_id == second.project_id
    path1, meta1 = manager.load_snapshot(first.id)
    path2, meta2 = manager.load_snapshot(second.id)
    assert path1.exists() and path2.exists()
    assert path1 != path2
    assert meta1.ports == [8080]
    assert meta2.ports == [9090]
    assert sorted(manager.list_snapshots("test_project_id")) == sorted([first.id, second.id])


def test_snapshot_metadata_serialization(manager, project):
    (project / "test.txt").write_bytes(b"test")
    info = SampleProjectInfo(entry_command="cargo run --release")
    snapshot = manager.create_snapshot(
        "test_project_id",
        project,
        info,
        EnvironmentType.DOCKER,
        [3000, 3001, 3002],
        [("DATABASE_URL", "postgres://localhost"), ("API_KEY", "placeholder")],
    )
    _, metadata = manager.load_snapshot(snapshot.id)
    assert metadata.entry_command == "cargo run --release"
    assert metadata.ports == [3000, 3001, 3002]
    assert len(metadata.environment_variables) == 2
    assert ("DATABASE_URL", "postgres://localhost") in metadata.environment_variables
    assert ("API_KEY", "placeholder") in metadata.environment_variables
    assert len(metadata.dependencies) == 2

    on_disk = json.loads((Path(snapshot.snapshot_path) / "snapshot_metadata.json").read_text())
    assert on_disk["dependencies"][0] == {"name": "react", "version": "18.0.0", "dev": False}


def test_cleanup_old_snapshots_keeps_new(manager, project):
    (project / "test.txt").write_bytes(b"test")
    snapshot = manager.create_snapshot(
        "test_project_id", project, SampleProjectInfo(), EnvironmentType.DIRECT, [], []
    )
    assert manager.cleanup_old_snapshots(30) == []
    path, _ = manager.load_snapshot(snapshot.id)
    assert path.exists()


def test_cleanup_old_snapshots_removes_old(manager, project):
    (project / "test.txt").write_bytes(b"test")
    info = SampleProjectInfo()
    old = manager.create_snapshot("p", project, info, EnvironmentType.DIRECT, [], [])
    fresh = manager.create_snapshot("p", project, info, EnvironmentType.DIRECT, [], [])
    old_time = time.time() - 40 * 86400
    os.utime(Path(old.snapshot_path) / "snapshot_metadata.json", (old_time, old_time))

    assert manager.cleanup_old_snapshots(30) == [old.id]
    assert not Path(old.snapshot_path).exists()
    assert manager.list_snapshots("p") == [fresh.id]


def test_list_snapshots_ignores_dirs_without_metadata(manager):
    (manager.snapshots_dir / "stray").mkdir()
    (manager.snapshots_dir / "file.txt").write_text("x")
    assert manager.list_snapshots("p") == []


def test_metadata_round_trip():
    metadata = SnapshotMetadata(
        entry_command=None,
        ports=[1, 2],
        environment_variables=[("A", "1")],
        dependencies=[Dependency("x", None, True)],
        tech_stack="Unknown",
    )
    assert SnapshotMetadata.from_dict(metadata.to_dict()) == metadata


def test_metadata_missing_field_raises():
    with pytest.raises(ValueError, match="tech_stack"):
        SnapshotMetadata.from_dict(
            {"entry_command": None, "ports": [], "environment_variables": [], "dependencies": []}
        )