# autolaunch

This package keeps the application settings for launching projects locally. It also manages snapshots of those projects, so that a project can be started again quickly from a saved copy. All operations are ordinary synchronous calls that work on the local file system.

## Installation

```
pip install autolaunch
```

## Settings

The `autolaunch.settings` module keeps an `AppSettings` value in a JSON file.

`SettingsManager(config_path=None)` loads that file. If the file does not exist, it writes the default settings to it first. It creates the parent directory of the file when needed. Without a path, it uses `default_config_path()`, which is the platform's user configuration directory joined with `autolaunch/settings.json`.

Every setter saves the file straight away.

```python
from autolaunch.settings import SettingsManager, Theme, IsolationMode

manager = SettingsManager("settings.json")
manager.set_theme(Theme.LIGHT)
manager.set_default_isolation_mode(IsolationMode.DIRECT)
manager.set_auto_cleanup(False)
manager.set_snapshots_path("data/snapshots")   # creates "data" if missing
print(manager.settings.theme)                  # Theme.LIGHT

manager.reset_to_defaults()
```

`update_settings(new_settings)` replaces all settings in one step. If `snapshots_path` is not empty, it creates the parent directory of that path.

Default values of `AppSettings`:

| field                    | default                       |
|--------------------------|-------------------------------|
| `default_isolation_mode` | `IsolationMode.SANDBOX`       |
| `snapshots_path`         | `default_snapshots_path()`    |
| `theme`                  | `Theme.DARK`                  |
| `auto_cleanup`           | `True`                        |
| `max_snapshot_age_days`  | `30`                          |
| `enable_logging`         | `True`                        |

The file stores the enum members by value: `"Sandbox"` and `"Direct"` for the isolation mode, and `"Light"`, `"Dark"` and `"System"` for the theme.

- `load_settings(path)` reads the file directly.
- `save_settings(path, settings)` writes it directly.
- `AppSettings.to_dict()` converts the settings to a mapping.
- `AppSettings.from_dict(data)` converts a mapping back. It raises `ValueError` for missing or malformed fields.

## Snapshots

The `autolaunch.snapshots` module stores each snapshot in its own directory under the snapshots directory. That directory defaults to `default_snapshots_path()`. Each snapshot directory is named by a random UUID.

`create_snapshot` copies the project into the snapshot directory. It skips every entry whose name contains one of these strings:

- `.git`
- `node_modules`
- `target`
- `__pycache__`
- `.venv`
- `venv`
- `dist`
- `build`
- `.cache`

It then writes `snapshot_metadata.json` into the snapshot directory. That file holds the entry command, ports, environment variables, dependencies and stack. Finally, `create_snapshot` returns a `ProjectSnapshot` record. The record carries the id, the path, the environment type (`"docker"` or `"direct"`), the metadata as compact JSON, the creation time and the total size in bytes.

The `project_info` argument can be any object with these attributes:

- `stack`, which is stored as `str(stack)`
- `entry_command`
- `dependencies`, a sequence of `Dependency`

```python
from dataclasses import dataclass, field
from autolaunch.snapshots import SnapshotManager, EnvironmentType, Dependency

@dataclass
class Info:
    stack: str = "NodeJs"
    entry_command: str | None = "npm start"
    dependencies: list = field(default_factory=lambda: [Dependency("react", "18.0.0")])

snapshots = SnapshotManager("snapshots")
snapshot = snapshots.create_snapshot(
    "my-project", "path/to/project", Info(),
    EnvironmentType.DIRECT, [3000], [("NODE_ENV", "production")],
)
path, metadata = snapshots.load_snapshot(snapshot.id)
print(metadata.ports)            # [3000]
snapshots.delete_snapshot(snapshot.id)
```

The manager has these other methods:

- `load_snapshot(snapshot_id)` raises `FileNotFoundError` for an unknown id.
- `delete_snapshot(snapshot_id)` removes every file of the snapshot. It does nothing if the snapshot is missing.
- `list_snapshots(project_id)` returns the ids of all stored snapshots that have a metadata file. It does not filter by project.
- `cleanup_old_snapshots(max_age_days)` deletes the snapshots whose metadata file was last modified longer ago than the given number of days. It returns their ids.

## What this package does not do

This package does not analyse repositories, clone them, or detect their technology stack. It does not start, stop or monitor processes or containers. It has no database of projects, no user interface and no command-line command. It only provides the settings store and the snapshot store described above.