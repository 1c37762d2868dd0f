from pathlib import Path

import pytest
import yaml

from rive_codegen.enginelib.scene_document import SCENE_EXTENSION


@pytest.fixture
def write_scene(tmp_path):
    """Write a scene document payload as ``<name>.scene.yaml``."""

    def write(payload, name: str = "main", directory: Path = None) -> Path:
        target_dir = directory or tmp_path
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / f"{name}{SCENE_EXTENSION}"
        with open(path, "w", encoding="utf-8") as handle:
            yaml.safe_dump(payload, handle, sort_keys=False)
        return path

    return write


MAIN_SCENE = {
    "artboards": [
        {
            "name": "Main",
            "animations": ["Idle", "Idle"],
            "state_machines": [
                {
                    "name": "Controller",
                    "inputs": [{"name": "IsOn", "type": "boolean", "value": True}],
                }
            ],
        }
    ]
}


@pytest.fixture
def main_scene():
    return yaml.safe_load(yaml.safe_dump(MAIN_SCENE))
