"""Pipeline configuration selection.

The worker takes the path of a JSON pipeline document. Available
pipelines are the *.json files in the pipelines directory; the active
choice is persisted in a small state file.
"""

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from ..exceptions import PipelineNotFoundError

logger = logging.getLogger("atlasgen.pipelines")


class PipelineSelector:
    """Lists pipeline files and remembers which one is active."""

    def __init__(self, pipelines_dir: Path, state_file: Path):
        self.pipelines_dir = Path(pipelines_dir)
        self.state_file = Path(state_file)
        self._active: Optional[str] = None
        self._load()

    def _load(self):
        try:
            if self.state_file.is_file():
                with open(self.state_file, "r") as f:
                    self._active = json.load(f).get("active")
        except (json.JSONDecodeError, OSError, AttributeError):
            self._active = None

    def _save(self):
        os.makedirs(self.state_file.parent, exist_ok=True)
        with open(self.state_file, "w") as f:
            json.dump({"active": self._active}, f, indent=2)

    def list(self) -> List[str]:
        """Pipeline names (file stems), sorted."""
        if not self.pipelines_dir.is_dir():
            return []
        return sorted(p.stem for p in self.pipelines_dir.glob("*.json") if p.is_file())

    @property
    def active_name(self) -> Optional[str]:
        """Selected pipeline, falling back to the first one available."""
        names = self.list()
        if not names:
            return None
        if self._active in names:
            return self._active
        return names[0]

    def select(self, name: str) -> Path:
        """Make ``name`` the active pipeline and persist the choice."""
        if name not in self.list():
            raise PipelineNotFoundError(f"Pipeline '{name}' not found in {self.pipelines_dir}")
        self._active = name
        self._save()
        logger.info("Active pipeline set to: %s", name)
        return self.pipelines_dir / f"{name}.json"

    def active_path(self) -> Path:
        """Absolute path of the active pipeline file."""
        name = self.active_name
        if name is None:
            raise PipelineNotFoundError(f"No pipeline JSON files found in {self.pipelines_dir}")
        return (self.pipelines_dir / f"{name}.json").resolve()
