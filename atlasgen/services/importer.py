"""Import hand-off for validated models.

The executor only depends on the ModelImporter protocol. LibraryImporter
is the default: it registers the model file and any textures the worker
wrote beside it.
"""

import logging
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from ..models import ImportedModel

logger = logging.getLogger("atlasgen.importer")

TEXTURE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".tga", ".bmp"}


@runtime_checkable
class ModelImporter(Protocol):
    def import_model(self, path: Path) -> Optional[ImportedModel]:
        """Return a handle for the model, or None if it is not ready yet."""
        ...

    def refresh(self) -> None:
        """Rescan the output location so newly written files become visible."""
        ...


class LibraryImporter:
    """Registers finished models found under the generated-models directory."""

    def __init__(self, library_dir: Path):
        self.library_dir = Path(library_dir)

    def refresh(self) -> None:
        self.library_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("Refreshed model library %s", self.library_dir)

    def import_model(self, path: Path) -> Optional[ImportedModel]:
        path = Path(path)
        try:
            size = path.stat().st_size
            with open(path, "rb") as f:
                f.read(1)
        except OSError as e:
            logger.info("Model %s not importable yet: %s", path, e)
            return None

        textures = sorted(
            p for p in path.parent.iterdir()
            if p.is_file() and p.suffix.lower() in TEXTURE_EXTENSIONS
        )
        model = ImportedModel(path=path, size_bytes=size, textures=textures)
        logger.info("Imported model %s (%d bytes, %d texture(s))", path, size, len(textures))
        return model
