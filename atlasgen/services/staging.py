"""Input staging: copy the source image into a per-job scratch file."""

import logging
import random
import shutil
from pathlib import Path
from typing import Tuple

from PIL import Image

from ..exceptions import StagingError

logger = logging.getLogger("atlasgen.staging")

# Tried in order when a source name is given without extension
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".bmp", ".tga", ".tiff")
DEFAULT_EXTENSION = ".png"


def find_image_extension(base_path: Path) -> str:
    """Return the extension of the first existing ``base_path + ext``, else .png."""
    for ext in IMAGE_EXTENSIONS:
        if Path(str(base_path) + ext).is_file():
            return ext
    return DEFAULT_EXTENSION


def resolve_source_image(source_dir: Path, name: str) -> Path:
    """Locate a source image by name, with or without extension.

    Raises:
        StagingError: If no matching image exists
    """
    candidate = Path(source_dir) / name
    if candidate.suffix.lower() in IMAGE_EXTENSIONS and candidate.is_file():
        return candidate

    candidate = Path(str(candidate) + find_image_extension(candidate))
    if not candidate.is_file():
        raise StagingError(f"Source image not found: {name} in {source_dir}")
    return candidate


def stage_input(source: Path, temp_dir: Path, job_id: str) -> Path:
    """Copy ``source`` into ``temp_dir`` and perturb its first pixel.

    The perturbation makes every staged input byte-unique, so the worker
    never serves a cached result for an image submitted twice.

    Returns:
        Path to the staged copy

    Raises:
        StagingError: If the source is missing or not a readable image
    """
    source = Path(source)
    temp_dir = Path(temp_dir)
    staged = temp_dir / f"{source.stem}-{job_id}{source.suffix}"

    try:
        temp_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, staged)
        perturb_first_pixel(staged)
    except OSError as e:
        # PIL.UnidentifiedImageError is an OSError too
        staged.unlink(missing_ok=True)
        raise StagingError(f"Failed to stage {source}: {e}") from e

    logger.info("Staged %s as %s", source, staged)
    return staged


def perturb_first_pixel(path: Path) -> Tuple[int, int, int]:
    """Overwrite pixel (0, 0) with a random opaque colour, in place.

    Returns:
        The RGB colour written
    """
    with Image.open(path) as img:
        fmt = img.format
        img.load()
        if img.mode not in ("RGB", "RGBA"):
            img = img.convert("RGBA" if "transparency" in img.info or "A" in img.mode else "RGB")
        if fmt == "JPEG" and img.mode != "RGB":
            img = img.convert("RGB")

        current = img.getpixel((0, 0))[:3]
        colour = current
        while colour == current:
            colour = (random.randint(0, 255), random.randint(0, 255), random.randint(0, 255))

        img.putpixel((0, 0), colour + (255,) if img.mode == "RGBA" else colour)
        img.save(path, format=fmt)

    return colour
