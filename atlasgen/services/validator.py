"""Structural checks on worker output before it is handed to the importer."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..models import RequestKind

logger = logging.getLogger("atlasgen.validator")

MIN_OUTPUT_BYTES = 1024

# Binary FBX starts with "Kaydara FBX Binary", ASCII FBX with "; FBX 7.x project file"
FBX_SIGNATURE = b"FBX"
HEADER_READ_BYTES = 1024


@dataclass
class ValidationResult:
    ok: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.ok


def validate_output(path: Union[str, Path], request_kind: RequestKind) -> ValidationResult:
    """Check that a worker output file looks complete.

    Args:
        path: Output file
        request_kind: Conversion mode that produced it

    Returns:
        ValidationResult; falsy with a reason when the file is rejected
    """
    path = str(path)
    label = RequestKind(request_kind).output_extension.lstrip(".").upper()

    if not os.path.isfile(path):
        return _reject(f"{label} file not found: {path}")

    size = os.path.getsize(path)
    if size < MIN_OUTPUT_BYTES:
        return _reject(f"{label} file is too small ({size} bytes) and may be corrupted: {path}")

    if request_kind == RequestKind.GENERATE_FBX:
        with open(path, "rb") as f:
            first_line = f.readline(HEADER_READ_BYTES)
        if FBX_SIGNATURE not in first_line:
            return _reject(f"{label} file header is invalid: {path}")

    return ValidationResult(ok=True)


def _reject(reason: str) -> ValidationResult:
    logger.warning(reason)
    return ValidationResult(ok=False, reason=reason)
