"""Tests for worker output validation."""

import pytest

from atlasgen.models import RequestKind
from atlasgen.services.validator import MIN_OUTPUT_BYTES, validate_output

BINARY_FBX_HEADER = b"Kaydara FBX Binary  \x00\x1a\x00"


def write(path, content: bytes):
    path.write_bytes(content)
    return path


@pytest.mark.parametrize("kind", list(RequestKind))
def test_small_file_always_rejected(tmp_path, kind):
    path = write(tmp_path / "small", b"; FBX 7.4.0 project file\n" + b"x" * 100)

    result = validate_output(path, kind)

    assert not result
    assert "too small" in result.reason


@pytest.mark.parametrize("kind", list(RequestKind))
def test_missing_file_rejected(tmp_path, kind):
    result = validate_output(tmp_path / "nothing", kind)
    assert not result
    assert "not found" in result.reason


def test_fbx_with_ascii_signature_accepted(tmp_path):
    path = write(tmp_path / "model.fbx", b"; FBX 7.4.0 project file\n" + b"x" * MIN_OUTPUT_BYTES)
    assert validate_output(path, RequestKind.GENERATE_FBX)


def test_fbx_with_binary_signature_accepted(tmp_path):
    path = write(tmp_path / "model.fbx", BINARY_FBX_HEADER + bytes(range(256)) * 8)
    assert validate_output(path, RequestKind.GENERATE_FBX).ok is True


def test_fbx_without_signature_rejected(tmp_path):
    path = write(tmp_path / "model.fbx", b"garbage header\n" + b"FBX" + b"x" * 2048)

    result = validate_output(path, RequestKind.GENERATE_FBX)

    assert not result
    assert "header is invalid" in result.reason


def test_obj_only_needs_size(tmp_path):
    path = write(tmp_path / "model.obj", b"x" * MIN_OUTPUT_BYTES)
    assert validate_output(path, RequestKind.GENERATE_OBJ)


def test_exactly_one_byte_short_rejected(tmp_path):
    path = write(tmp_path / "model.obj", b"x" * (MIN_OUTPUT_BYTES - 1))
    assert not validate_output(path, RequestKind.GENERATE_OBJ)
