import os

import pytest

from clabkit.utils.files import (
    copy_file,
    copy_file_contents,
    create_directory,
    create_file,
    file_exists,
    read_file_content,
)


def test_file_exists(tmp_path):
    f = tmp_path / "a.txt"
    assert file_exists(f) is False
    f.write_text("x")
    assert file_exists(f) is True
    assert file_exists(tmp_path) is False


def test_create_and_read_round_trip(tmp_path):
    f = tmp_path / "cfg"
    create_file(f, "hello world")
    assert read_file_content(f) == b"hello world\n"


def test_read_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_file_content(tmp_path / "missing")


def test_read_directory_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_file_content(tmp_path)


def test_copy_file(tmp_path):
    src = tmp_path / "src"
    dst = tmp_path / "dst"
    src.write_bytes(b"payload data")
    copy_file(src, dst)
    assert dst.read_bytes() == src.read_bytes()


def test_copy_file_overwrites(tmp_path):
    src = tmp_path / "src"
    dst = tmp_path / "dst"
    src.write_bytes(b"new")
    dst.write_bytes(b"old content that is longer")
    copy_file(src, dst)
    assert dst.read_bytes() == b"new"


def test_copy_file_same_file_keeps_content(tmp_path):
    src = tmp_path / "src"
    src.write_bytes(b"same")
    copy_file(src, src)
    assert src.read_bytes() == b"same"


def test_copy_file_rejects_directory_source(tmp_path):
    with pytest.raises(ValueError, match="non-regular source"):
        copy_file(tmp_path, tmp_path / "dst")


def test_copy_file_rejects_directory_destination(tmp_path):
    src = tmp_path / "src"
    src.write_bytes(b"x")
    target = tmp_path / "dir"
    target.mkdir()
    with pytest.raises(ValueError, match="non-regular destination"):
        copy_file(src, target)


def test_copy_file_missing_source(tmp_path):
    with pytest.raises(FileNotFoundError):
        copy_file(tmp_path / "nope", tmp_path / "dst")


def test_copy_file_contents(tmp_path):
    src = tmp_path / "src"
    dst = tmp_path / "dst"
    src.write_bytes(b"abc")
    copy_file_contents(src, dst)
    assert dst.read_bytes() == b"abc"


def test_create_directory(tmp_path):
    target = tmp_path / "a" / "b"
    create_directory(target, 0o755)
    assert target.is_dir()
    marker = target / "keep"
    marker.write_text("x")
    create_directory(target, 0o755)
    assert marker.read_text() == "x"
    assert os.path.isdir(target)