"""Tests for streaming archive extraction."""

import gzip
import io
import tarfile
import zlib
from pathlib import Path

import pytest

from sprout.templates.archive import (
    ChunkReader,
    extract_archive,
    gunzip_chunks,
    include_entry,
    strip_entry,
)
from sprout.templates.base import ResolvedTemplate


def _chunked(data: bytes, size: int = 7) -> list[bytes]:
    return [data[i : i + size] for i in range(0, len(data), size)]


def test_gunzip_chunks_round_trip() -> None:
    data = b"hello world " * 1000
    assert b"".join(gunzip_chunks(_chunked(gzip.compress(data)))) == data


def test_gunzip_chunks_truncated() -> None:
    compressed = gzip.compress(b"x" * 5000)
    with pytest.raises(EOFError):
        list(gunzip_chunks([compressed[:-10]]))


def test_gunzip_chunks_corrupt() -> None:
    with pytest.raises(zlib.error):
        list(gunzip_chunks([b"definitely not gzip"]))


def test_chunk_reader_reassembles_chunks() -> None:
    reader = io.BufferedReader(ChunkReader([b"ab", b"", b"cde", b"f"]))
    assert reader.read(4) == b"abcd"
    assert reader.read() == b"ef"


@pytest.mark.parametrize(
    ("name", "sub_path", "expected"),
    [
        ("repo-main", "", False),
        ("repo-main/package.json", "", True),
        ("repo-main/templates/foo", "templates/foo", True),
        ("repo-main/templates/foo/index.js", "templates/foo", True),
        ("repo-main/templates/foobar/index.js", "templates/foo", False),
        ("repo-main/templates", "templates/foo", False),
        ("repo-main/other/templates/foo/x", "templates/foo", False),
    ],
)
def test_include_entry(name: str, sub_path: str, expected: bool) -> None:
    assert include_entry(name, sub_path) is expected


def test_strip_entry() -> None:
    assert strip_entry("repo-main/templates/foo/src/a.ts", 3) == "src/a.ts"
    assert strip_entry("repo-main/templates/foo", 3) is None
    assert strip_entry("repo-main/templates/foo/", 3) is None


class TestExtractArchive:
    """Tests for extract_archive."""

    def test_extracts_repository_root(self, tmp_path: Path, tarball) -> None:
        body = tarball({"package.json": b"{}", "src/": b"", "src/index.ts": b"x"})
        template = ResolvedTemplate("acme", "tpl", "main")

        count = extract_archive(_chunked(body, 100), template, tmp_path)

        assert (tmp_path / "package.json").read_bytes() == b"{}"
        assert (tmp_path / "src" / "index.ts").read_bytes() == b"x"
        assert count == 3

    def test_extracts_only_sub_path(self, tmp_path: Path, tarball) -> None:
        body = tarball(
            {
                "README.md": b"root",
                "templates/foo/package.json": b"{}",
                "templates/foo/index.js": b"console.log(1)",
                "templates/foobar/package.json": b"{}",
                "templates/bar/index.js": b"nope",
            }
        )
        template = ResolvedTemplate("acme", "tpl", "main", ("templates", "foo"))

        extract_archive([body], template, tmp_path)

        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "index.js",
            "package.json",
        ]
        assert (tmp_path / "index.js").read_bytes() == b"console.log(1)"

    def test_missing_sub_path_extracts_nothing(self, tmp_path: Path, tarball) -> None:
        body = tarball({"package.json": b"{}"})
        template = ResolvedTemplate("acme", "tpl", "main", ("missing",))

        assert extract_archive([body], template, tmp_path) == 0
        assert list(tmp_path.iterdir()) == []

    def test_rejects_entries_escaping_destination(self, tmp_path: Path) -> None:
        buffer = io.BytesIO()
        with tarfile.open(fileobj=buffer, mode="w:gz") as archive:
            info = tarfile.TarInfo("repo-main/../../evil.txt")
            info.size = 4
            archive.addfile(info, io.BytesIO(b"evil"))
        staging = tmp_path / "staging"
        staging.mkdir()

        with pytest.raises(tarfile.TarError):
            extract_archive(
                [buffer.getvalue()], ResolvedTemplate("a", "b", "c"), staging
            )
        assert not (tmp_path / "evil.txt").exists()

    def test_truncated_archive(self, tmp_path: Path, tarball) -> None:
        body = tarball({"package.json": b"{}" * 5000})

        with pytest.raises((EOFError, tarfile.TarError, zlib.error)):
            extract_archive(
                [body[: len(body) // 2]], ResolvedTemplate("a", "b", "c"), tmp_path
            )
