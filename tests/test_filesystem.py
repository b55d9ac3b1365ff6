import pytest

from contract_sources.application.domain import SourceFile
from contract_sources.application.exceptions import (
    FilesystemError,
    PathCollisionError,
    UnsafePathError,
)
from contract_sources.infrastructure.filesystem import FileSystemMaterializer


def _files_under(root):
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())


@pytest.fixture
def materializer() -> FileSystemMaterializer:
    return FileSystemMaterializer()


@pytest.fixture
def sources(foo_sources):
    return {path: SourceFile(content) for path, content in foo_sources.items()}


@pytest.mark.asyncio
async def test_materialize_writes_tree(materializer, sources, foo_sources, tmp_path):
    root = tmp_path / "nouns_token"

    written = await materializer.materialize(root, sources)

    assert sorted(written) == sorted(
        [root / "contracts" / "Foo.sol", root / "interfaces" / "IFoo.sol"]
    )
    assert (root / "contracts").is_dir()
    assert (root / "interfaces").is_dir()
    assert _files_under(root) == ["contracts/Foo.sol", "interfaces/IFoo.sol"]
    for path, content in foo_sources.items():
        assert (root / path).read_bytes() == content.encode("utf-8")


@pytest.mark.asyncio
async def test_materialize_is_idempotent(materializer, sources, foo_sources, tmp_path):
    root = tmp_path / "nouns_token"

    await materializer.materialize(root, sources)
    await materializer.materialize(root, sources)

    assert _files_under(root) == ["contracts/Foo.sol", "interfaces/IFoo.sol"]
    for path, content in foo_sources.items():
        assert (root / path).read_bytes() == content.encode("utf-8")


@pytest.mark.asyncio
async def test_materialize_truncates_and_keeps_orphans(materializer, tmp_path):
    root = tmp_path / "nouns_token"
    (root / "contracts").mkdir(parents=True)
    (root / "contracts" / "Foo.sol").write_text("a much longer previous version\n")
    (root / "contracts" / "Removed.sol").write_text("stale\n")

    await materializer.materialize(root, {"contracts/Foo.sol": SourceFile("new")})

    assert (root / "contracts" / "Foo.sol").read_text() == "new"
    assert (root / "contracts" / "Removed.sol").read_text() == "stale\n"


@pytest.mark.asyncio
async def test_materialize_writes_content_verbatim(materializer, tmp_path):
    content = "pragma solidity ^0.8.6;\r\n// café\r\ncontract A {}"

    await materializer.materialize(tmp_path, {"A.sol": SourceFile(content)})

    assert (tmp_path / "A.sol").read_bytes() == content.encode("utf-8")


@pytest.mark.asyncio
async def test_materialize_rejects_traversal_before_writing(materializer, tmp_path):
    root = tmp_path / "nouns_token"
    sources = {
        "contracts/Foo.sol": SourceFile("ok"),
        "../escaped.sol": SourceFile("evil"),
    }

    with pytest.raises(UnsafePathError):
        await materializer.materialize(root, sources)

    assert not root.exists()
    assert not (tmp_path / "escaped.sol").exists()


@pytest.mark.asyncio
async def test_materialize_rejects_collisions_before_writing(materializer, tmp_path):
    root = tmp_path / "nouns_token"
    sources = {
        "contracts/Foo.sol": SourceFile("one"),
        "contracts\\Foo.sol": SourceFile("two"),
    }

    with pytest.raises(PathCollisionError):
        await materializer.materialize(root, sources)

    assert not root.exists()


@pytest.mark.asyncio
async def test_materialize_reports_write_failure(materializer, tmp_path):
    root = tmp_path / "nouns_token"
    root.mkdir()
    # A regular file where a directory is needed.
    (root / "contracts").write_text("")
    sources = {
        "A.sol": SourceFile("written first"),
        "contracts/Foo.sol": SourceFile("never written"),
    }

    with pytest.raises(FilesystemError) as exc_info:
        await materializer.materialize(root, sources)

    assert exc_info.value.path == root / "contracts" / "Foo.sol"
    assert isinstance(exc_info.value.cause, OSError)
    assert (root / "A.sol").read_text() == "written first"


@pytest.mark.asyncio
async def test_materialize_unencodable_content_keeps_previous_file(materializer, tmp_path):
    (tmp_path / "A.sol").write_text("previous version")

    with pytest.raises(FilesystemError) as exc_info:
        await materializer.materialize(tmp_path, {"A.sol": SourceFile("x\ud800y")})

    assert exc_info.value.path == tmp_path / "A.sol"
    assert isinstance(exc_info.value.cause, UnicodeEncodeError)
    assert (tmp_path / "A.sol").read_text() == "previous version"


@pytest.mark.asyncio
async def test_materialize_rejects_unencodable_path(materializer, tmp_path):
    root = tmp_path / "nouns_token"

    with pytest.raises(UnsafePathError):
        await materializer.materialize(root, {"\ud800/A.sol": SourceFile("x")})

    assert not root.exists()
