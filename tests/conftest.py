"""
Pytest configuration and fixtures
"""
import json
from pathlib import Path
from typing import Dict, List, Mapping, Union

import pytest

from contract_sources.application.domain import Fetcher, Materializer, SourceFile

TOKEN_ADDRESS = "0x9C8fF314C9Bc7F6e59A9d9225Fb22946427eDC03"
SEEDER_ADDRESS = "0xCC8a0FB5ab3C7132c1b2A0109142Fb112c4Ce515"
DESCRIPTOR_ADDRESS = "0x0Cfdb3Ba1694c2bb2CFACB0339ad7b1Ae5932B63"


def compiler_input(sources: Dict[str, str], **settings) -> dict:
    """Build a compiler input document as the explorer embeds it."""
    return {
        "language": "Solidity",
        "sources": {path: {"content": content} for path, content in sources.items()},
        "settings": settings,
    }


def wrap(document: dict) -> str:
    """Encode a compiler input the way `SourceCode` carries it: an extra pair of braces."""
    return "{" + json.dumps(document) + "}"


def record(source_code: str, name: str = "Contract", **extra) -> dict:
    data = {
        "SourceCode": source_code,
        "ABI": "[]",
        "ContractName": name,
        "CompilerVersion": "v0.8.6+commit.11564f7e",
        "OptimizationUsed": "1",
        "Runs": "200",
        "ConstructorArguments": "",
        "EVMVersion": "Default",
        "Library": "",
        "LicenseType": "GNU GPLv3",
        "Proxy": "0",
        "Implementation": "",
        "SwarmSource": "",
    }
    data.update(extra)
    return data


def envelope(
    result: Union[List[dict], str], status: str = "1", message: str = "OK"
) -> bytes:
    return json.dumps(
        {"status": status, "message": message, "result": result}
    ).encode("utf-8")


class FakeFetcher(Fetcher):
    """Serves canned bodies (or raises canned errors) and records every call."""

    def __init__(self, responses: Mapping[str, Union[bytes, Exception]]):
        self.responses = dict(responses)
        self.calls: List[str] = []

    async def fetch(self, address: str) -> bytes:
        self.calls.append(address)
        response = self.responses[address]
        if isinstance(response, Exception):
            raise response
        return response


class RecordingMaterializer(Materializer):
    """Records materialize calls without touching the filesystem."""

    def __init__(self):
        self.calls: List[tuple] = []

    async def materialize(
        self, root: Path, sources: Mapping[str, SourceFile]
    ) -> List[Path]:
        self.calls.append((root, dict(sources)))
        return [root / path for path in sources]


@pytest.fixture
def foo_sources() -> Dict[str, str]:
    return {
        "contracts/Foo.sol": "pragma solidity ^0.8.6;\n\ncontract Foo {}\n",
        "interfaces/IFoo.sol": "pragma solidity ^0.8.6;\n\ninterface IFoo {}\n",
    }


@pytest.fixture
def foo_envelope(foo_sources) -> bytes:
    return envelope([record(wrap(compiler_input(foo_sources)), name="Foo")])


@pytest.fixture
def recording_materializer() -> RecordingMaterializer:
    return RecordingMaterializer()
