"""
This module defines the core domain models for the application.

These classes represent the pure, technology-agnostic entities and data
structures that the application's business logic operates on: the explorer
envelope, the compiler input recovered from it, and the ports through which
the pipeline reaches the network and the filesystem.
"""

import dataclasses
from pathlib import Path

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional


# A JSON-like value (null, bool, number, string, list or object).
JsonValue = Any

SUCCESS_STATUS = "1"


# --- Domain Models ---

@dataclasses.dataclass(frozen=True)
class ContractTarget:
    """One row of the address table: where a contract's sources should go."""

    address: str
    directory: str


@dataclasses.dataclass(frozen=True)
class RawRecord:
    """A transient view of one verified contract as returned by the explorer."""

    source_code: str
    abi: str = ""
    contract_name: str = ""
    compiler_version: str = ""
    optimization_used: str = ""
    runs: str = ""
    constructor_arguments: str = ""
    evm_version: str = ""
    library: str = ""
    license_type: str = ""
    proxy: str = ""
    implementation: str = ""
    swarm_source: str = ""

    @property
    def is_proxy(self) -> bool:
        return self.proxy == "1"


@dataclasses.dataclass(frozen=True)
class Envelope:
    """
    The decoded top-level explorer response.

    `detail` holds the textual `result` the explorer sends instead of a
    record list when a request fails (e.g. "Invalid API Key").
    """

    status: str
    message: str
    records: List[RawRecord]
    detail: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == SUCCESS_STATUS


@dataclasses.dataclass(frozen=True)
class SourceFile:
    """The exact text of one file as compiled."""

    content: str


@dataclasses.dataclass(frozen=True)
class Optimizer:
    enabled: bool = False
    runs: int = 0


@dataclasses.dataclass(frozen=True)
class CompilerSettings:
    """
    Compiler settings carried alongside the sources.

    `libraries` has no fixed shape across explorer payloads and is passed
    through untouched.
    """

    optimizer: Optional[Optimizer] = None
    output_selection: Mapping[str, Mapping[str, List[str]]] = dataclasses.field(
        default_factory=dict
    )
    libraries: JsonValue = None


@dataclasses.dataclass(frozen=True)
class CompilerInput:
    """A fully decoded multi-file compilation unit."""

    language: str
    sources: Dict[str, SourceFile]
    settings: CompilerSettings = dataclasses.field(
        default_factory=CompilerSettings
    )


@dataclasses.dataclass(frozen=True)
class MaterializedContract:
    """Domain model for one record's sources written out to disk."""

    contract_name: str
    root: Path
    files: List[Path]


# --- Ports (Interfaces) ---

class Fetcher(ABC):
    """A port for any source of raw explorer responses."""

    @abstractmethod
    async def fetch(self, address: str) -> bytes:
        """Fetches the raw `getsourcecode` response body for an address."""
        pass


class SourceDecoder(ABC):
    """A port for the two decode stages of an explorer response."""

    @abstractmethod
    def decode_envelope(self, raw: bytes) -> Envelope:
        """
        Decodes a raw response body into an Envelope.
        Raises DecodeError on malformed or mis-shaped JSON.
        """
        pass

    @abstractmethod
    def unwrap(self, payload: str) -> CompilerInput:
        """
        Strips the wrapping characters of a source payload and decodes it.
        Raises MalformedPayloadError or DecodeError.
        """
        pass


class Materializer(ABC):
    """A port for writing decoded sources to a directory tree."""

    @abstractmethod
    async def materialize(
        self, root: Path, sources: Mapping[str, SourceFile]
    ) -> List[Path]:
        """Writes every source file under root and returns the paths written."""
        pass
