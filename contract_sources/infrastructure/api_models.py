"""
Pydantic models for validating the structure of explorer responses.

These models serve as a strict contract for the expected JSON data at both
decode stages: the outer `getsourcecode` envelope and the compiler input that
is embedded, doubly encoded, in each record's `SourceCode` field. Any
deviation from this structure is caught at the infrastructure layer before
being passed to the application core.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


class RawRecordDetails(BaseModel):
    """
    Represents the metadata for a single verified contract.

    Only `SourceCode` is required. The remaining fields are informational and
    some explorers omit them, so they default to empty strings.
    """

    source_code: str = Field(alias="SourceCode")
    abi: str = Field(default="", alias="ABI")
    contract_name: str = Field(default="", alias="ContractName")
    compiler_version: str = Field(default="", alias="CompilerVersion")
    optimization_used: str = Field(default="", alias="OptimizationUsed")
    runs: str = Field(default="", alias="Runs")
    constructor_arguments: str = Field(default="", alias="ConstructorArguments")
    evm_version: str = Field(default="", alias="EVMVersion")
    library: str = Field(default="", alias="Library")
    license_type: str = Field(default="", alias="LicenseType")
    proxy: str = Field(default="", alias="Proxy")
    implementation: str = Field(default="", alias="Implementation")
    swarm_source: str = Field(default="", alias="SwarmSource")


class ApiResponse(BaseModel):
    """
    Represents the top-level structure of a `getsourcecode` response.

    On failure the explorer sends `result` as a plain string explaining the
    problem instead of a list of records.
    """

    status: str
    message: str
    result: Union[List[RawRecordDetails], str]


class OptimizerDetails(BaseModel):
    enabled: bool = False
    runs: int = 0


class CompilerSettingsDetails(BaseModel):
    """Represents the `settings` object of a compiler input."""

    optimizer: Optional[OptimizerDetails] = None
    output_selection: Dict[str, Dict[str, List[str]]] = Field(
        default_factory=dict, alias="outputSelection"
    )
    libraries: Any = None


class SourceFileDetails(BaseModel):
    content: str


class CompilerInputDetails(BaseModel):
    """Represents the compiler input document embedded in `SourceCode`."""

    language: str
    sources: Dict[str, SourceFileDetails]
    settings: CompilerSettingsDetails = Field(
        default_factory=CompilerSettingsDetails
    )
