"""JSON implementation of the SourceDecoder port."""

import json
import logging

from pydantic import ValidationError

from ..application.domain import (
    CompilerInput,
    CompilerSettings,
    Envelope,
    Optimizer,
    RawRecord,
    SourceDecoder,
    SourceFile,
)
from ..application.exceptions import DecodeError, MalformedPayloadError

from .api_models import ApiResponse, CompilerInputDetails, RawRecordDetails


class JsonSourceDecoder(SourceDecoder):
    """
    Decodes explorer responses in two explicit stages.

    The first stage turns the HTTP body into an Envelope. The second stage
    turns one record's `SourceCode` string, which the explorer wraps in an
    extra pair of braces around a JSON compiler input, into a CompilerInput.
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def _map_record(self, dto: RawRecordDetails) -> RawRecord:
        """Maps a single API DTO to a domain model."""
        return RawRecord(
            source_code=dto.source_code,
            abi=dto.abi,
            contract_name=dto.contract_name,
            compiler_version=dto.compiler_version,
            optimization_used=dto.optimization_used,
            runs=dto.runs,
            constructor_arguments=dto.constructor_arguments,
            evm_version=dto.evm_version,
            library=dto.library,
            license_type=dto.license_type,
            proxy=dto.proxy,
            implementation=dto.implementation,
            swarm_source=dto.swarm_source,
        )

    def _map_compiler_input(self, dto: CompilerInputDetails) -> CompilerInput:
        optimizer = None
        if dto.settings.optimizer is not None:
            optimizer = Optimizer(
                enabled=dto.settings.optimizer.enabled,
                runs=dto.settings.optimizer.runs,
            )

        return CompilerInput(
            language=dto.language,
            sources={
                path: SourceFile(content=details.content)
                for path, details in dto.sources.items()
            },
            settings=CompilerSettings(
                optimizer=optimizer,
                output_selection=dto.settings.output_selection,
                libraries=dto.settings.libraries,
            ),
        )

    def decode_envelope(self, raw: bytes) -> Envelope:
        """
        Decodes a raw `getsourcecode` response body.

        Business-level success is not checked here; an error envelope decodes
        fine and the caller inspects `Envelope.is_success`.

        Args:
            raw: The HTTP response body.

        Returns:
            The envelope with its records in the order the explorer sent them.

        Raises:
            DecodeError: If the body is not JSON or lacks a valid
                         `status`/`message`/`result`.
        """

        try:
            json_data = json.loads(raw)
        except (ValueError, TypeError, RecursionError) as e:
            raise DecodeError(f"Response body is not valid JSON: {e}") from e

        try:
            response = ApiResponse.model_validate(json_data)
        except ValidationError as e:
            raise DecodeError(f"Unexpected response shape: {e}") from e

        if isinstance(response.result, str):
            return Envelope(
                status=response.status,
                message=response.message,
                records=[],
                detail=response.result,
            )

        return Envelope(
            status=response.status,
            message=response.message,
            records=[self._map_record(dto) for dto in response.result],
        )

    def unwrap(self, payload: str) -> CompilerInput:
        """
        Recovers the compiler input embedded in a record's source payload.

        Exactly one leading and one trailing character are removed before
        the remainder is decoded. Plain single-file sources are not JSON and
        therefore fail with DecodeError.

        Raises:
            MalformedPayloadError: If the payload has fewer than 2 characters.
            DecodeError: If the stripped payload is not a valid compiler input.
        """

        if len(payload) < 2:
            raise MalformedPayloadError(
                f"Source payload of length {len(payload)} cannot be unwrapped"
            )

        inner = payload[1:-1]

        try:
            json_data = json.loads(inner)
        except (ValueError, RecursionError) as e:
            raise DecodeError(
                f"Source payload is not a JSON compiler input: {e}"
            ) from e

        try:
            details = CompilerInputDetails.model_validate(json_data)
        except ValidationError as e:
            raise DecodeError(f"Unexpected compiler input shape: {e}") from e

        self.logger.debug(
            f"Decoded {details.language} compiler input "
            f"with {len(details.sources)} sources"
        )

        return self._map_compiler_input(details)
