"""
The core application service and pipeline, containing pure business logic.

This module defines the main orchestrator (ContractSourceService) that walks
the configured address table, and the pipeline (ContractSourcePipeline) that
fetches, decodes and writes out the verified sources of a single address.
"""

import asyncio
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from tqdm.contrib.logging import logging_redirect_tqdm
from tqdm.asyncio import tqdm_asyncio

from .domain import (
    ContractTarget,
    Fetcher,
    MaterializedContract,
    Materializer,
    SourceDecoder,
)
from .exceptions import ConfigurationError, RemoteError
from .paths import resolve_destination

logger = logging.getLogger(__name__)


class ContractSourcePipeline:
    """Encapsulates the full processing pipeline for a single address."""

    def __init__(
        self,
        fetcher: Fetcher,
        decoder: SourceDecoder,
        materializer: Materializer,
    ):
        """Initializes the pipeline with necessary dependencies (ports)."""
        self.logger = logging.getLogger(self.__class__.__name__)
        self.fetcher = fetcher
        self.decoder = decoder
        self.materializer = materializer

    async def run(
        self, target: ContractTarget, root_dir: Path
    ) -> List[MaterializedContract]:
        """Executes the sequential steps for processing one address.

        The first failure of any step aborts the address. Nothing is written
        when the explorer reports a non-success status.

        Args:
            target: The address and its output directory name.
            root_dir: The directory holding every per-address directory.

        Returns:
            One entry per record in the explorer response.
        """

        destination = resolve_destination(root_dir, target.directory)

        self.logger.info(f"Starting pipeline for {target.address}...")

        # Step 1: Fetch (address -> raw bytes)
        raw = await self.fetcher.fetch(target.address)

        # Step 2: Decode envelope (raw bytes -> Envelope)
        envelope = self.decoder.decode_envelope(raw)
        if not envelope.is_success:
            raise RemoteError(envelope.status, envelope.message, envelope.detail)

        results = []
        for record in envelope.records:
            # Step 3: Unwrap (SourceCode -> CompilerInput)
            compiler_input = self.decoder.unwrap(record.source_code)

            if record.is_proxy:
                self.logger.info(
                    f"{record.contract_name or target.address} is a proxy "
                    f"for {record.implementation}"
                )

            # Step 4: Materialize (CompilerInput -> files on disk)
            files = await self.materializer.materialize(
                destination, compiler_input.sources
            )
            results.append(
                MaterializedContract(
                    contract_name=record.contract_name,
                    root=destination,
                    files=files,
                )
            )

        self.logger.info(
            f"Successfully wrote {sum(len(r.files) for r in results)} files "
            f"for {target.address} into {destination}"
        )

        return results


class ContractSourceService:
    """Orchestrates the retrieval of every configured contract."""

    def __init__(
        self,
        pipeline: ContractSourcePipeline,
        targets: Sequence[ContractTarget],
        root_dir: str,
        concurrent_fetches: int = 1,
    ):
        """
        Initializes the service with the pipeline and the address table.

        Raises:
            ConfigurationError: If concurrent_fetches is below 1.
        """
        if int(concurrent_fetches) < 1:
            raise ConfigurationError(
                f"concurrent_fetches must be at least 1, got {concurrent_fetches}"
            )

        self.pipeline = pipeline
        self.targets = tuple(targets)
        self.root_dir = Path(root_dir)
        self.concurrent_fetches = int(concurrent_fetches)

    def _select(self, only: Optional[Iterable[str]]) -> List[ContractTarget]:
        """Filters the address table down to the requested addresses."""
        if not only:
            return list(self.targets)

        wanted = {address.lower() for address in only}
        selected = [t for t in self.targets if t.address.lower() in wanted]

        unknown = wanted - {t.address.lower() for t in selected}
        if unknown:
            raise ConfigurationError(
                f"Addresses not present in the contracts table: {sorted(unknown)}"
            )
        return selected

    async def _run_pipeline_with_semaphore(
        self,
        target: ContractTarget,
        semaphore: asyncio.Semaphore,
        halted: asyncio.Event,
    ) -> List[MaterializedContract]:
        """Runs one pipeline unless another address has already failed."""
        async with semaphore:
            if halted.is_set():
                return []
            try:
                return await self.pipeline.run(target, self.root_dir)
            except Exception:
                halted.set()
                raise

    async def run(
        self, only: Optional[Iterable[str]] = None
    ) -> List[MaterializedContract]:
        """
        Executes the retrieval for all requested addresses.

        The run is all-or-nothing: the first failing address halts the run,
        no further address is started, and the error propagates.
        """

        targets = self._select(only)

        logger.info(
            f"Starting retrieval of {len(targets)} contracts into {self.root_dir}"
        )

        if not targets:
            logger.info("No contracts configured.")
            return []

        semaphore = asyncio.Semaphore(self.concurrent_fetches)
        halted = asyncio.Event()
        tasks = [
            asyncio.create_task(
                self._run_pipeline_with_semaphore(target, semaphore, halted)
            )
            for target in targets
        ]

        logger.info(
            f"Starting {len(tasks)} pipelines with a concurrency "
            f"limit of {self.concurrent_fetches}..."
        )

        try:
            with logging_redirect_tqdm():
                results = await tqdm_asyncio.gather(
                    *tasks, desc="Contracts", unit="contract"
                )
        except Exception:
            # Queued pipelines see the halt flag and return at once. Pipelines
            # already writing run to completion so nothing is written after
            # the error propagates.
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        materialized = [item for result in results for item in result]
        logger.info(
            f"All {len(targets)} contracts retrieved "
            f"({len(materialized)} compilation units)."
        )

        return materialized
