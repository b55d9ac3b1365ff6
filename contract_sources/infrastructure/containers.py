"""
Dependency Injection container for the contract_sources component.

This container uses the `dependency-injector` library to wire together all
the components of the application, such as services and infrastructure adapters,
based on the application's configuration.
"""

from dependency_injector import containers, providers
import httpx

from ..application.domain import Fetcher, Materializer, SourceDecoder
from ..application.service import ContractSourcePipeline, ContractSourceService
from ..settings import build_targets, load_settings

from .api_client import HttpSourceFetcher
from .decoding import JsonSourceDecoder
from .filesystem import FileSystemMaterializer


def _first_set(override, default):
    """Prefers a command-line value over the configured default."""
    return default if override is None else override


class Container(containers.DeclarativeContainer):
    """DI container for wiring the application components."""

    cli_args = providers.Configuration()

    config = providers.Singleton(load_settings)

    http_client = providers.Singleton(httpx.AsyncClient)

    fetcher: providers.Factory[Fetcher] = providers.Factory(
        HttpSourceFetcher,
        client=http_client,
        api_key_env=config.provided.fetcher.api_key_env,
        base_url=config.provided.fetcher.api_base_url,
        timeout=config.provided.fetcher.timeout,
        chain_id=config.provided.fetcher.chain_id,
    )

    decoder: providers.Factory[SourceDecoder] = providers.Factory(
        JsonSourceDecoder,
    )

    materializer: providers.Factory[Materializer] = providers.Factory(
        FileSystemMaterializer,
    )

    pipeline = providers.Factory(
        ContractSourcePipeline,
        fetcher=fetcher,
        decoder=decoder,
        materializer=materializer,
    )

    targets = providers.Singleton(
        build_targets,
        config.provided.contracts,
    )

    contract_source_service = providers.Factory(
        ContractSourceService,
        pipeline=pipeline,
        targets=targets,
        root_dir=providers.Callable(
            _first_set, cli_args.root_dir, config.provided.paths.root_dir
        ),
        concurrent_fetches=providers.Callable(
            _first_set,
            cli_args.concurrency,
            config.provided.fetcher.concurrent_fetches,
        ),
    )
