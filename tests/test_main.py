import logging
from types import SimpleNamespace

import pytest
from dependency_injector import providers

from contract_sources import __main__ as entry_point
from contract_sources.application.exceptions import RemoteError
from contract_sources.infrastructure.containers import Container

from conftest import SEEDER_ADDRESS


class StubService:
    def __init__(self, error=None):
        self.error = error
        self.only = None

    async def run(self, only=None):
        self.only = only
        if self.error is not None:
            raise self.error
        return []


@pytest.fixture
def install_service(monkeypatch):
    def install(service):
        def make_container():
            container = Container()
            container.config.override(
                providers.Object(SimpleNamespace(logging=SimpleNamespace(level="INFO")))
            )
            container.contract_source_service.override(providers.Object(service))
            return container

        monkeypatch.setattr(entry_point, "Container", make_container)
        return service

    return install


def test_main_exits_zero_on_success(install_service):
    service = install_service(StubService())

    entry_point.main(["--only", SEEDER_ADDRESS])

    assert service.only == [SEEDER_ADDRESS]


def test_main_reports_error_and_exits_non_zero(install_service, caplog):
    install_service(StubService(RemoteError("0", "NOTOK", "Invalid API Key")))

    with caplog.at_level(logging.ERROR):
        with pytest.raises(SystemExit) as exc_info:
            entry_point.main([])

    assert exc_info.value.code == 1
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert "RemoteError" in errors[0].getMessage()
    assert "Invalid API Key" in errors[0].getMessage()


def test_parser_defaults_defer_to_settings():
    args = entry_point.build_parser().parse_args([])

    assert args.root_dir is None
    assert args.concurrency is None
    assert args.only is None
