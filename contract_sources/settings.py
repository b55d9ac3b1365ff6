"""
Builds the Dynaconf settings object for the contract_sources component and
turns its `[[contracts]]` table into an immutable list of targets.
This module is the single source of truth for all configuration.
"""

from pathlib import Path
from typing import Any, Iterable, Mapping, Tuple

from dynaconf import Dynaconf

from .application.domain import ContractTarget
from .application.exceptions import ConfigurationError

PROJECT_ROOT = Path(__file__).parent.parent

SETTINGS_FILES = ["config/settings.toml", "config/.secrets.toml"]

ENVVAR_PREFIX = "CONTRACT_SOURCES"


def load_settings() -> Dynaconf:
    """Loads settings from the project's config directory and the environment."""
    return Dynaconf(
        root_path=PROJECT_ROOT,
        settings_files=SETTINGS_FILES,
        envvar_prefix=ENVVAR_PREFIX,
        merge_enabled=True,
        load_dotenv=False,
        environments=False,
    )


def build_targets(entries: Iterable[Mapping[str, Any]]) -> Tuple[ContractTarget, ...]:
    """
    Converts the `[[contracts]]` configuration table into targets.

    Raises:
        ConfigurationError: If an entry lacks a field, or if an address or
                            a directory appears more than once.
    """

    targets = []
    seen_addresses = set()
    seen_directories = set()

    for index, entry in enumerate(entries or ()):
        address = str(entry.get("address") or "").strip()
        directory = str(entry.get("directory") or "").strip()
        if not address or not directory:
            raise ConfigurationError(
                f"contracts[{index}] needs both 'address' and 'directory'"
            )
        if address.lower() in seen_addresses:
            raise ConfigurationError(f"Duplicate contract address {address}")
        if directory in seen_directories:
            raise ConfigurationError(
                f"Directory {directory!r} is used by more than one contract"
            )

        seen_addresses.add(address.lower())
        seen_directories.add(directory)
        targets.append(ContractTarget(address=address, directory=directory))

    return tuple(targets)
