"""Test configuration and fixtures for the BRD fixer.

Provides shared board fixtures, a small board builder and configuration
isolation. All test files should use the fixtures defined here for
consistency.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Tuple

import pytest

from brd_fixer.config import ConfigManager

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@pytest.fixture(scope="session")
def boards_dir():
    """Provides path to the board fixtures directory."""
    return Path(__file__).parent / "fixtures" / "boards"


@pytest.fixture
def pinhead_board(boards_dir):
    """Board with two ``pinhead-2`` libraries (one with a URN) and one ``rcl``."""
    return (boards_dir / "pinhead_duplicates.brd").read_text(encoding="utf-8")


@pytest.fixture
def unique_board(boards_dir):
    """Board whose library names are all distinct."""
    return (boards_dir / "unique_libraries.brd").read_text(encoding="utf-8")


def make_library(name: str, packages: Iterable[Tuple[str, str]], urn: Optional[str] = None) -> str:
    """Render a ``<library>`` with ``(package_name, description)`` packages."""
    urn_attr = f' urn="{urn}"' if urn else ""
    body = "".join(
        f'<package name="{pkg}"><description>{desc}</description></package>'
        for pkg, desc in packages
    )
    return f'<library name="{name}"{urn_attr}><packages>{body}</packages></library>'


def make_board(*libraries: str, elements: str = "") -> str:
    """Wrap library snippets and element snippets into a minimal board."""
    return (
        "<eagle><drawing><board>"
        f"<libraries>{''.join(libraries)}</libraries>"
        f"<elements>{elements}</elements>"
        "</board></drawing></eagle>"
    )


@pytest.fixture
def board_builder():
    """Provides the ``make_board`` / ``make_library`` helpers."""
    class BoardBuilder:
        library = staticmethod(make_library)
        board = staticmethod(make_board)

    return BoardBuilder


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point user overrides at an empty temp dir and reset the config singleton."""
    config_dir = tmp_path / "user_config"
    config_dir.mkdir()
    monkeypatch.setenv("BRD_FIXER_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("BRD_FIXER_LOG_DIR", str(tmp_path / "logs"))
    ConfigManager.reset()
    yield config_dir
    ConfigManager.reset()
