from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.repo_builder import GitRepoBuilder


@pytest.fixture
def git_repo(tmp_path: Path) -> GitRepoBuilder:
    """Provide an empty git repository rooted under the pytest tmp_path."""
    if shutil.which("git") is None:
        pytest.skip("git executable not available")
    return GitRepoBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Drop handlers installed by CLI runs so later tests do not write to closed streams."""
    yield
    logger = logging.getLogger("hugo_preproc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
