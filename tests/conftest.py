"""Common fixtures for notebook-repo tests.

None of the tests need a Prefect server: loggers are injected as mocks
where diagnostics are asserted, and storage runs on tmp_path or memory.
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from notebook_repo.storage import Storage


@pytest.fixture(params=["file", "memory"])
def storage(request: pytest.FixtureRequest, tmp_path: Path) -> Storage:
    """Storage rooted at a "zeppelin" share, on each real backend."""
    if request.param == "file":
        return Storage.from_uri(str(tmp_path)).with_base("zeppelin")
    return Storage.from_uri("memory://zeppelin")


@pytest.fixture
def logger() -> MagicMock:
    return MagicMock()
