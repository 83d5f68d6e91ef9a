import matplotlib
import pytest

matplotlib.use("Agg")  # use non-interactive backend for testing

from tmmoptics.materials import open_store  # noqa: E402
from tmmoptics.materials.store import ENV_VAR, reset_default_store  # noqa: E402

from .utils import write_store  # noqa: E402


@pytest.fixture
def ridb_path(tmp_path):
    return write_store(tmp_path / "RefractiveIndicesDB.h5")


@pytest.fixture
def store(ridb_path):
    return open_store(ridb_path)


@pytest.fixture
def env_store(ridb_path, monkeypatch):
    """Point the process-wide store at the test database."""
    monkeypatch.setenv(ENV_VAR, str(ridb_path))
    reset_default_store()
    yield ridb_path
    reset_default_store()
