import pytest
import storage


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point all storage paths at a throwaway directory."""
    monkeypatch.setattr(storage, "DATA_DIR", tmp_path)
    return tmp_path
