from __future__ import annotations

import atexit
import threading
from typing import Dict, Literal

from .backends.csv_backend import CsvDataAccess
from .interface import DataAccess
from .loader import SingleFlightLoader
from shibr.config import get_config

_loaders: Dict[str, SingleFlightLoader[DataAccess]] = {}
_loaders_lock = threading.Lock()


def _csv_factory() -> DataAccess:
    # Reads from configured CSV folder
    config = get_config()
    return CsvDataAccess(data_dir=config.data_dir)


def get_data_access(kind: Literal["csv"] = "csv") -> DataAccess:
    """Return the process-wide data access backend, loading it on first use."""
    if kind != "csv":
        raise ValueError(f"Unknown data access kind: {kind}")

    with _loaders_lock:
        loader = _loaders.get(kind)
        if loader is None:
            loader = SingleFlightLoader(
                _csv_factory,
                timeout=get_config().data_load_timeout_seconds,
                name=f"{kind} data access",
            )
            _loaders[kind] = loader
    return loader.get()


@atexit.register
def close_data_access() -> None:
    """Tear down every loaded backend."""
    with _loaders_lock:
        loaders = list(_loaders.values())
        _loaders.clear()
    for loader in loaders:
        loader.close()
