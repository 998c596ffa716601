from __future__ import annotations

import os

from services.api.app.services.directory_base import ClientDirectory
from services.api.app.services.directory_mock import ClientDirectoryMock

_MOCK_DIRECTORY: ClientDirectoryMock | None = None


def get_client_directory() -> ClientDirectory:
    """Select a directory adapter based on env vars.

    Defaults to the in-memory mock so tests and local dev are deterministic unless explicitly
    configured otherwise.
    """

    global _MOCK_DIRECTORY

    mode = os.getenv("BURBUJA_DIRECTORY_ADAPTER", "mock").strip().lower()

    if mode == "mock":
        if _MOCK_DIRECTORY is None:
            _MOCK_DIRECTORY = ClientDirectoryMock()
        return _MOCK_DIRECTORY

    if mode == "http":
        from services.api.app.services.directory_http import ClientDirectoryHttp

        return ClientDirectoryHttp.from_env()

    raise ValueError(f"Unknown BURBUJA_DIRECTORY_ADAPTER={mode!r}. Expected mock or http.")
