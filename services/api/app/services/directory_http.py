from __future__ import annotations

import json
import os
import urllib.error
import urllib.request
from urllib.parse import urlencode

import structlog
from services.api.app.services.directory_base import (
    Cliente,
    ClienteDraft,
    DirectoryError,
    DirectoryResponseError,
    DirectoryUnavailableError,
)

logger = structlog.get_logger(__name__)


class ClientDirectoryHttp:
    """Client directory backed by the shop's REST API.

    Responses use the `{success, data, message}` envelope. Failures are surfaced as
    DirectoryError and never retried here.
    """

    source = "DIRECTORY_HTTP"

    def __init__(self, *, base_url: str, timeout_seconds: float = 10.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds

    @classmethod
    def from_env(cls) -> ClientDirectoryHttp:
        base_url = os.getenv("BURBUJA_DIRECTORY_URL", "").strip()
        if not base_url:
            raise ValueError(
                "BURBUJA_DIRECTORY_URL is required when BURBUJA_DIRECTORY_ADAPTER=http"
            )

        raw_timeout = os.getenv("BURBUJA_DIRECTORY_TIMEOUT", "10").strip()
        try:
            timeout = float(raw_timeout)
        except ValueError as e:
            raise ValueError(f"Invalid BURBUJA_DIRECTORY_TIMEOUT={raw_timeout!r}") from e

        return cls(base_url=base_url, timeout_seconds=timeout)

    def search(self, text: str) -> list[Cliente]:
        query = text.strip()
        if not query:
            return []

        data = self._request("GET", f"/clientes?{urlencode({'search': query})}")
        if not isinstance(data, list):
            raise DirectoryResponseError(
                None, f"Expected a list of clients, got {type(data).__name__}"
            )
        return [_cliente_from_json(row) for row in data]

    def create(self, draft: ClienteDraft) -> Cliente:
        body = {
            "nombre": draft.nombre,
            "apellido": draft.apellido,
            "telefono": draft.telefono,
            "direccion": draft.direccion,
            "email": draft.email or "",
        }
        data = self._request("POST", "/clientes", body)
        if not isinstance(data, dict):
            raise DirectoryResponseError(None, "Expected the created client object")
        return _cliente_from_json(data)

    def _request(self, method: str, path: str, body: dict | None = None) -> object:
        url = f"{self._base_url}{path}"
        req = urllib.request.Request(url, method=method)
        req.add_header("Accept", "application/json")

        data: bytes | None = None
        if body is not None:
            req.add_header("Content-Type", "application/json")
            data = json.dumps(body).encode("utf-8")

        try:
            with urllib.request.urlopen(req, data=data, timeout=self._timeout) as resp:
                payload = json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as e:
            raw = e.read().decode("utf-8", errors="replace")
            logger.warning("directory_request_failed", method=method, url=url, status=e.code)
            raise DirectoryResponseError(e.code, raw) from e
        except urllib.error.URLError as e:
            logger.warning("directory_request_failed", method=method, url=url, error=str(e.reason))
            raise DirectoryUnavailableError(self._base_url, str(e.reason)) from e
        except (TimeoutError, json.JSONDecodeError) as e:
            logger.warning("directory_request_failed", method=method, url=url, error=str(e))
            raise DirectoryError(f"Client directory request failed: {e}") from e

        if isinstance(payload, dict) and "success" in payload:
            if not payload.get("success"):
                raise DirectoryResponseError(None, str(payload.get("message") or "request failed"))
            return payload.get("data")
        return payload


def _cliente_from_json(row: object) -> Cliente:
    if not isinstance(row, dict):
        raise DirectoryResponseError(None, f"Unexpected client shape: {row!r}")

    try:
        return Cliente(
            id=str(row["id"]),
            nombre=str(row["nombre"]),
            apellido=str(row.get("apellido") or ""),
            telefono=str(row.get("telefono") or ""),
            direccion=str(row.get("direccion") or ""),
            email=row.get("email") or None,
        )
    except KeyError as e:
        raise DirectoryResponseError(None, f"Client record missing field {e}") from e
