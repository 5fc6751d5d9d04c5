"""Client-scoped key-value persistence for webhook configuration."""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
from pathlib import Path
import re
from threading import Lock
from typing import Optional, Protocol

from pydantic import BaseModel, Field

from app.notifiers.webhook import validate_webhook_url

logger = logging.getLogger("weatherauto.storage")

WEBHOOK_URL_KEY = "webhook_url"
WEBHOOK_LAST_SENT_KEY = "webhook_last_sent"


class KeyValueStore(Protocol):
    """String key-value storage owned by one client."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def clear(self) -> None:
        ...


class InMemoryKeyValueStore:
    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()


class JsonFileKeyValueStore:
    """Persist string values in a single JSON document on disk."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._lock = Lock()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt key-value file %s", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        tmp_path.write_text(json.dumps(data), encoding="utf-8")
        tmp_path.replace(self.path)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if data.pop(key, None) is not None:
                self._write(data)

    def clear(self) -> None:
        with self._lock:
            if self.path.exists():
                self.path.unlink()


_SAFE_CLIENT_ID = re.compile(r"[^A-Za-z0-9_.-]")


def client_store(state_dir: Path | str, client_id: str) -> JsonFileKeyValueStore:
    """Return the file-backed store for one client under ``state_dir``."""

    safe_id = _SAFE_CLIENT_ID.sub("_", client_id) or "anonymous"
    return JsonFileKeyValueStore(Path(state_dir) / f"{safe_id}.json")


class WebhookConfig(BaseModel):
    """Webhook configuration as seen by the owning client."""

    url: Optional[str] = Field(default=None, description="Configured webhook URL")
    last_sent_at: Optional[str] = Field(
        default=None, description="ISO-8601 time of the last successful send"
    )

    @property
    def is_configured(self) -> bool:
        return bool(self.url)


class WebhookConfigStore:
    """Save, load, and reset a client's webhook configuration."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load(self) -> WebhookConfig:
        return WebhookConfig(
            url=self.store.get(WEBHOOK_URL_KEY),
            last_sent_at=self.store.get(WEBHOOK_LAST_SENT_KEY),
        )

    def save_url(self, url: str) -> WebhookConfig:
        """Store ``url`` after checking it is an http(s) URL."""

        cleaned = (url or "").strip()
        if not validate_webhook_url(cleaned):
            raise ValueError("Please enter a valid webhook URL")
        self.store.set(WEBHOOK_URL_KEY, cleaned)
        return self.load()

    def record_sent(self, when: datetime | None = None) -> str:
        stamp = (when or datetime.now(timezone.utc)).isoformat()
        self.store.set(WEBHOOK_LAST_SENT_KEY, stamp)
        return stamp

    def reset(self) -> None:
        self.store.delete(WEBHOOK_URL_KEY)
        self.store.delete(WEBHOOK_LAST_SENT_KEY)


__all__ = [
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "WebhookConfig",
    "WebhookConfigStore",
    "client_store",
]
