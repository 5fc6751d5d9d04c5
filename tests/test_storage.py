import pytest

from app.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    WebhookConfigStore,
    client_store,
)


def test_save_and_load_webhook_url():
    store = WebhookConfigStore(InMemoryKeyValueStore())

    config = store.save_url("  https://n8n.example.com/webhook/abc  ")

    assert config.url == "https://n8n.example.com/webhook/abc"
    assert config.is_configured
    assert store.load().last_sent_at is None


def test_invalid_url_is_not_saved():
    store = WebhookConfigStore(InMemoryKeyValueStore())

    with pytest.raises(ValueError):
        store.save_url("ftp://example.com")

    assert not store.load().is_configured


def test_reset_clears_url_and_last_sent():
    backing = InMemoryKeyValueStore()
    store = WebhookConfigStore(backing)
    store.save_url("https://example.com/hook")
    store.record_sent()

    store.reset()

    assert store.load().url is None
    assert store.load().last_sent_at is None


def test_file_store_survives_new_instances(tmp_path):
    path = tmp_path / "client.json"
    WebhookConfigStore(JsonFileKeyValueStore(path)).save_url("https://example.com/hook")

    reloaded = WebhookConfigStore(JsonFileKeyValueStore(path)).load()

    assert reloaded.url == "https://example.com/hook"


def test_file_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "client.json"
    path.write_text("{not json")

    assert JsonFileKeyValueStore(path).get("webhook_url") is None


def test_file_store_replaces_file_without_leaving_temp(tmp_path, monkeypatch):
    path = tmp_path / "client.json"
    store = JsonFileKeyValueStore(path)
    store.set("webhook_url", "https://one.example.com")

    def failing_write(self, *args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(type(path), "write_text", failing_write)
    with pytest.raises(OSError):
        store.set("webhook_url", "https://two.example.com")
    monkeypatch.undo()

    assert store.get("webhook_url") == "https://one.example.com"
    assert [p.name for p in tmp_path.iterdir()] == ["client.json"]


def test_client_stores_are_isolated(tmp_path):
    first = WebhookConfigStore(client_store(tmp_path, "1"))
    second = WebhookConfigStore(client_store(tmp_path, "../2"))
    first.save_url("https://one.example.com")

    assert second.load().url is None
    assert client_store(tmp_path, "../2").path.parent == tmp_path
