"""
Tests for topic routes

Create, edit, detail and list a topic over HTTP with the custom fields
plugin active.
"""

import pytest

from app.config import settings


@pytest.fixture
def headers(user):
    return {"X-User-Id": str(user.id)}


async def _create(client, headers, **extra):
    payload = {"title": "Espresso machine", "body": "Great deal", **extra}
    response = await client.post("/api/v1/topics", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestTopicRoutes:
    async def test_create_returns_custom_fields(self, client, headers, plugin):
        data = await _create(client, headers, Price="19.99", Store="Acme")
        assert data["Price"] == "19.99"
        assert data["Store"] == "Acme"
        assert data["URL"] is None

    async def test_non_string_value_reads_back_as_string(self, client, headers, plugin):
        created = await _create(client, headers, Price=19.99)
        assert created["Price"] == "19.99"

        fetched = (await client.get(f"/api/v1/topics/{created['id']}")).json()
        assert fetched["Price"] == created["Price"]

    async def test_resubmitting_same_values_adds_no_revision(self, client, headers, plugin):
        created = await _create(client, headers, Price="19.99")

        response = await client.put(f"/api/v1/topics/{created['id']}", json={"Price": "19.99", "URL": ""}, headers=headers)
        assert response.status_code == 200

        revisions = (await client.get(f"/api/v1/topics/{created['id']}/revisions")).json()
        assert revisions == []

    async def test_detail_reads_persisted_fields(self, client, headers, plugin):
        created = await _create(client, headers, URL="https://example.com/deal")
        response = await client.get(f"/api/v1/topics/{created['id']}")
        assert response.status_code == 200
        assert response.json()["URL"] == "https://example.com/deal"

    async def test_edit_with_blank_value_clears_field(self, client, headers, plugin):
        created = await _create(client, headers, Price="19.99")

        response = await client.put(f"/api/v1/topics/{created['id']}", json={"Price": ""}, headers=headers)
        assert response.status_code == 200
        assert response.json()["Price"] is None

        revisions = (await client.get(f"/api/v1/topics/{created['id']}/revisions")).json()
        assert revisions[-1]["modifications"] == {"Price": ["19.99", ""]}

    async def test_list_includes_custom_fields(self, client, headers, plugin):
        await _create(client, headers, Store="Acme")
        await _create(client, headers, Store="Globex", Price="5")

        response = await client.get("/api/v1/topics")
        assert response.status_code == 200
        rows = response.json()["topics"]
        assert [(r["Store"], r["Price"]) for r in rows] == [("Globex", "5"), ("Acme", None)]
        assert "body" not in rows[0]

    async def test_disabled_setting_hides_fields(self, client, headers, plugin, monkeypatch):
        created = await _create(client, headers, Price="1")
        monkeypatch.setattr(settings, "topic_custom_field_enabled", False)

        response = await client.get(f"/api/v1/topics/{created['id']}")
        assert "Price" not in response.json()

    async def test_missing_topic_returns_404(self, client, plugin):
        response = await client.get("/api/v1/topics/999")
        assert response.status_code == 404
        assert response.json()["error"]["details"]["resource_type"] == "Topic"

    async def test_create_requires_user(self, client, plugin):
        response = await client.post("/api/v1/topics", json={"title": "t", "body": "b"})
        assert response.status_code == 401

    async def test_unknown_user_rejected(self, client, plugin):
        response = await client.post("/api/v1/topics", json={"title": "t", "body": "b"}, headers={"X-User-Id": "42"})
        assert response.status_code == 404


class TestPluginRoutes:
    async def test_list_plugins(self, client, headers, plugin):
        response = await client.get("/api/v1/plugins/", headers=headers)
        assert response.status_code == 200
        [info] = response.json()
        assert info["name"] == "custom_fields"
        assert info["enabled"] is True
        assert info["assets"] == ["stylesheets/common.scss"]

    async def test_unknown_plugin_404(self, client, headers, plugin):
        response = await client.get("/api/v1/plugins/nope", headers=headers)
        assert response.status_code == 404

    async def test_disable_then_enable(self, client, headers, plugin, tmp_path):
        from unittest.mock import patch

        from app.plugins import loader as loader_module

        with patch.object(loader_module, "_PLUGINS_CONFIG_FILE", tmp_path / "cfg.json"):
            response = await client.post("/api/v1/plugins/custom_fields/disable", headers=headers)
            assert response.json()["enabled"] is False
            assert plugin.enabled is False

            response = await client.post("/api/v1/plugins/custom_fields/enable", headers=headers)
            assert response.json()["enabled"] is True
