"""Unit tests for Catalog decoding and the catalog_* tools."""

import asyncio
import pytest
from unittest.mock import patch, MagicMock


def _make_catalog(name="giantswarm", namespace="default", catalog_type="stable",
                  visibility="public", url="https://giantswarm.github.io/giantswarm-catalog/"):
    return {
        "apiVersion": "application.giantswarm.io/v1alpha1",
        "kind": "Catalog",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "resourceVersion": "7",
            "creationTimestamp": "2025-06-01T12:00:00Z",
            "labels": {
                "application.giantswarm.io/catalog-type": catalog_type,
                "application.giantswarm.io/catalog-visibility": visibility,
            },
        },
        "spec": {
            "title": name.title(),
            "description": f"{name} apps",
            "logoURL": "",
            "storage": {"type": "helm", "URL": url},
            "repositories": [{"type": "helm", "URL": url}],
        },
    }


def _server(non_destructive=False):
    from fastmcp import FastMCP
    from giantswarm_apps_mcp.tools.catalog import register_catalog_tools
    server = FastMCP(name="test")
    register_catalog_tools(server, non_destructive)
    return server


class TestCatalogDecoding:

    @pytest.mark.unit
    def test_from_unstructured(self):
        from giantswarm_apps_mcp.catalog import Catalog

        catalog = Catalog.from_unstructured(_make_catalog())
        assert catalog.catalog_type() == "stable"
        assert catalog.catalog_visibility() == "public"
        assert catalog.spec.storage.url.startswith("https://")
        assert len(catalog.spec.repositories) == 1
        assert catalog.creation_timestamp == "2025-06-01T12:00:00Z"

    @pytest.mark.unit
    def test_missing_labels_are_unknown(self):
        from giantswarm_apps_mcp.catalog import Catalog

        catalog = Catalog.from_unstructured({"metadata": {"name": "bare"}})
        assert catalog.catalog_type() == "unknown"
        assert catalog.catalog_visibility() == "unknown"
        assert catalog.spec.repositories == []

    @pytest.mark.unit
    def test_repository_url_key_is_uppercase(self):
        from giantswarm_apps_mcp.catalog import Catalog

        obj = Catalog.from_unstructured(_make_catalog()).to_unstructured()
        assert "URL" in obj["spec"]["storage"]
        assert "URL" in obj["spec"]["repositories"][0]

    @pytest.mark.unit
    def test_filters(self):
        from giantswarm_apps_mcp.catalog import Catalog, filter_by_type, filter_by_visibility

        catalogs = [
            Catalog.from_unstructured(_make_catalog("a", catalog_type="stable", visibility="public")),
            Catalog.from_unstructured(_make_catalog("b", catalog_type="testing", visibility="private")),
        ]
        assert [c.name for c in filter_by_type(catalogs, "testing")] == ["b"]
        assert [c.name for c in filter_by_visibility(catalogs, "public")] == ["a"]
        assert filter_by_type(catalogs, "") == catalogs

    @pytest.mark.unit
    def test_validate_repository_url(self):
        from giantswarm_apps_mcp.catalog import validate_repository_url

        validate_repository_url("oci://registry.example.com/charts")
        with pytest.raises(ValueError, match="cannot be empty"):
            validate_repository_url("")


class TestCatalogTools:

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.tools.catalog.get_core_v1_client")
    @patch("giantswarm_apps_mcp.tools.catalog.get_custom_objects_client")
    def test_list_filters_by_type(self, mock_get_custom, mock_get_core):
        mock_api = MagicMock()
        mock_get_custom.return_value = mock_api
        mock_api.list_cluster_custom_object.return_value = {"items": [
            _make_catalog("giantswarm"),
            _make_catalog("playground", catalog_type="testing"),
        ]}

        result = asyncio.run(_server().call_tool("catalog_list", {"type": "testing"}))
        import json
        data = json.loads(result.content[0].text)
        assert data["success"] is True
        assert data["count"] == 1
        assert data["items"][0]["name"] == "playground"
        assert data["items"][0]["repositories"][0]["type"] == "helm"

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.tools.catalog.get_core_v1_client")
    @patch("giantswarm_apps_mcp.tools.catalog.get_custom_objects_client")
    def test_list_organization(self, mock_get_custom, mock_get_core):
        mock_api = MagicMock()
        mock_get_custom.return_value = mock_api
        mock_api.list_namespaced_custom_object.return_value = {"items": [_make_catalog(namespace="org-acme")]}

        asyncio.run(_server().call_tool("catalog_list", {"organization": "acme"}))
        assert mock_api.list_namespaced_custom_object.call_args.kwargs["namespace"] == "org-acme"

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.tools.catalog.get_core_v1_client")
    @patch("giantswarm_apps_mcp.tools.catalog.get_custom_objects_client")
    def test_create_with_oci_repository(self, mock_get_custom, mock_get_core):
        mock_api = MagicMock()
        mock_get_custom.return_value = mock_api
        mock_api.create_namespaced_custom_object.side_effect = lambda **kw: kw["body"]

        result = asyncio.run(
            _server().call_tool("catalog_create", {
                "name": "acme-apps",
                "namespace": "org-acme",
                "title": "Acme Apps",
                "description": "Internal apps",
                "storage_url": "https://charts.acme.example/",
                "type": "stable",
                "visibility": "private",
                "oci_url": "oci://registry.acme.example/charts",
            })
        )
        import json
        data = json.loads(result.content[0].text)
        assert data["success"] is True
        body = mock_api.create_namespaced_custom_object.call_args.kwargs["body"]
        assert body["spec"]["storage"] == {"type": "helm", "URL": "https://charts.acme.example/"}
        assert body["spec"]["repositories"][1] == {"type": "oci", "URL": "oci://registry.acme.example/charts"}
        assert body["metadata"]["labels"]["application.giantswarm.io/catalog-visibility"] == "private"

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.tools.catalog.get_core_v1_client")
    @patch("giantswarm_apps_mcp.tools.catalog.get_custom_objects_client")
    def test_create_rejects_empty_url(self, mock_get_custom, mock_get_core):
        result = asyncio.run(
            _server().call_tool("catalog_create", {
                "name": "acme-apps",
                "namespace": "org-acme",
                "title": "Acme Apps",
                "description": "Internal apps",
                "storage_url": "",
            })
        )
        import json
        data = json.loads(result.content[0].text)
        assert data["success"] is False
        assert data["error"].startswith("invalid storage URL")

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.tools.catalog.get_core_v1_client")
    @patch("giantswarm_apps_mcp.tools.catalog.get_custom_objects_client")
    def test_update_storage_url_updates_first_repository(self, mock_get_custom, mock_get_core):
        mock_api = MagicMock()
        mock_get_custom.return_value = mock_api
        mock_api.get_namespaced_custom_object.return_value = _make_catalog()
        mock_api.replace_namespaced_custom_object.side_effect = lambda **kw: kw["body"]

        result = asyncio.run(
            _server().call_tool("catalog_update", {
                "name": "giantswarm",
                "namespace": "default",
                "storage_url": "https://new.example/charts/",
            })
        )
        import json
        data = json.loads(result.content[0].text)
        assert data["success"] is True
        body = mock_api.replace_namespaced_custom_object.call_args.kwargs["body"]
        assert body["metadata"]["resourceVersion"] == "7"
        assert body["spec"]["storage"]["URL"] == "https://new.example/charts/"
        assert body["spec"]["repositories"][0]["URL"] == "https://new.example/charts/"
        assert body["spec"]["title"] == "Giantswarm"


class TestCatalogToolRegistration:

    @pytest.mark.unit
    def test_tools_registered(self):
        tools = asyncio.run(_server().list_tools())
        assert len(tools) == 5

    @pytest.mark.unit
    def test_non_destructive(self):
        tools = asyncio.run(_server(non_destructive=True).list_tools())
        assert sorted(t.name for t in tools) == ["catalog_get", "catalog_list"]
