"""Unit tests for App decoding, filtering and the app_* tools."""

import asyncio
import pytest
from unittest.mock import patch, MagicMock


def _make_app(name="hello-world", namespace="org-acme", catalog="giantswarm",
              version="1.2.3", status="deployed", **extra):
    obj = {
        "apiVersion": "application.giantswarm.io/v1alpha1",
        "kind": "App",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "resourceVersion": "42",
            "creationTimestamp": "2026-01-01T00:00:00Z",
            "labels": {"app.kubernetes.io/name": name},
        },
        "spec": {
            "catalog": catalog,
            "name": name,
            "namespace": name,
            "version": version,
            "kubeConfig": {"inCluster": True},
        },
        "status": {
            "appVersion": "0.9.0",
            "version": version,
            "release": {"status": status, "lastDeployed": "2026-01-02T00:00:00Z"},
        },
    }
    obj["spec"].update(extra)
    return obj


def _make_namespace(name, labels=None):
    ns = MagicMock()
    ns.metadata.name = name
    ns.metadata.labels = labels or {}
    return ns


def _server(non_destructive=False):
    from fastmcp import FastMCP
    from giantswarm_apps_mcp.tools.app import register_app_tools
    server = FastMCP(name="test")
    register_app_tools(server, non_destructive)
    return server


class TestAppDecoding:

    @pytest.mark.unit
    def test_from_unstructured(self):
        from giantswarm_apps_mcp.app import App

        app = App.from_unstructured(_make_app(
            config={"configMap": {"name": "hello-values", "namespace": "org-acme"}},
        ))
        assert app.name == "hello-world"
        assert app.spec.catalog == "giantswarm"
        assert app.spec.in_cluster is True
        assert app.spec.config.config_map.name == "hello-values"
        assert app.spec.user_config is None
        assert app.status.release_status == "deployed"
        assert app.status.last_deployed == "2026-01-02T00:00:00Z"
        assert app.creation_timestamp == "2026-01-01T00:00:00Z"

    @pytest.mark.unit
    def test_missing_spec_and_status_decode_empty(self):
        from giantswarm_apps_mcp.app import App

        app = App.from_unstructured({"metadata": {"name": "bare", "namespace": "default"}})
        assert app.name == "bare"
        assert app.spec.version == ""
        assert app.spec.in_cluster is False
        assert app.status.release_status == ""
        assert app.summary()["status"] == "unknown"

    @pytest.mark.unit
    def test_non_mapping_is_rejected(self):
        from giantswarm_apps_mcp.app import App

        with pytest.raises(ValueError):
            App.from_unstructured(["not", "an", "object"])

    @pytest.mark.unit
    def test_to_unstructured_keeps_config_refs(self):
        from giantswarm_apps_mcp.app import App, AppSpec, ConfigRef, ObjectRef

        app = App(
            name="x",
            namespace="org-acme",
            spec=AppSpec(catalog="c", name="x", namespace="x", version="1.0.0", in_cluster=True),
        )
        app.spec.user_config = ConfigRef(secret=ObjectRef("x-secret", "org-acme"))
        obj = app.to_unstructured()
        assert obj["kind"] == "App"
        assert obj["spec"]["kubeConfig"] == {"inCluster": True}
        assert obj["spec"]["userConfig"] == {"secret": {"name": "x-secret", "namespace": "org-acme"}}
        assert "config" not in obj["spec"]
        assert "labels" not in obj["metadata"]


class TestAppFilters:

    @pytest.mark.unit
    def test_filter_by_status_and_catalog(self):
        from giantswarm_apps_mcp.app import App, filter_by_catalog, filter_by_status

        apps = [
            App.from_unstructured(_make_app("a", status="deployed")),
            App.from_unstructured(_make_app("b", status="failed", catalog="playground")),
        ]
        assert [a.name for a in filter_by_status(apps, "failed")] == ["b"]
        assert filter_by_status(apps, "") == apps
        assert [a.name for a in filter_by_catalog(apps, "giantswarm")] == ["a"]


class TestAppClient:

    @pytest.mark.unit
    def test_update_copies_resource_version(self):
        from giantswarm_apps_mcp.app import AppClient

        custom_api = MagicMock()
        custom_api.get_namespaced_custom_object.return_value = _make_app()
        custom_api.replace_namespaced_custom_object.return_value = _make_app(version="2.0.0")

        client = AppClient(custom_api)
        updated = client.update_version("org-acme", "hello-world", "2.0.0")

        body = custom_api.replace_namespaced_custom_object.call_args.kwargs["body"]
        assert body["metadata"]["resourceVersion"] == "42"
        assert body["spec"]["version"] == "2.0.0"
        assert updated.spec.version == "2.0.0"

    @pytest.mark.unit
    def test_api_errors_are_wrapped(self):
        from kubernetes.client.exceptions import ApiException
        from giantswarm_apps_mcp.app import AppClient
        from giantswarm_apps_mcp.errors import GiantSwarmAPIError, is_not_found

        custom_api = MagicMock()
        custom_api.get_namespaced_custom_object.side_effect = ApiException(status=404, reason="Not Found")

        with pytest.raises(GiantSwarmAPIError) as exc_info:
            AppClient(custom_api).get("org-acme", "missing")
        assert exc_info.value.status == 404
        assert is_not_found(exc_info.value)
        assert "org-acme/missing" in str(exc_info.value)

    @pytest.mark.unit
    def test_list_by_organization_skips_unreadable_namespaces(self):
        from giantswarm_apps_mcp.app import AppClient

        core_api = MagicMock()
        core_api.list_namespace.return_value = MagicMock(items=[
            _make_namespace("org-acme"),
            _make_namespace("workload-dev", {"giantswarm.io/owner": "acme"}),
            _make_namespace("org-other"),
        ])
        custom_api = MagicMock()

        def _list(group, version, namespace, plural, **kwargs):
            if namespace == "workload-dev":
                raise Exception("forbidden")
            return {"items": [_make_app(namespace=namespace)]}

        custom_api.list_namespaced_custom_object.side_effect = _list

        apps = AppClient(custom_api, core_api).list_by_organization("acme")
        assert [a.namespace for a in apps] == ["org-acme"]


class TestAppTools:

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.tools.app.get_core_v1_client")
    @patch("giantswarm_apps_mcp.tools.app.get_custom_objects_client")
    def test_list_by_organization(self, mock_get_custom, mock_get_core):
        mock_api = MagicMock()
        mock_get_custom.return_value = mock_api
        mock_api.list_namespaced_custom_object.return_value = {
            "items": [_make_app("a"), _make_app("b", status="failed")]
        }

        result = asyncio.run(
            _server().call_tool("app_list", {"organization": "acme", "status": "failed"})
        )
        import json
        data = json.loads(result.content[0].text)
        assert data["success"] is True
        assert data["namespace"] == "organization acme"
        assert data["count"] == 1
        assert data["items"][0]["name"] == "b"
        assert mock_api.list_namespaced_custom_object.call_args.kwargs["namespace"] == "org-acme"

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.tools.app.get_core_v1_client")
    @patch("giantswarm_apps_mcp.tools.app.get_custom_objects_client")
    def test_list_all_namespaces(self, mock_get_custom, mock_get_core):
        mock_api = MagicMock()
        mock_get_custom.return_value = mock_api
        mock_api.list_cluster_custom_object.return_value = {"items": [_make_app()]}

        result = asyncio.run(_server().call_tool("app_list", {}))
        import json
        data = json.loads(result.content[0].text)
        assert data["namespace"] == "all"
        assert data["items"][0]["lastDeployed"] == "2026-01-02T00:00:00Z"

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.tools.app.get_core_v1_client")
    @patch("giantswarm_apps_mcp.tools.app.get_custom_objects_client")
    def test_list_all_orgs(self, mock_get_custom, mock_get_core):
        core_api = MagicMock()
        mock_get_core.return_value = core_api
        core_api.list_namespace.return_value = MagicMock(items=[
            _make_namespace("org-acme"), _make_namespace("org-beta"),
        ])
        mock_api = MagicMock()
        mock_get_custom.return_value = mock_api
        mock_api.list_namespaced_custom_object.side_effect = lambda **kw: {
            "items": [_make_app(namespace=kw["namespace"])]
        }

        result = asyncio.run(_server().call_tool("app_list", {"all_orgs": True}))
        import json
        data = json.loads(result.content[0].text)
        assert data["namespace"] == "all organizations"
        assert sorted(item["namespace"] for item in data["items"]) == ["org-acme", "org-beta"]

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.tools.app.get_core_v1_client")
    @patch("giantswarm_apps_mcp.tools.app.get_custom_objects_client")
    def test_get_not_found_has_hint(self, mock_get_custom, mock_get_core):
        from kubernetes.client.exceptions import ApiException
        mock_api = MagicMock()
        mock_get_custom.return_value = mock_api
        mock_api.get_namespaced_custom_object.side_effect = ApiException(status=404, reason="Not Found")

        result = asyncio.run(
            _server().call_tool("app_get", {"name": "missing", "namespace": "org-acme"})
        )
        import json
        data = json.loads(result.content[0].text)
        assert data["success"] is False
        assert "hint" in data
        assert "app_list" in data["hint"]

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.tools.app.get_core_v1_client")
    @patch("giantswarm_apps_mcp.tools.app.get_custom_objects_client")
    def test_create_defaults_target_namespace(self, mock_get_custom, mock_get_core):
        mock_api = MagicMock()
        mock_get_custom.return_value = mock_api
        mock_api.create_namespaced_custom_object.side_effect = lambda **kw: kw["body"]

        result = asyncio.run(
            _server().call_tool("app_create", {
                "name": "ingress",
                "namespace": "org-acme",
                "catalog": "giantswarm",
                "app": "nginx-ingress-controller",
                "version": "3.0.0",
                "config_name": "ingress-values",
            })
        )
        import json
        data = json.loads(result.content[0].text)
        assert data["success"] is True
        body = mock_api.create_namespaced_custom_object.call_args.kwargs["body"]
        assert body["spec"]["namespace"] == "nginx-ingress-controller"
        assert body["spec"]["kubeConfig"] == {"inCluster": True}
        assert body["spec"]["config"]["configMap"] == {"name": "ingress-values", "namespace": "org-acme"}

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.tools.app.get_core_v1_client")
    @patch("giantswarm_apps_mcp.tools.app.get_custom_objects_client")
    def test_update_only_changes_given_fields(self, mock_get_custom, mock_get_core):
        mock_api = MagicMock()
        mock_get_custom.return_value = mock_api
        mock_api.get_namespaced_custom_object.return_value = _make_app()
        mock_api.replace_namespaced_custom_object.side_effect = lambda **kw: kw["body"]

        result = asyncio.run(
            _server().call_tool("app_update", {
                "name": "hello-world", "namespace": "org-acme", "user_config_name": "overrides",
            })
        )
        import json
        data = json.loads(result.content[0].text)
        assert data["success"] is True
        body = mock_api.replace_namespaced_custom_object.call_args.kwargs["body"]
        assert body["spec"]["version"] == "1.2.3"
        assert body["spec"]["userConfig"]["configMap"]["name"] == "overrides"

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.tools.app.get_core_v1_client")
    @patch("giantswarm_apps_mcp.tools.app.get_custom_objects_client")
    def test_delete(self, mock_get_custom, mock_get_core):
        mock_api = MagicMock()
        mock_get_custom.return_value = mock_api

        result = asyncio.run(
            _server().call_tool("app_delete", {"name": "hello-world", "namespace": "org-acme"})
        )
        import json
        data = json.loads(result.content[0].text)
        assert data["success"] is True
        mock_api.delete_namespaced_custom_object.assert_called_once()


class TestAppToolRegistration:

    @pytest.mark.unit
    def test_five_tools_registered(self):
        tools = asyncio.run(_server().list_tools())
        assert sorted(t.name for t in tools) == [
            "app_create", "app_delete", "app_get", "app_list", "app_update",
        ]

    @pytest.mark.unit
    def test_non_destructive_registers_read_only_tools(self):
        tools = asyncio.run(_server(non_destructive=True).list_tools())
        assert sorted(t.name for t in tools) == ["app_get", "app_list"]
