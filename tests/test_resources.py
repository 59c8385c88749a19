"""Unit tests for resource URIs and the ResourceProvider behind them."""

import base64
import json
import pytest
from unittest.mock import patch, MagicMock

from kubernetes import client


def _app(name="hello", namespace="org-acme", config=None, user_config=None):
    spec = {"catalog": "giantswarm", "name": name, "namespace": name, "version": "1.2.0"}
    if config:
        spec["config"] = config
    if user_config:
        spec["userConfig"] = user_config
    return {
        "metadata": {
            "name": name,
            "namespace": namespace,
            "labels": {"app.kubernetes.io/name": name},
            "creationTimestamp": "2026-02-01T00:00:00Z",
        },
        "spec": spec,
        "status": {"release": {"status": "deployed"}},
    }


def _catalog(name="giantswarm"):
    return {
        "metadata": {
            "name": name,
            "namespace": "default",
            "creationTimestamp": "2025-01-01T00:00:00Z",
            "labels": {"application.giantswarm.io/catalog-type": "stable"},
        },
        "spec": {
            "title": "Giant Swarm",
            "description": "Giant Swarm apps",
            "storage": {"type": "helm", "URL": "https://giantswarm.github.io/giantswarm-catalog/"},
        },
    }


def _entry(app="hello", version="1.0.0", catalog="giantswarm", created="2025-01-01T00:00:00Z"):
    return {
        "metadata": {"name": f"{catalog}-{app}-{version}", "namespace": "default"},
        "spec": {
            "appName": app,
            "catalog": {"name": catalog, "namespace": "default"},
            "chart": {"name": app, "version": version, "description": f"{app} {version}"},
            "dateCreated": created,
        },
    }


def _custom_api(apps=(), catalogs=(), entries=()):
    custom_api = MagicMock()
    by_plural = {"apps": list(apps), "catalogs": list(catalogs), "appcatalogentries": list(entries)}
    custom_api.list_cluster_custom_object.side_effect = lambda **kw: {"items": by_plural[kw["plural"]]}
    return custom_api


def _config_map(name, data):
    return client.V1ConfigMap(metadata=client.V1ObjectMeta(name=name, namespace="org-acme"), data=data)


def _secret(name, data):
    return client.V1Secret(
        metadata=client.V1ObjectMeta(name=name, namespace="org-acme"),
        data={k: base64.b64encode(v.encode()).decode() for k, v in data.items()},
    )


class TestResourceURI:

    @pytest.mark.unit
    def test_parse_each_scheme(self):
        from giantswarm_apps_mcp.resources import ResourceURI

        app = ResourceURI.parse("app://org-acme/hello")
        assert (app.type, app.namespace, app.name) == ("app", "org-acme", "hello")

        schema = ResourceURI.parse("schema://giantswarm/hello/1.0.0")
        assert (schema.catalog, schema.name, schema.version) == ("giantswarm", "hello", "1.0.0")

        changelog = ResourceURI.parse("changelog://giantswarm/hello")
        assert (changelog.catalog, changelog.name) == ("giantswarm", "hello")

    @pytest.mark.unit
    def test_config_subpath_defaults_to_values(self):
        from giantswarm_apps_mcp.resources import ResourceURI

        assert ResourceURI.parse("config://org-acme/hello").subpath == "values"
        assert ResourceURI.parse("config://org-acme/hello/a/b").subpath == "a/b"
        assert str(ResourceURI.parse("config://org-acme/hello")) == "config://org-acme/hello/values"

    @pytest.mark.unit
    def test_string_form_round_trips(self):
        from giantswarm_apps_mcp.resources import ResourceURI

        for uri in ("app://ns/a", "catalog://c", "schema://c/a/1.0.0", "changelog://c/a"):
            assert str(ResourceURI.parse(uri)) == uri

    @pytest.mark.unit
    @pytest.mark.parametrize("uri, message", [
        ("hello", "invalid resource URI format"),
        ("helm://x", "unknown resource type: helm"),
        ("app://only-namespace", "expected namespace/name"),
        ("catalog://a/b", "expected name"),
        ("config://ns", "expected namespace/app"),
        ("schema://c/a", "expected catalog/app/version"),
        ("changelog://c", "expected catalog/app"),
    ])
    def test_parse_errors(self, uri, message):
        from giantswarm_apps_mcp.resources import ResourceURI

        with pytest.raises(ValueError, match=message):
            ResourceURI.parse(uri)


class TestResourceProvider:

    @pytest.mark.unit
    def test_app_resource_includes_config_map_values(self):
        from giantswarm_apps_mcp.resources import ResourceProvider

        custom_api = MagicMock()
        custom_api.get_namespaced_custom_object.return_value = _app(
            config={"configMap": {"name": "hello-values", "namespace": "org-acme"}},
        )
        core_api = MagicMock()
        core_api.read_namespaced_config_map.return_value = _config_map("hello-values", {"replicas": "2"})

        content = ResourceProvider(custom_api, core_api).get_resource("app://org-acme/hello")
        assert content["version"] == "1.2.0"
        assert content["status"] == "deployed"
        assert content["config"] == {"replicas": "2"}
        assert content["metadata"] == {"app.kubernetes.io/name": "hello"}
        assert content["lastUpdated"] == "2026-02-01T00:00:00Z"

    @pytest.mark.unit
    def test_catalog_resource_counts_entries(self):
        from giantswarm_apps_mcp.resources import ResourceProvider

        custom_api = _custom_api(
            catalogs=[_catalog("giantswarm"), _catalog("playground")],
            entries=[_entry("hello"), _entry("world"), _entry("other", catalog="playground")],
        )
        content = ResourceProvider(custom_api, MagicMock()).get_resource("catalog://giantswarm")
        assert content["appCount"] == 2
        assert content["type"] == "stable"
        assert content["url"] == "https://giantswarm.github.io/giantswarm-catalog/"

    @pytest.mark.unit
    def test_catalog_resource_not_found(self):
        from giantswarm_apps_mcp.errors import ResourceNotFoundError
        from giantswarm_apps_mcp.resources import ResourceProvider

        provider = ResourceProvider(_custom_api(), MagicMock())
        with pytest.raises(ResourceNotFoundError, match="catalog missing not found"):
            provider.get_resource("catalog://missing")

    @pytest.mark.unit
    def test_config_resource_secret_overrides_config_map(self):
        from giantswarm_apps_mcp.resources import ResourceProvider

        custom_api = MagicMock()
        custom_api.get_namespaced_custom_object.return_value = _app(user_config={
            "configMap": {"name": "hello-user-values", "namespace": "org-acme"},
            "secret": {"name": "hello-user-secrets", "namespace": "org-acme"},
        })
        core_api = MagicMock()
        core_api.read_namespaced_config_map.return_value = _config_map(
            "hello-user-values", {"replicas": "3", "mode": "fast"},
        )
        core_api.read_namespaced_secret.return_value = _secret("hello-user-secrets", {"mode": "safe"})

        content = ResourceProvider(custom_api, core_api).get_resource("config://org-acme/hello/values")
        assert content["values"] == {"replicas": 3, "mode": "safe"}
        assert content["source"] == "secret"

    @pytest.mark.unit
    def test_config_resource_without_user_config(self):
        from giantswarm_apps_mcp.resources import ResourceProvider

        custom_api = MagicMock()
        custom_api.get_namespaced_custom_object.return_value = _app()
        content = ResourceProvider(custom_api, MagicMock()).get_resource("config://org-acme/hello")
        assert content["values"] == {}
        assert content["source"] == ""

    @pytest.mark.unit
    def test_schema_resource(self):
        from giantswarm_apps_mcp.resources import ResourceProvider

        custom_api = _custom_api(entries=[_entry("hello", "1.0.0"), _entry("hello", "2.0.0")])
        content = ResourceProvider(custom_api, MagicMock()).get_resource("schema://giantswarm/hello/2.0.0")
        assert content["version"] == "2.0.0"
        assert content["schema"]["title"] == "hello"
        assert content["schema"]["description"] == "hello 2.0.0"

    @pytest.mark.unit
    def test_schema_resource_unknown_version(self):
        from giantswarm_apps_mcp.errors import ResourceNotFoundError
        from giantswarm_apps_mcp.resources import ResourceProvider

        provider = ResourceProvider(_custom_api(), MagicMock())
        with pytest.raises(ResourceNotFoundError, match="giantswarm/hello@9.9.9"):
            provider.get_resource("schema://giantswarm/hello/9.9.9")

    @pytest.mark.unit
    def test_changelog_marks_major_bumps(self):
        from giantswarm_apps_mcp.resources import ResourceProvider

        custom_api = _custom_api(entries=[
            _entry("hello", "1.0.0", created="2025-01-01T00:00:00Z"),
            _entry("hello", "2.0.0", created="2026-01-01T00:00:00Z"),
            _entry("hello", "1.5.0", created="2025-06-01T00:00:00Z"),
            _entry("hello-extra", "3.0.0", created="2026-05-01T00:00:00Z"),
        ])
        content = ResourceProvider(custom_api, MagicMock()).get_resource("changelog://giantswarm/hello")
        assert [(e["version"], e["breaking"]) for e in content["entries"]] == [
            ("2.0.0", True),
            ("1.5.0", False),
            ("1.0.0", False),
        ]
        assert content["entries"][0]["date"] == "2026-01-01"

    @pytest.mark.unit
    def test_list_resources(self):
        from giantswarm_apps_mcp.resources import ResourceProvider

        custom_api = _custom_api(
            apps=[_app("hello", user_config={"configMap": {"name": "v", "namespace": "org-acme"}}), _app("bare")],
            catalogs=[_catalog()],
            entries=[_entry("hello", "1.0.0"), _entry("hello", "1.1.0")],
        )
        uris = [r["uri"] for r in ResourceProvider(custom_api, MagicMock()).list_resources()]
        assert uris == [
            "app://org-acme/hello",
            "config://org-acme/hello/values",
            "app://org-acme/bare",
            "catalog://giantswarm",
            "schema://giantswarm/hello/1.0.0",
            "changelog://giantswarm/hello",
            "schema://giantswarm/hello/1.1.0",
        ]

    @pytest.mark.unit
    def test_is_breaking_change(self):
        from giantswarm_apps_mcp.resources.provider import is_breaking_change

        assert is_breaking_change("v2.0.0", "1.9.9")
        assert not is_breaking_change("v1.2.0", "1.0.0")


class TestResourceTemplates:

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.resources.templates.get_core_v1_client")
    @patch("giantswarm_apps_mcp.resources.templates.get_custom_objects_client")
    def test_read_returns_json(self, mock_get_custom, mock_get_core):
        from giantswarm_apps_mcp.resources.templates import _read

        mock_get_custom.return_value = _custom_api(catalogs=[_catalog()])
        content = json.loads(_read("catalog://giantswarm"))
        assert content["name"] == "giantswarm"
        assert content["title"] == "Giant Swarm"

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.resources.templates.get_core_v1_client")
    @patch("giantswarm_apps_mcp.resources.templates.get_custom_objects_client")
    def test_read_propagates_errors(self, mock_get_custom, mock_get_core):
        from giantswarm_apps_mcp.resources.templates import _read

        with pytest.raises(ValueError, match="unknown resource type"):
            _read("bogus://x")
