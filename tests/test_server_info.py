"""Unit tests for the health and kubernetes_contexts tools."""

import asyncio
import json
import pytest
from unittest.mock import patch, MagicMock


def _server(non_destructive=False):
    from fastmcp import FastMCP
    from giantswarm_apps_mcp.tools.server_info import register_server_tools
    server = FastMCP(name="test")
    register_server_tools(server, non_destructive)
    return server


def _api_resources(*names):
    resources = []
    for name in names:
        resource = MagicMock()
        resource.name = name
        resources.append(resource)
    return MagicMock(resources=resources)


class TestHealth:

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.tools.server_info.get_current_context", return_value="prod-admin")
    @patch("giantswarm_apps_mcp.tools.server_info.get_custom_objects_client")
    @patch("giantswarm_apps_mcp.tools.server_info.get_version_client")
    def test_healthy(self, mock_version, mock_custom, mock_current):
        mock_version.return_value.get_code.return_value = MagicMock(git_version="v1.31.2", platform="linux/amd64")
        mock_custom.return_value.get_api_resources.return_value = _api_resources(
            "apps", "catalogs", "appcatalogentries", "charts",
        )

        result = asyncio.run(_server(non_destructive=True).call_tool("health", {}))
        data = json.loads(result.content[0].text)
        assert data["success"] is True
        assert data["server"] == "mcp-giantswarm-apps"
        assert data["context"] == "prod-admin"
        assert data["kubernetes"] == {"connected": True, "gitVersion": "v1.31.2", "platform": "linux/amd64"}
        assert data["crds"] == {"available": True}
        assert data["nonDestructive"] is True

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.tools.server_info.get_current_context", return_value="")
    @patch("giantswarm_apps_mcp.tools.server_info.get_custom_objects_client")
    @patch("giantswarm_apps_mcp.tools.server_info.get_version_client")
    def test_missing_crds_is_reported_not_fatal(self, mock_version, mock_custom, mock_current):
        mock_version.return_value.get_code.return_value = MagicMock(git_version="v1.31.2", platform="linux/amd64")
        mock_custom.return_value.get_api_resources.return_value = _api_resources("apps")

        result = asyncio.run(_server().call_tool("health", {}))
        data = json.loads(result.content[0].text)
        assert data["success"] is True
        assert data["context"] == "current"
        assert data["crds"]["available"] is False
        assert data["crds"]["error"] == "required CRD catalogs.application.giantswarm.io not found"

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.tools.server_info.get_version_client")
    def test_unreachable_cluster(self, mock_version):
        mock_version.return_value.get_code.side_effect = ConnectionError("connection refused")

        result = asyncio.run(_server().call_tool("health", {}))
        data = json.loads(result.content[0].text)
        assert data["success"] is False
        assert "connection refused" in data["error"]


class TestContexts:

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.tools.server_info.list_contexts", return_value=(["dev", "prod"], "dev"))
    @patch("giantswarm_apps_mcp.tools.server_info.get_current_context", return_value="prod")
    def test_lists_kubeconfig_contexts(self, mock_current, mock_list):
        result = asyncio.run(_server().call_tool("kubernetes_contexts", {}))
        data = json.loads(result.content[0].text)
        assert data["current"] == "prod"
        assert data["contexts"] == [
            {"name": "dev", "current": False},
            {"name": "prod", "current": True},
        ]

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.tools.server_info.list_contexts")
    @patch("giantswarm_apps_mcp.tools.server_info.get_current_context", return_value="in-cluster")
    def test_in_cluster(self, mock_current, mock_list):
        result = asyncio.run(_server().call_tool("kubernetes_contexts", {}))
        data = json.loads(result.content[0].text)
        assert data["contexts"] == [{"name": "in-cluster", "current": True}]
        mock_list.assert_not_called()
