"""Unit tests for tool registration and server assembly."""

import asyncio
import pytest
from unittest.mock import patch


def _config(**overrides):
    from giantswarm_apps_mcp.config import ServerConfig

    values = dict(
        kube_context=None,
        transport="stdio",
        http_addr=":8080",
        sse_endpoint="/sse",
        message_endpoint="/message",
        http_endpoint="/mcp",
        non_destructive=False,
        log_level="INFO",
    )
    values.update(overrides)
    return ServerConfig(**values)


class TestToolRegistration:

    @pytest.mark.unit
    def test_import_from_init(self):
        from giantswarm_apps_mcp.tools import (
            register_all_tools,
            register_app_tools,
            register_appcatalogentry_tools,
            register_catalog_tools,
            register_cluster_tools,
            register_config_tools,
            register_organization_tools,
            register_server_tools,
        )
        assert callable(register_all_tools)
        assert callable(register_app_tools)
        assert callable(register_appcatalogentry_tools)
        assert callable(register_catalog_tools)
        assert callable(register_cluster_tools)
        assert callable(register_config_tools)
        assert callable(register_organization_tools)
        assert callable(register_server_tools)

    @pytest.mark.unit
    def test_all_tools_registered(self):
        from fastmcp import FastMCP
        from giantswarm_apps_mcp.tools import register_all_tools

        server = FastMCP(name="test")
        register_all_tools(server)
        tools = asyncio.run(server.list_tools())
        assert len(tools) == 30

    @pytest.mark.unit
    def test_non_destructive_drops_mutating_tools(self):
        from fastmcp import FastMCP
        from giantswarm_apps_mcp.tools import register_all_tools

        server = FastMCP(name="test")
        register_all_tools(server, non_destructive=True)
        names = {t.name for t in asyncio.run(server.list_tools())}
        assert len(names) == 21
        for mutating in ("app_create", "app_update", "app_delete", "catalog_create", "catalog_update",
                         "catalog_delete", "config_set", "secret_create", "secret_update"):
            assert mutating not in names
        assert "health" in names

    @pytest.mark.unit
    def test_tool_annotations(self):
        from fastmcp import FastMCP
        from giantswarm_apps_mcp.tools import register_all_tools

        server = FastMCP(name="test")
        register_all_tools(server)
        tools = {t.name: t for t in asyncio.run(server.list_tools())}
        assert tools["app_list"].annotations.readOnlyHint is True
        assert tools["app_delete"].annotations.destructiveHint is True


class TestCreateServer:

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.server.set_default_context")
    def test_create_server(self, mock_set_context):
        from giantswarm_apps_mcp.server import create_server

        server = create_server(_config(kube_context="prod-admin", non_destructive=True))
        mock_set_context.assert_called_once_with("prod-admin")
        assert server.name == "mcp-giantswarm-apps"
        assert len(asyncio.run(server.list_tools())) == 21
        assert len(asyncio.run(server.list_prompts())) == 5

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.server.create_server")
    def test_run_stdio(self, mock_create):
        from giantswarm_apps_mcp.server import run

        run(_config())
        mock_create.return_value.run.assert_called_once_with(transport="stdio")

    @pytest.mark.unit
    @patch("giantswarm_apps_mcp.server.create_server")
    def test_run_streamable_http(self, mock_create):
        from giantswarm_apps_mcp.server import run

        run(_config(transport="streamable-http", http_addr="127.0.0.1:9000", http_endpoint="/api/mcp"))
        mock_create.return_value.run.assert_called_once_with(
            transport="streamable-http", host="127.0.0.1", port=9000, path="/api/mcp",
        )
