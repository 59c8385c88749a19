"""Unit tests for ServerConfig and the command line."""

import pytest


ENV_VARS = (
    "KUBE_CONTEXT",
    "MCP_TRANSPORT",
    "MCP_HTTP_ADDR",
    "MCP_SSE_ENDPOINT",
    "MCP_MESSAGE_ENDPOINT",
    "MCP_HTTP_ENDPOINT",
    "MCP_NON_DESTRUCTIVE",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestServerConfig:

    @pytest.mark.unit
    def test_defaults(self, clean_env):
        from giantswarm_apps_mcp.config import ServerConfig

        config = ServerConfig.from_env()
        assert config.kube_context is None
        assert config.transport == "stdio"
        assert config.http_addr == ":8080"
        assert config.sse_endpoint == "/sse"
        assert config.message_endpoint == "/message"
        assert config.http_endpoint == "/mcp"
        assert config.non_destructive is False
        assert config.log_level == "INFO"

    @pytest.mark.unit
    def test_from_env(self, clean_env):
        from giantswarm_apps_mcp.config import ServerConfig

        clean_env.setenv("KUBE_CONTEXT", "prod-admin")
        clean_env.setenv("MCP_TRANSPORT", "http")
        clean_env.setenv("MCP_NON_DESTRUCTIVE", "yes")
        clean_env.setenv("LOG_LEVEL", "debug")

        config = ServerConfig.from_env()
        assert config.kube_context == "prod-admin"
        assert config.transport == "streamable-http"
        assert config.non_destructive is True
        assert config.log_level == "DEBUG"

    @pytest.mark.unit
    def test_normalize_transport(self):
        from giantswarm_apps_mcp.config import normalize_transport

        assert normalize_transport(" SSE ") == "sse"
        assert normalize_transport("http") == "streamable-http"
        with pytest.raises(ValueError, match="unsupported transport: websocket"):
            normalize_transport("websocket")

    @pytest.mark.unit
    def test_with_overrides_ignores_none(self, clean_env):
        from giantswarm_apps_mcp.config import ServerConfig

        config = ServerConfig.from_env().with_overrides(transport="sse", http_addr=None, non_destructive=True)
        assert config.transport == "sse"
        assert config.http_addr == ":8080"
        assert config.non_destructive is True

    @pytest.mark.unit
    def test_host_port(self, clean_env):
        from giantswarm_apps_mcp.config import ServerConfig

        config = ServerConfig.from_env()
        assert config.host_port() == ("0.0.0.0", 8080)
        assert config.with_overrides(http_addr="127.0.0.1:9000").host_port() == ("127.0.0.1", 9000)
        with pytest.raises(ValueError, match="invalid http address"):
            config.with_overrides(http_addr="localhost:").host_port()

    @pytest.mark.unit
    @pytest.mark.parametrize("addr", ["localhost:http", ":80a", ":0", ":70000", "8080"])
    def test_invalid_port_rejected(self, clean_env, addr):
        from giantswarm_apps_mcp.config import ServerConfig

        with pytest.raises(ValueError, match="invalid http address"):
            ServerConfig.from_env().with_overrides(http_addr=addr)

        clean_env.setenv("MCP_HTTP_ADDR", addr)
        with pytest.raises(ValueError, match="invalid http address"):
            ServerConfig.from_env()


class TestCli:

    @pytest.mark.unit
    def test_version(self, capsys):
        from giantswarm_apps_mcp.cli import main

        assert main(["version"]) == 0
        assert capsys.readouterr().out.strip() == "mcp-giantswarm-apps version 0.1.0"

    @pytest.mark.unit
    def test_flags_override_environment(self, clean_env):
        from giantswarm_apps_mcp.cli import build_parser, config_from_args

        clean_env.setenv("MCP_TRANSPORT", "sse")
        args = build_parser().parse_args([
            "serve", "--transport", "http", "--http-addr", ":9090",
            "--non-destructive", "--log-level", "warning",
        ])
        config = config_from_args(args)
        assert config.transport == "streamable-http"
        assert config.http_addr == ":9090"
        assert config.non_destructive is True
        assert config.log_level == "WARNING"

    @pytest.mark.unit
    def test_unset_flags_keep_environment(self, clean_env):
        from giantswarm_apps_mcp.cli import build_parser, config_from_args

        clean_env.setenv("MCP_NON_DESTRUCTIVE", "true")
        config = config_from_args(build_parser().parse_args(["serve"]))
        assert config.non_destructive is True
        assert config.transport == "stdio"

    @pytest.mark.unit
    def test_invalid_environment_exits_with_usage_error(self, clean_env, capsys):
        from giantswarm_apps_mcp.cli import main

        clean_env.setenv("MCP_TRANSPORT", "carrier-pigeon")
        assert main(["serve"]) == 2
        assert "unsupported transport" in capsys.readouterr().err

    @pytest.mark.unit
    def test_non_numeric_port_exits_with_usage_error(self, clean_env, capsys):
        from giantswarm_apps_mcp.cli import main

        assert main(["serve", "--transport", "sse", "--http-addr", "localhost:http"]) == 2
        assert "invalid http address: localhost:http" in capsys.readouterr().err
