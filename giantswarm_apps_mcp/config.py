"""Server configuration read from the environment and overridden by CLI flags."""

from dataclasses import dataclass, replace
from typing import Optional, Tuple
import os

TRANSPORTS = ("stdio", "sse", "streamable-http")


def _env_str(name: str, default: str) -> str:
    value = os.environ.get(name)
    return value if value else default


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def normalize_transport(value: str) -> str:
    transport = (value or "").strip().lower()
    if transport == "http":
        return "streamable-http"
    if transport not in TRANSPORTS:
        raise ValueError(f"unsupported transport: {value} (must be one of {', '.join(TRANSPORTS)})")
    return transport


def parse_http_addr(addr: str) -> Tuple[str, int]:
    """``:8080`` -> ``("0.0.0.0", 8080)``; ``127.0.0.1:9000`` -> ``("127.0.0.1", 9000)``."""
    host, sep, port = addr.rpartition(":")
    if not sep or not (port.isascii() and port.isdigit()) or not 0 < int(port) < 65536:
        raise ValueError(f"invalid http address: {addr} (expected host:port)")
    return host or "0.0.0.0", int(port)


@dataclass(frozen=True)
class ServerConfig:
    """Runtime configuration for the Giant Swarm apps MCP server.

    Env vars:
    - KUBE_CONTEXT: kube context name (current context when unset)
    - KUBECONFIG: read by the Kubernetes client loader, not stored here
    - MCP_TRANSPORT: stdio|sse|streamable-http (http is an alias of streamable-http)
    - MCP_HTTP_ADDR: listen address for sse/streamable-http, e.g. ":8080"
    - MCP_SSE_ENDPOINT, MCP_MESSAGE_ENDPOINT, MCP_HTTP_ENDPOINT
    - MCP_NON_DESTRUCTIVE: skip registering tools that modify the cluster
    - LOG_LEVEL
    """

    kube_context: Optional[str]
    transport: str
    http_addr: str
    sse_endpoint: str
    message_endpoint: str
    http_endpoint: str
    non_destructive: bool
    log_level: str

    DEFAULT_TRANSPORT = "stdio"
    DEFAULT_HTTP_ADDR = ":8080"
    DEFAULT_SSE_ENDPOINT = "/sse"
    DEFAULT_MESSAGE_ENDPOINT = "/message"
    DEFAULT_HTTP_ENDPOINT = "/mcp"
    DEFAULT_LOG_LEVEL = "INFO"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        http_addr = _env_str("MCP_HTTP_ADDR", cls.DEFAULT_HTTP_ADDR)
        parse_http_addr(http_addr)
        return cls(
            kube_context=os.environ.get("KUBE_CONTEXT") or None,
            transport=normalize_transport(_env_str("MCP_TRANSPORT", cls.DEFAULT_TRANSPORT)),
            http_addr=http_addr,
            sse_endpoint=_env_str("MCP_SSE_ENDPOINT", cls.DEFAULT_SSE_ENDPOINT),
            message_endpoint=_env_str("MCP_MESSAGE_ENDPOINT", cls.DEFAULT_MESSAGE_ENDPOINT),
            http_endpoint=_env_str("MCP_HTTP_ENDPOINT", cls.DEFAULT_HTTP_ENDPOINT),
            non_destructive=_env_bool("MCP_NON_DESTRUCTIVE"),
            log_level=_env_str("LOG_LEVEL", cls.DEFAULT_LOG_LEVEL).upper(),
        )

    def with_overrides(self, **overrides) -> "ServerConfig":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if "transport" in changes:
            changes["transport"] = normalize_transport(changes["transport"])
        if "http_addr" in changes:
            parse_http_addr(changes["http_addr"])
        return replace(self, **changes)

    def host_port(self) -> Tuple[str, int]:
        return parse_http_addr(self.http_addr)
