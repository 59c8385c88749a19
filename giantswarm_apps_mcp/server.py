"""FastMCP server assembly and transport startup."""

import logging

import fastmcp
from fastmcp import FastMCP

from giantswarm_apps_mcp import SERVER_NAME, __version__
from giantswarm_apps_mcp.config import ServerConfig
from giantswarm_apps_mcp.k8s_config import set_default_context
from giantswarm_apps_mcp.prompts import register_prompts
from giantswarm_apps_mcp.resources import register_resources
from giantswarm_apps_mcp.tools import register_all_tools

logger = logging.getLogger("mcp-server")

INSTRUCTIONS = (
    "Manage Giant Swarm apps, catalogs and app catalog entries, inspect the "
    "workload clusters they run on, and work with app configuration stored in "
    "ConfigMaps and Secrets. Every tool accepts an optional kubeconfig context."
)


def create_server(config: ServerConfig) -> FastMCP:
    set_default_context(config.kube_context)

    server = FastMCP(name=SERVER_NAME, instructions=INSTRUCTIONS)
    register_all_tools(server, config.non_destructive)
    register_resources(server)
    register_prompts(server)

    if config.non_destructive:
        logger.info("Non-destructive mode: tools that modify the cluster are not registered")
    return server


def run(config: ServerConfig) -> None:
    server = create_server(config)
    logger.info(
        f"Starting {SERVER_NAME} {__version__} "
        f"(transport: {config.transport}, context: {config.kube_context or 'current'})"
    )

    if config.transport == "stdio":
        server.run(transport="stdio")
        return

    host, port = config.host_port()
    if config.transport == "sse":
        fastmcp.settings.message_path = config.message_endpoint
        logger.info(f"SSE endpoint http://{host}:{port}{config.sse_endpoint}")
        server.run(transport="sse", host=host, port=port, path=config.sse_endpoint)
        return

    logger.info(f"Streamable HTTP endpoint http://{host}:{port}{config.http_endpoint}")
    server.run(transport="streamable-http", host=host, port=port, path=config.http_endpoint)
