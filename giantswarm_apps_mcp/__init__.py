"""MCP server for Giant Swarm apps, catalogs and the clusters they run on."""

__version__ = "0.1.0"
SERVER_NAME = "mcp-giantswarm-apps"
