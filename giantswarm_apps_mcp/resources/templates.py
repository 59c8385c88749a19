"""MCP resource templates backed by ResourceProvider."""

import json
import logging
from typing import Any

from giantswarm_apps_mcp.k8s_config import get_core_v1_client, get_custom_objects_client
from giantswarm_apps_mcp.resources.provider import MIME_TYPE_JSON, ResourceProvider

logger = logging.getLogger("mcp-server")

RESOURCE_INDEX_URI = "giantswarm://resources"


def _provider() -> ResourceProvider:
    return ResourceProvider(get_custom_objects_client(), get_core_v1_client())


def _read(uri: str) -> str:
    try:
        content: Any = _provider().get_resource(uri)
    except Exception as e:
        logger.error(f"Error reading resource {uri}: {e}")
        raise
    return json.dumps(content, indent=2)


def register_resources(server):
    """Register the Giant Swarm resource templates and the resource index."""

    @server.resource(
        RESOURCE_INDEX_URI,
        name="Giant Swarm Resources",
        description="Every app, config, catalog, schema and changelog resource currently addressable",
        mime_type=MIME_TYPE_JSON,
    )
    def resource_index() -> str:
        return json.dumps(_provider().list_resources(), indent=2)

    @server.resource(
        "app://{namespace}/{name}",
        name="App Resource",
        description="Giant Swarm app details and status",
        mime_type=MIME_TYPE_JSON,
    )
    def app_resource(namespace: str, name: str) -> str:
        return _read(f"app://{namespace}/{name}")

    @server.resource(
        "catalog://{name}",
        name="Catalog Resource",
        description="Giant Swarm catalog information",
        mime_type=MIME_TYPE_JSON,
    )
    def catalog_resource(name: str) -> str:
        return _read(f"catalog://{name}")

    @server.resource(
        "config://{namespace}/{app}/values",
        name="Config Resource",
        description="App configuration values",
        mime_type=MIME_TYPE_JSON,
    )
    def config_resource(namespace: str, app: str) -> str:
        return _read(f"config://{namespace}/{app}/values")

    @server.resource(
        "schema://{catalog}/{app}/{version}",
        name="Schema Resource",
        description="App configuration schema",
        mime_type=MIME_TYPE_JSON,
    )
    def schema_resource(catalog: str, app: str, version: str) -> str:
        return _read(f"schema://{catalog}/{app}/{version}")

    @server.resource(
        "changelog://{catalog}/{app}",
        name="Changelog Resource",
        description="App version changelog",
        mime_type=MIME_TYPE_JSON,
    )
    def changelog_resource(catalog: str, app: str) -> str:
        return _read(f"changelog://{catalog}/{app}")
