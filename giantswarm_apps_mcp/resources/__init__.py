from giantswarm_apps_mcp.resources.provider import ResourceProvider
from giantswarm_apps_mcp.resources.templates import RESOURCE_INDEX_URI, register_resources
from giantswarm_apps_mcp.resources.uri import ResourceURI

__all__ = [
    "RESOURCE_INDEX_URI",
    "ResourceProvider",
    "ResourceURI",
    "register_resources",
]
