from giantswarm_apps_mcp.tools.app import register_app_tools
from giantswarm_apps_mcp.tools.appcatalogentry import register_appcatalogentry_tools
from giantswarm_apps_mcp.tools.catalog import register_catalog_tools
from giantswarm_apps_mcp.tools.cluster import register_cluster_tools
from giantswarm_apps_mcp.tools.config import register_config_tools
from giantswarm_apps_mcp.tools.organization import register_organization_tools
from giantswarm_apps_mcp.tools.server_info import register_server_tools

__all__ = [
    "register_all_tools",
    "register_app_tools",
    "register_appcatalogentry_tools",
    "register_catalog_tools",
    "register_cluster_tools",
    "register_config_tools",
    "register_organization_tools",
    "register_server_tools",
]


def register_all_tools(server, non_destructive: bool = False):
    register_app_tools(server, non_destructive)
    register_catalog_tools(server, non_destructive)
    register_appcatalogentry_tools(server, non_destructive)
    register_config_tools(server, non_destructive)
    register_organization_tools(server, non_destructive)
    register_cluster_tools(server, non_destructive)
    register_server_tools(server, non_destructive)
