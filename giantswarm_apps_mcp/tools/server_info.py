"""Server health and kubeconfig context tools."""

import logging
from typing import Any, Dict

from kubernetes.client.exceptions import ApiException
from mcp.types import ToolAnnotations

from giantswarm_apps_mcp import SERVER_NAME, __version__
from giantswarm_apps_mcp.dynamic import DynamicClient
from giantswarm_apps_mcp.k8s_config import (
    IN_CLUSTER_CONTEXT,
    get_current_context,
    get_custom_objects_client,
    get_version_client,
    list_contexts,
)
from giantswarm_apps_mcp.tools.common import error_result

logger = logging.getLogger("mcp-server")


def register_server_tools(server, non_destructive: bool):
    """Register health and context tools."""

    @server.tool(
        annotations=ToolAnnotations(
            title="Server Health",
            readOnlyHint=True,
        ),
    )
    def health(context: str = "") -> Dict[str, Any]:
        """Check server health, Kubernetes connectivity and Giant Swarm CRD availability.

        Args:
            context: Kubernetes context (uses current if not specified)
        """
        try:
            version_info = get_version_client(context).get_code()

            crds: Dict[str, Any] = {"available": True}
            try:
                DynamicClient(get_custom_objects_client(context)).check_crds_exist()
            except (ApiException, LookupError) as e:
                logger.warning(f"Giant Swarm CRDs unavailable: {e}")
                crds = {"available": False, "error": str(e)}

            return {
                "success": True,
                "server": SERVER_NAME,
                "version": __version__,
                "context": get_current_context(context) or "current",
                "kubernetes": {
                    "connected": True,
                    "gitVersion": version_info.git_version,
                    "platform": version_info.platform,
                },
                "crds": crds,
                "nonDestructive": non_destructive,
            }
        except Exception as e:
            return error_result("checking health", e)

    @server.tool(
        annotations=ToolAnnotations(
            title="List Kubernetes Contexts",
            readOnlyHint=True,
        ),
    )
    def kubernetes_contexts() -> Dict[str, Any]:
        """List the kubeconfig contexts usable as the context argument of other tools."""
        try:
            current = get_current_context()
            if current == IN_CLUSTER_CONTEXT:
                return {
                    "success": True,
                    "current": current,
                    "contexts": [{"name": current, "current": True}],
                }

            names, active = list_contexts()
            current = current or active
            return {
                "success": True,
                "current": current,
                "contexts": [{"name": name, "current": name == current} for name in names],
            }
        except Exception as e:
            return error_result("listing kubeconfig contexts", e)
