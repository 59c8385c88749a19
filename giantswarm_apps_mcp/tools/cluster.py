"""Workload cluster tools (Cluster API clusters). Clusters are never modified."""

import logging
from typing import Any, Dict

from mcp.types import ToolAnnotations

from giantswarm_apps_mcp.cluster import (
    Cluster,
    ClusterClient,
    cluster_namespace,
    filter_by_provider,
    filter_by_status,
)
from giantswarm_apps_mcp.errors import GiantSwarmAPIError, ResourceNotFoundError
from giantswarm_apps_mcp.k8s_config import get_core_v1_client, get_custom_objects_client
from giantswarm_apps_mcp.tools.common import error_result

logger = logging.getLogger("mcp-server")

CLUSTER_HINT = "Use cluster_list to find available clusters"


def _cluster_client(context: str) -> ClusterClient:
    return ClusterClient(get_custom_objects_client(context), get_core_v1_client(context))


def _find_cluster(client: ClusterClient, name: str, namespace: str, organization: str) -> Cluster:
    """Get by namespace when known, else scan the organization or every namespace."""
    if namespace:
        return client.get(namespace, name)
    candidates = client.list_by_organization(organization) if organization else client.list()
    for cluster in candidates:
        if cluster.name == name:
            return cluster
    raise ResourceNotFoundError(f"cluster {name} not found")


def _conditions(cluster: Cluster):
    return [condition.to_dict() for condition in cluster.status.conditions]


def register_cluster_tools(server, non_destructive: bool):
    """Register read-only cluster tools."""

    @server.tool(
        annotations=ToolAnnotations(
            title="List Workload Clusters",
            readOnlyHint=True,
        ),
    )
    def cluster_list(
        namespace: str = "",
        organization: str = "",
        labels: str = "",
        provider: str = "",
        ready_only: bool = False,
        context: str = ""
    ) -> Dict[str, Any]:
        """List available workload clusters.

        Args:
            namespace: Namespace to list clusters from (empty for all namespaces)
            organization: Organization to list clusters from
            labels: Label selector (ignored when organization is set)
            provider: Filter by infrastructure provider, case-insensitive (e.g., "aws", "azure")
            ready_only: Show only ready clusters
            context: Kubernetes context (uses current if not specified)
        """
        try:
            client = _cluster_client(context)
            if organization:
                clusters = client.list_by_organization(organization)
            else:
                clusters = client.list(namespace, labels)

            clusters = filter_by_provider(clusters, provider)
            if ready_only:
                clusters = filter_by_status(clusters, True)

            items = []
            for cluster in clusters:
                item = cluster.summary()
                item["infrastructureReady"] = cluster.status.infrastructure_ready
                item["controlPlaneReady"] = cluster.status.control_plane_ready
                item["conditions"] = [
                    {"type": c.type, "status": c.status, "reason": c.reason}
                    for c in cluster.status.conditions
                ]
                items.append(item)

            return {
                "success": True,
                "context": context or "current",
                "count": len(items),
                "items": items,
            }
        except Exception as e:
            return error_result("listing clusters", e)

    @server.tool(
        annotations=ToolAnnotations(
            title="List Cluster Apps",
            readOnlyHint=True,
        ),
    )
    def cluster_apps(
        cluster: str,
        namespace: str = "",
        organization: str = "",
        context: str = ""
    ) -> Dict[str, Any]:
        """List apps deployed to a specific cluster.

        Covers the cluster's workload namespace and the apps of its
        organization that target a remote cluster.

        Args:
            cluster: Cluster name
            namespace: Namespace where the Cluster resource lives
            organization: Organization that owns the cluster
            context: Kubernetes context (uses current if not specified)
        """
        try:
            client = _cluster_client(context)
            target = _find_cluster(client, cluster, namespace, organization)
            apps = client.list_apps(target)
            return {
                "success": True,
                "context": context or "current",
                "cluster": target.name,
                "count": len(apps),
                "items": [app.summary() for app in apps],
            }
        except Exception as e:
            return error_result("listing cluster apps", e, hint=CLUSTER_HINT)

    @server.tool(
        annotations=ToolAnnotations(
            title="Get Workload Cluster",
            readOnlyHint=True,
        ),
    )
    def cluster_get(
        name: str,
        namespace: str = "",
        organization: str = "",
        context: str = ""
    ) -> Dict[str, Any]:
        """Get detailed information about a specific cluster.

        Args:
            name: Cluster name
            namespace: Namespace where the Cluster resource lives
            organization: Organization that owns the cluster
            context: Kubernetes context (uses current if not specified)
        """
        try:
            client = _cluster_client(context)
            target = _find_cluster(client, name, namespace, organization)

            details = target.summary()
            details["type"] = "Workload" if client.is_workload_cluster(target) else "Management"
            spec: Dict[str, Any] = {}
            if target.spec.infrastructure_ref is not None:
                ref = target.spec.infrastructure_ref
                spec["infrastructure"] = f"{ref.kind}/{ref.name}"
            if target.spec.control_plane_ref is not None:
                ref = target.spec.control_plane_ref
                spec["controlPlane"] = f"{ref.kind}/{ref.name}"
            if target.spec.cluster_network is not None:
                spec["network"] = target.spec.cluster_network.to_dict()
            details["spec"] = spec
            details["status"] = {
                "phase": target.status.phase,
                "infrastructureReady": target.status.infrastructure_ready,
                "controlPlaneReady": target.status.control_plane_ready,
                "conditions": _conditions(target),
            }

            try:
                client.get_kubeconfig(target)
                details["kubeconfig"] = {"available": True, "secret": f"{target.name}-kubeconfig"}
            except (GiantSwarmAPIError, LookupError) as e:
                logger.debug(f"No kubeconfig for cluster {target.name}: {e}")
                details["kubeconfig"] = {"available": False}

            details["workloadNamespace"] = cluster_namespace(target.name)
            details["labels"] = dict(target.labels)

            return {
                "success": True,
                "context": context or "current",
                "cluster": details,
            }
        except Exception as e:
            return error_result("getting cluster", e, hint=CLUSTER_HINT)
