"""Organization and namespace discovery tools."""

import logging
from typing import Any, Dict

from mcp.types import ToolAnnotations

from giantswarm_apps_mcp.errors import GiantSwarmAPIError
from giantswarm_apps_mcp.k8s_config import get_core_v1_client
from giantswarm_apps_mcp.organization import (
    list_organization_namespaces,
    namespace_info,
    namespaces_by_organization,
    organization_from_namespace,
    validate_namespace_access,
)
from giantswarm_apps_mcp.tools.common import error_result

logger = logging.getLogger("mcp-server")


def _access(core_api, namespace: str) -> Dict[str, Any]:
    try:
        validate_namespace_access(core_api, namespace)
    except GiantSwarmAPIError as e:
        return {"namespace": namespace, "access": False, "reason": str(e)}
    return {"namespace": namespace, "access": True}


def register_organization_tools(server, non_destructive: bool):
    """Register organization tools; all of them are read-only."""

    @server.tool(
        annotations=ToolAnnotations(
            title="List Organizations",
            readOnlyHint=True,
        ),
    )
    def organization_list(
        detailed: bool = False,
        context: str = ""
    ) -> Dict[str, Any]:
        """List all organizations in the cluster.

        Args:
            detailed: Include namespace labels and related namespaces
            context: Kubernetes context (uses current if not specified)
        """
        try:
            core_api = get_core_v1_client(context)
            organizations = []
            for ns in list_organization_namespaces(core_api):
                try:
                    org = organization_from_namespace(ns)
                except ValueError as e:
                    logger.debug(f"Skipping labelled namespace {ns}: {e}")
                    continue
                item: Dict[str, Any] = {"name": org, "namespace": ns}
                if detailed:
                    try:
                        item["labels"] = namespace_info(core_api, ns).labels
                    except GiantSwarmAPIError as e:
                        logger.debug(f"No details for namespace {ns}: {e}")
                    try:
                        item["relatedNamespaces"] = [
                            related for related in namespaces_by_organization(core_api, org)
                            if related != ns
                        ]
                    except GiantSwarmAPIError as e:
                        logger.debug(f"No related namespaces for {org}: {e}")
                organizations.append(item)

            return {
                "success": True,
                "context": context or "current",
                "count": len(organizations),
                "organizations": organizations,
            }
        except Exception as e:
            return error_result("listing organizations", e)

    @server.tool(
        annotations=ToolAnnotations(
            title="List Organization Namespaces",
            readOnlyHint=True,
        ),
    )
    def organization_namespaces(
        organization: str,
        include_details: bool = False,
        context: str = ""
    ) -> Dict[str, Any]:
        """List all namespaces belonging to an organization.

        Args:
            organization: Organization name (e.g., "giantswarm")
            include_details: Include namespace type and cluster ID
            context: Kubernetes context (uses current if not specified)
        """
        try:
            core_api = get_core_v1_client(context)
            namespaces = []
            for ns in namespaces_by_organization(core_api, organization):
                if not include_details:
                    namespaces.append({"name": ns})
                    continue
                try:
                    info = namespace_info(core_api, ns)
                except GiantSwarmAPIError as e:
                    logger.debug(f"No details for namespace {ns}: {e}")
                    namespaces.append({"name": ns})
                    continue
                namespaces.append({"name": ns, "type": info.type, "clusterID": info.cluster_id})

            return {
                "success": True,
                "context": context or "current",
                "organization": organization,
                "count": len(namespaces),
                "namespaces": namespaces,
            }
        except Exception as e:
            return error_result("listing organization namespaces", e)

    @server.tool(
        annotations=ToolAnnotations(
            title="Get Namespace Organization Info",
            readOnlyHint=True,
        ),
    )
    def organization_info(
        namespace: str,
        context: str = ""
    ) -> Dict[str, Any]:
        """Get information about a namespace and its organization context.

        Args:
            namespace: Namespace name
            context: Kubernetes context (uses current if not specified)
        """
        try:
            core_api = get_core_v1_client(context)
            info = namespace_info(core_api, namespace).to_dict()
            info["access"] = _access(core_api, namespace)["access"]
            return {
                "success": True,
                "context": context or "current",
                "namespace": info,
            }
        except Exception as e:
            return error_result("getting namespace info", e, hint="Use organization_namespaces to find namespaces")

    @server.tool(
        annotations=ToolAnnotations(
            title="Validate Organization Access",
            readOnlyHint=True,
        ),
    )
    def organization_validate_access(
        namespace: str = "",
        organization: str = "",
        context: str = ""
    ) -> Dict[str, Any]:
        """Validate access to a namespace or to every namespace of an organization.

        Args:
            namespace: Namespace to validate access to
            organization: Organization to validate access to
            context: Kubernetes context (uses current if not specified)
        """
        try:
            if not namespace and not organization:
                raise ValueError("either namespace or organization must be specified")

            core_api = get_core_v1_client(context)
            result: Dict[str, Any] = {"success": True, "context": context or "current"}
            if namespace:
                result["namespace"] = _access(core_api, namespace)
            if organization:
                try:
                    org_namespaces = namespaces_by_organization(core_api, organization)
                except GiantSwarmAPIError as e:
                    logger.warning(f"Could not list namespaces of organization {organization}: {e}")
                    result["organization"] = {"name": organization, "error": str(e)}
                    return result
                checks = [_access(core_api, ns) for ns in org_namespaces]
                result["organization"] = {
                    "name": organization,
                    "namespaces": checks,
                    "accessible": sum(1 for check in checks if check["access"]),
                    "total": len(checks),
                }
            return result
        except Exception as e:
            return error_result("validating access", e)
