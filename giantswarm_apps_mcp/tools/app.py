"""Giant Swarm App management tools.

Tools:
    app_list    - List apps in a namespace, an organization or everywhere
    app_get     - Show spec, configuration references and release status
    app_create  - Create an App from a catalog entry
    app_update  - Change version or configuration references
    app_delete  - Delete an App
"""

import logging
from typing import Any, Dict

from mcp.types import ToolAnnotations

from giantswarm_apps_mcp.app import (
    App,
    AppClient,
    AppSpec,
    ConfigRef,
    ObjectRef,
    filter_by_catalog,
    filter_by_status,
)
from giantswarm_apps_mcp.errors import GiantSwarmAPIError
from giantswarm_apps_mcp.k8s_config import get_core_v1_client, get_custom_objects_client
from giantswarm_apps_mcp.organization import organization_namespace
from giantswarm_apps_mcp.tools.common import error_result

logger = logging.getLogger("mcp-server")


def _app_client(context: str) -> AppClient:
    return AppClient(get_custom_objects_client(context), get_core_v1_client(context))


def _config_ref_dict(ref: ConfigRef) -> Dict[str, str]:
    out = {}
    if ref.config_map is not None:
        out["configMap"] = f"{ref.config_map.namespace}/{ref.config_map.name}"
    if ref.secret is not None:
        out["secret"] = f"{ref.secret.namespace}/{ref.secret.name}"
    return out


def _app_details(app: App) -> Dict[str, Any]:
    details: Dict[str, Any] = {
        "name": app.name,
        "namespace": app.namespace,
        "spec": {
            "catalog": app.spec.catalog,
            "app": app.spec.name,
            "version": app.spec.version,
            "targetNamespace": app.spec.namespace,
            "inCluster": app.spec.in_cluster,
        },
        "status": {
            "appVersion": app.status.app_version,
            "chartVersion": app.status.version,
            "releaseStatus": app.status.release_status,
            "lastDeployed": app.status.last_deployed or None,
        },
    }
    if app.spec.config is not None:
        details["config"] = _config_ref_dict(app.spec.config)
    if app.spec.user_config is not None:
        details["userConfig"] = _config_ref_dict(app.spec.user_config)
    return details


def register_app_tools(server, non_destructive: bool):
    """Register App list/get and, unless non-destructive, create/update/delete tools."""

    @server.tool(
        annotations=ToolAnnotations(
            title="List Giant Swarm Apps",
            readOnlyHint=True,
        ),
    )
    def app_list(
        namespace: str = "",
        organization: str = "",
        labels: str = "",
        status: str = "",
        catalog: str = "",
        all_orgs: bool = False,
        include_workload_clusters: bool = False,
        context: str = ""
    ) -> Dict[str, Any]:
        """List Giant Swarm apps with optional filtering.

        The organization wins over the namespace. With all_orgs and no
        namespace, every organization namespace is listed; namespaces that
        cannot be read are skipped.

        Args:
            namespace: Namespace to list apps from (empty for all namespaces)
            organization: Organization to list apps from (e.g., "giantswarm")
            labels: Label selector (e.g., "app=nginx,env=prod")
            status: Filter by release status (deployed, failed, pending, ...)
            catalog: Filter by catalog name
            all_orgs: List apps from all organization namespaces
            include_workload_clusters: With organization, also list its workload cluster namespaces
            context: Kubernetes context (uses current if not specified)
        """
        try:
            app_client = _app_client(context)

            if organization:
                if include_workload_clusters:
                    apps = app_client.list_by_organization(organization, labels)
                else:
                    apps = app_client.list(organization_namespace(organization), labels)
                scope = f"organization {organization}"
            elif all_orgs and not namespace:
                apps = []
                for ns in app_client.get_organization_namespaces():
                    try:
                        apps.extend(app_client.list(ns, labels))
                    except GiantSwarmAPIError as e:
                        logger.debug(f"Skipping namespace {ns}: {e}")
                scope = "all organizations"
            else:
                apps = app_client.list(namespace, labels)
                scope = namespace or "all"

            apps = filter_by_status(apps, status)
            apps = filter_by_catalog(apps, catalog)

            items = []
            for app in apps:
                item = app.summary()
                if app.status.last_deployed:
                    item["lastDeployed"] = app.status.last_deployed
                items.append(item)

            return {
                "success": True,
                "context": context or "current",
                "namespace": scope,
                "count": len(items),
                "items": items,
            }
        except Exception as e:
            return error_result("listing apps", e)

    @server.tool(
        annotations=ToolAnnotations(
            title="Get Giant Swarm App",
            readOnlyHint=True,
        ),
    )
    def app_get(
        name: str,
        namespace: str,
        context: str = ""
    ) -> Dict[str, Any]:
        """Get detailed information about a specific app.

        Args:
            name: Name of the App resource
            namespace: Namespace of the App resource
            context: Kubernetes context (uses current if not specified)
        """
        try:
            app = _app_client(context).get(namespace, name)
            return {
                "success": True,
                "context": context or "current",
                "app": _app_details(app),
            }
        except Exception as e:
            return error_result("getting app", e, hint="Use app_list to find available apps")

    if non_destructive:
        return

    @server.tool(
        annotations=ToolAnnotations(
            title="Create Giant Swarm App",
            destructiveHint=True,
        ),
    )
    def app_create(
        name: str,
        namespace: str,
        catalog: str,
        app: str,
        version: str,
        target_namespace: str = "",
        in_cluster: bool = True,
        config_name: str = "",
        user_config_name: str = "",
        context: str = ""
    ) -> Dict[str, Any]:
        """Create a new Giant Swarm app.

        Args:
            name: Name for the App resource
            namespace: Namespace to create the App in
            catalog: Catalog name (e.g., "giantswarm")
            app: App name from the catalog (e.g., "nginx-ingress-controller")
            version: App version
            target_namespace: Namespace the app is installed into (defaults to the app name)
            in_cluster: Deploy to the management cluster
            config_name: ConfigMap holding the app configuration
            user_config_name: ConfigMap holding the user configuration
            context: Kubernetes context (uses current if not specified)
        """
        try:
            new_app = App(
                name=name,
                namespace=namespace,
                spec=AppSpec(
                    catalog=catalog,
                    name=app,
                    namespace=target_namespace or app,
                    version=version,
                    in_cluster=in_cluster,
                ),
            )
            if config_name:
                new_app.spec.config = ConfigRef(config_map=ObjectRef(config_name, namespace))
            if user_config_name:
                new_app.spec.user_config = ConfigRef(config_map=ObjectRef(user_config_name, namespace))

            created = _app_client(context).create(new_app)
            return {
                "success": True,
                "context": context or "current",
                "message": f"Successfully created app {created.namespace}/{created.name}",
                "app": created.summary(),
            }
        except Exception as e:
            return error_result("creating app", e)

    @server.tool(
        annotations=ToolAnnotations(
            title="Update Giant Swarm App",
            destructiveHint=True,
        ),
    )
    def app_update(
        name: str,
        namespace: str,
        version: str = "",
        config_name: str = "",
        user_config_name: str = "",
        context: str = ""
    ) -> Dict[str, Any]:
        """Update an existing Giant Swarm app.

        Only the arguments given are changed.

        Args:
            name: Name of the App resource
            namespace: Namespace of the App resource
            version: New version to update to
            config_name: New configuration ConfigMap name
            user_config_name: New user configuration ConfigMap name
            context: Kubernetes context (uses current if not specified)
        """
        try:
            app_client = _app_client(context)
            current = app_client.get(namespace, name)

            if version:
                current.spec.version = version
            if config_name:
                if current.spec.config is None:
                    current.spec.config = ConfigRef()
                current.spec.config.config_map = ObjectRef(config_name, namespace)
            if user_config_name:
                if current.spec.user_config is None:
                    current.spec.user_config = ConfigRef()
                current.spec.user_config.config_map = ObjectRef(user_config_name, namespace)

            updated = app_client.update(current)
            return {
                "success": True,
                "context": context or "current",
                "message": f"Successfully updated app {updated.namespace}/{updated.name}",
                "app": updated.summary(),
            }
        except Exception as e:
            return error_result("updating app", e, hint="Use app_list to find available apps")

    @server.tool(
        annotations=ToolAnnotations(
            title="Delete Giant Swarm App",
            destructiveHint=True,
        ),
    )
    def app_delete(
        name: str,
        namespace: str,
        context: str = ""
    ) -> Dict[str, Any]:
        """Delete a Giant Swarm app.

        Args:
            name: Name of the App resource
            namespace: Namespace of the App resource
            context: Kubernetes context (uses current if not specified)
        """
        try:
            _app_client(context).delete(namespace, name)
            return {
                "success": True,
                "context": context or "current",
                "message": f"Successfully deleted app {namespace}/{name}",
            }
        except Exception as e:
            return error_result("deleting app", e, hint="Use app_list to find available apps")
