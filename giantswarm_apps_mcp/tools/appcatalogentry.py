"""AppCatalogEntry browsing tools: what can be installed from which catalog."""

import logging
from typing import Any, Dict

from mcp.types import ToolAnnotations

from giantswarm_apps_mcp.appcatalogentry import (
    AppCatalogEntry,
    AppCatalogEntryClient,
    filter_by_restrictions,
    group_by_app,
    sort_by_date,
)
from giantswarm_apps_mcp.k8s_config import get_custom_objects_client
from giantswarm_apps_mcp.tools.common import error_result
from giantswarm_apps_mcp.unstructured import format_rfc3339

logger = logging.getLogger("mcp-server")


def _entry_details(entry: AppCatalogEntry) -> Dict[str, Any]:
    chart = entry.spec.chart
    details: Dict[str, Any] = {
        "name": entry.name,
        "namespace": entry.namespace,
        "app": {"name": entry.spec.app_name, "version": entry.spec.app_version},
        "catalog": {"name": entry.spec.catalog_name, "namespace": entry.spec.catalog_namespace},
        "chart": chart.to_dict(),
        "created": format_rfc3339(entry.spec.date_created) if entry.spec.date_created else None,
        "updated": format_rfc3339(entry.spec.date_updated) if entry.spec.date_updated else None,
    }
    if entry.spec.restrictions is not None:
        details["restrictions"] = entry.spec.restrictions.to_dict()
    return details


def register_appcatalogentry_tools(server, non_destructive: bool):
    """Register AppCatalogEntry tools; all of them are read-only."""

    @server.tool(
        annotations=ToolAnnotations(
            title="List App Catalog Entries",
            readOnlyHint=True,
        ),
    )
    def appcatalogentry_list(
        namespace: str = "",
        catalog: str = "",
        catalog_namespace: str = "",
        labels: str = "",
        cluster_apps: bool = False,
        latest_only: bool = False,
        context: str = ""
    ) -> Dict[str, Any]:
        """List app catalog entries.

        Args:
            namespace: Namespace to list entries from (empty for all namespaces)
            catalog: Filter by catalog name
            catalog_namespace: Catalog namespace (used with catalog)
            labels: Label selector (e.g., "app.kubernetes.io/name=nginx")
            cluster_apps: Show only cluster-wide (cluster singleton) apps
            latest_only: Show only the most recently updated entry of each app
            context: Kubernetes context (uses current if not specified)
        """
        try:
            client = AppCatalogEntryClient(get_custom_objects_client(context))

            if catalog:
                entries = client.list_by_catalog(catalog, catalog_namespace)
            elif labels and not namespace:
                entries = client.filter_by_labels(labels)
            else:
                entries = client.list(namespace, labels)

            if cluster_apps:
                entries = filter_by_restrictions(entries, True)
            if latest_only:
                entries = [sort_by_date(versions)[0] for versions in group_by_app(entries).values() if versions]

            items = []
            for entry in entries:
                item = entry.summary()
                item["description"] = entry.spec.chart.description
                items.append(item)

            return {
                "success": True,
                "context": context or "current",
                "count": len(items),
                "items": items,
            }
        except Exception as e:
            return error_result("listing app catalog entries", e)

    @server.tool(
        annotations=ToolAnnotations(
            title="Get App Catalog Entry",
            readOnlyHint=True,
        ),
    )
    def appcatalogentry_get(
        name: str,
        namespace: str,
        context: str = ""
    ) -> Dict[str, Any]:
        """Get detailed information about a specific app catalog entry.

        Args:
            name: Name of the app catalog entry
            namespace: Namespace of the app catalog entry
            context: Kubernetes context (uses current if not specified)
        """
        try:
            entry = AppCatalogEntryClient(get_custom_objects_client(context)).get(namespace, name)
            return {
                "success": True,
                "context": context or "current",
                "entry": _entry_details(entry),
            }
        except Exception as e:
            return error_result(
                "getting app catalog entry", e,
                hint="Use appcatalogentry_list or appcatalogentry_search to find entries",
            )

    @server.tool(
        annotations=ToolAnnotations(
            title="Search App Catalog",
            readOnlyHint=True,
        ),
    )
    def appcatalogentry_search(
        query: str,
        cluster_apps: bool = False,
        context: str = ""
    ) -> Dict[str, Any]:
        """Search for apps in the catalogs.

        Matches app name, chart name, description and keywords, case-insensitively.
        Results are grouped per app with the newest entry first.

        Args:
            query: Search text (e.g., "ingress", "monitoring")
            cluster_apps: Show only cluster-wide apps
            context: Kubernetes context (uses current if not specified)
        """
        try:
            results = AppCatalogEntryClient(get_custom_objects_client(context)).search(query)
            if cluster_apps:
                results = filter_by_restrictions(results, True)

            apps = []
            for app_name, versions in group_by_app(results).items():
                ordered = sort_by_date(versions)
                latest = ordered[0]
                apps.append({
                    "app": app_name,
                    "latest": latest.latest_version(),
                    "appVersion": latest.chart_app_version(),
                    "description": latest.spec.chart.description,
                    "catalog": f"{latest.spec.catalog_namespace}/{latest.spec.catalog_name}",
                    "clusterApp": latest.is_cluster_app(),
                    "otherVersions": [entry.latest_version() for entry in ordered[1:]],
                })

            return {
                "success": True,
                "context": context or "current",
                "query": query,
                "count": len(results),
                "apps": apps,
            }
        except Exception as e:
            return error_result("searching app catalog entries", e)

    @server.tool(
        annotations=ToolAnnotations(
            title="List App Versions",
            readOnlyHint=True,
        ),
    )
    def appcatalogentry_versions(
        app: str,
        context: str = ""
    ) -> Dict[str, Any]:
        """List all available versions of an app, newest first.

        Args:
            app: App name to get versions for
            context: Kubernetes context (uses current if not specified)
        """
        try:
            entries = AppCatalogEntryClient(get_custom_objects_client(context)).get_versions(app)

            versions = []
            for entry in sort_by_date(entries):
                changed = entry.last_changed()
                versions.append({
                    "version": entry.latest_version(),
                    "appVersion": entry.chart_app_version(),
                    "entry": f"{entry.namespace}/{entry.name}",
                    "catalog": f"{entry.spec.catalog_namespace}/{entry.spec.catalog_name}",
                    "date": changed.strftime("%Y-%m-%d") if changed else None,
                })

            return {
                "success": True,
                "context": context or "current",
                "app": app,
                "count": len(versions),
                "latest": versions[0]["version"] if versions else None,
                "versions": versions,
            }
        except Exception as e:
            return error_result("listing app versions", e)
