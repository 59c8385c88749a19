"""Giant Swarm Catalog management tools."""

import logging
from typing import Any, Dict

from mcp.types import ToolAnnotations

from giantswarm_apps_mcp.catalog import (
    CATALOG_TYPE_LABEL,
    CATALOG_VISIBILITY_LABEL,
    Catalog,
    CatalogClient,
    CatalogSpec,
    Repository,
    filter_by_type,
    filter_by_visibility,
    validate_repository_url,
)
from giantswarm_apps_mcp.errors import GiantSwarmAPIError
from giantswarm_apps_mcp.k8s_config import get_core_v1_client, get_custom_objects_client
from giantswarm_apps_mcp.organization import list_organization_namespaces, organization_namespace
from giantswarm_apps_mcp.tools.common import error_result

logger = logging.getLogger("mcp-server")


def _validated_url(url: str) -> str:
    try:
        validate_repository_url(url)
    except ValueError as e:
        raise ValueError(f"invalid storage URL: {e}") from e
    return url


def _catalog_details(catalog: Catalog) -> Dict[str, Any]:
    details = catalog.summary()
    details.update({
        "description": catalog.spec.description,
        "logoURL": catalog.spec.logo_url or None,
        "storage": catalog.spec.storage.to_dict(),
        "repositories": [repo.to_dict() for repo in catalog.spec.repositories],
        "labels": dict(catalog.labels),
    })
    if catalog.spec.config is not None:
        details["config"] = catalog.spec.config.to_dict()
    return details


def register_catalog_tools(server, non_destructive: bool):
    """Register Catalog tools."""

    @server.tool(
        annotations=ToolAnnotations(
            title="List Giant Swarm Catalogs",
            readOnlyHint=True,
        ),
    )
    def catalog_list(
        namespace: str = "",
        organization: str = "",
        type: str = "",
        visibility: str = "",
        all_orgs: bool = False,
        context: str = ""
    ) -> Dict[str, Any]:
        """List Giant Swarm catalogs.

        Args:
            namespace: Namespace to list catalogs from (empty for all namespaces)
            organization: Organization to list catalogs from (e.g., "giantswarm")
            type: Filter by catalog type (stable, testing, community)
            visibility: Filter by visibility (public, private)
            all_orgs: List catalogs from all organization namespaces
            context: Kubernetes context (uses current if not specified)
        """
        try:
            catalog_client = CatalogClient(get_custom_objects_client(context))

            if organization:
                catalogs = catalog_client.list(organization_namespace(organization))
            elif all_orgs and not namespace:
                catalogs = []
                for ns in list_organization_namespaces(get_core_v1_client(context)):
                    try:
                        catalogs.extend(catalog_client.list(ns))
                    except GiantSwarmAPIError as e:
                        logger.debug(f"Skipping namespace {ns}: {e}")
            else:
                catalogs = catalog_client.list(namespace)

            catalogs = filter_by_type(catalogs, type)
            catalogs = filter_by_visibility(catalogs, visibility)

            items = []
            for catalog in catalogs:
                item = catalog.summary()
                item["description"] = catalog.spec.description
                item["repositories"] = [repo.to_dict() for repo in catalog.spec.repositories]
                items.append(item)

            return {
                "success": True,
                "context": context or "current",
                "count": len(items),
                "items": items,
            }
        except Exception as e:
            return error_result("listing catalogs", e)

    @server.tool(
        annotations=ToolAnnotations(
            title="Get Giant Swarm Catalog",
            readOnlyHint=True,
        ),
    )
    def catalog_get(
        name: str,
        namespace: str,
        context: str = ""
    ) -> Dict[str, Any]:
        """Get detailed information about a specific catalog.

        Args:
            name: Name of the catalog
            namespace: Namespace of the catalog
            context: Kubernetes context (uses current if not specified)
        """
        try:
            catalog = CatalogClient(get_custom_objects_client(context)).get(namespace, name)
            return {
                "success": True,
                "context": context or "current",
                "catalog": _catalog_details(catalog),
            }
        except Exception as e:
            return error_result("getting catalog", e, hint="Use catalog_list to find available catalogs")

    if non_destructive:
        return

    @server.tool(
        annotations=ToolAnnotations(
            title="Create Giant Swarm Catalog",
            destructiveHint=True,
        ),
    )
    def catalog_create(
        name: str,
        namespace: str,
        title: str,
        description: str,
        storage_url: str,
        storage_type: str = "helm",
        logo_url: str = "",
        type: str = "",
        visibility: str = "",
        oci_url: str = "",
        context: str = ""
    ) -> Dict[str, Any]:
        """Create a new Giant Swarm catalog.

        The storage URL doubles as the first repository; oci_url adds a
        second, OCI-typed repository.

        Args:
            name: Name for the catalog
            namespace: Namespace to create the catalog in
            title: Human-readable title
            description: Catalog description
            storage_url: URL of the Helm repository
            storage_type: Storage type (helm or oci)
            logo_url: URL of the catalog logo
            type: Catalog type label (stable, testing, community)
            visibility: Catalog visibility label (public, private)
            oci_url: Additional OCI registry URL
            context: Kubernetes context (uses current if not specified)
        """
        try:
            storage_type = storage_type or "helm"
            url = _validated_url(storage_url)

            catalog = Catalog(
                name=name,
                namespace=namespace,
                spec=CatalogSpec(
                    title=title,
                    description=description,
                    logo_url=logo_url,
                    storage=Repository(storage_type, url),
                    repositories=[Repository(storage_type, url)],
                ),
            )
            if oci_url:
                catalog.spec.repositories.append(Repository("oci", oci_url))
            if type:
                catalog.labels[CATALOG_TYPE_LABEL] = type
            if visibility:
                catalog.labels[CATALOG_VISIBILITY_LABEL] = visibility

            created = CatalogClient(get_custom_objects_client(context)).create(catalog)
            return {
                "success": True,
                "context": context or "current",
                "message": f"Successfully created catalog {created.namespace}/{created.name}",
                "catalog": created.summary(),
            }
        except Exception as e:
            return error_result("creating catalog", e)

    @server.tool(
        annotations=ToolAnnotations(
            title="Update Giant Swarm Catalog",
            destructiveHint=True,
        ),
    )
    def catalog_update(
        name: str,
        namespace: str,
        title: str = "",
        description: str = "",
        storage_url: str = "",
        logo_url: str = "",
        type: str = "",
        visibility: str = "",
        context: str = ""
    ) -> Dict[str, Any]:
        """Update an existing Giant Swarm catalog.

        A new storage URL also replaces the URL of the first repository.

        Args:
            name: Name of the catalog
            namespace: Namespace of the catalog
            title: New title
            description: New description
            storage_url: New storage URL
            logo_url: New logo URL
            type: New catalog type label
            visibility: New visibility label
            context: Kubernetes context (uses current if not specified)
        """
        try:
            catalog_client = CatalogClient(get_custom_objects_client(context))
            current = catalog_client.get(namespace, name)

            if title:
                current.spec.title = title
            if description:
                current.spec.description = description
            if storage_url:
                current.spec.storage.url = _validated_url(storage_url)
                if current.spec.repositories:
                    current.spec.repositories[0].url = storage_url
            if logo_url:
                current.spec.logo_url = logo_url
            if type:
                current.labels[CATALOG_TYPE_LABEL] = type
            if visibility:
                current.labels[CATALOG_VISIBILITY_LABEL] = visibility

            updated = catalog_client.update(current)
            return {
                "success": True,
                "context": context or "current",
                "message": f"Successfully updated catalog {updated.namespace}/{updated.name}",
                "catalog": updated.summary(),
            }
        except Exception as e:
            return error_result("updating catalog", e, hint="Use catalog_list to find available catalogs")

    @server.tool(
        annotations=ToolAnnotations(
            title="Delete Giant Swarm Catalog",
            destructiveHint=True,
        ),
    )
    def catalog_delete(
        name: str,
        namespace: str,
        context: str = ""
    ) -> Dict[str, Any]:
        """Delete a Giant Swarm catalog.

        Args:
            name: Name of the catalog
            namespace: Namespace of the catalog
            context: Kubernetes context (uses current if not specified)
        """
        try:
            CatalogClient(get_custom_objects_client(context)).delete(namespace, name)
            return {
                "success": True,
                "context": context or "current",
                "message": f"Successfully deleted catalog {namespace}/{name}",
            }
        except Exception as e:
            return error_result("deleting catalog", e, hint="Use catalog_list to find available catalogs")
