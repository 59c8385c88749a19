"""Fetch logic behind the app://, catalog://, config://, schema:// and changelog:// resources."""

import logging
from typing import Any, Dict, List, Optional, Tuple

import yaml
from kubernetes import client

from giantswarm_apps_mcp.app import AppClient
from giantswarm_apps_mcp.appcatalogentry import AppCatalogEntry, AppCatalogEntryClient
from giantswarm_apps_mcp.appconfig import CONFIG_TYPE_CONFIGMAP, CONFIG_TYPE_SECRET, ConfigClient
from giantswarm_apps_mcp.catalog import CatalogClient
from giantswarm_apps_mcp.errors import GiantSwarmAPIError, ResourceNotFoundError
from giantswarm_apps_mcp.resources.uri import (
    RESOURCE_TYPE_APP,
    RESOURCE_TYPE_CATALOG,
    RESOURCE_TYPE_CHANGELOG,
    RESOURCE_TYPE_CONFIG,
    RESOURCE_TYPE_SCHEMA,
    ResourceURI,
)

logger = logging.getLogger("mcp-server")

MIME_TYPE_JSON = "application/json"


def _metadata(uri: ResourceURI, name: str, description: str) -> Dict[str, str]:
    return {
        "uri": str(uri),
        "name": name,
        "description": description,
        "mimeType": MIME_TYPE_JSON,
    }


def _parse_value(raw: str) -> Any:
    """YAML (and therefore JSON) values are decoded; anything else stays a string."""
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def _major(version: str) -> str:
    return version.split(".")[0].lstrip("v")


def is_breaking_change(new_version: str, old_version: str) -> bool:
    """True when the major version differs (``v`` prefixes ignored)."""
    return _major(new_version) != _major(old_version)


def _entry_coordinates(entry: AppCatalogEntry) -> Optional[Tuple[str, str]]:
    """(catalog, app) an entry is published under.

    Falls back to splitting ``{catalog}-{app}-{version}`` names when the spec
    does not carry the catalog and app names.
    """
    if entry.spec.catalog_name and entry.display_name():
        return entry.spec.catalog_name, entry.display_name()
    parts = entry.name.split("-")
    if len(parts) < 3:
        return None
    return parts[0], "-".join(parts[1:-1])


def _belongs_to(entry: AppCatalogEntry, catalog: str, app: str) -> bool:
    # hello-extra entries also start with {catalog}-hello-
    if entry.spec.catalog_name and entry.display_name():
        return (entry.spec.catalog_name, entry.display_name()) == (catalog, app)
    return entry.name.startswith(f"{catalog}-{app}-")


class ResourceProvider:
    def __init__(self, custom_api: client.CustomObjectsApi, core_api: client.CoreV1Api):
        self.app_client = AppClient(custom_api, core_api)
        self.catalog_client = CatalogClient(custom_api)
        self.entry_client = AppCatalogEntryClient(custom_api)
        self.config_client = ConfigClient(core_api)

    def list_resources(self) -> List[Dict[str, str]]:
        """Every addressable resource: apps and their configs, catalogs, and per-entry schemas and changelogs."""
        resources: List[Dict[str, str]] = []

        for app in self.app_client.list():
            resources.append(_metadata(
                ResourceURI(RESOURCE_TYPE_APP, namespace=app.namespace, name=app.name),
                f"App: {app.namespace}/{app.name}",
                f"Giant Swarm app {app.name} in namespace {app.namespace}",
            ))
            if app.spec.config is not None or app.spec.user_config is not None:
                resources.append(_metadata(
                    ResourceURI(RESOURCE_TYPE_CONFIG, namespace=app.namespace, name=app.name),
                    f"Config: {app.namespace}/{app.name}",
                    f"Configuration values for app {app.name}",
                ))

        for catalog in self.catalog_client.list():
            resources.append(_metadata(
                ResourceURI(RESOURCE_TYPE_CATALOG, name=catalog.name),
                f"Catalog: {catalog.name}",
                f"Giant Swarm app catalog {catalog.name}",
            ))

        seen = set()
        for entry in self.entry_client.list():
            coordinates = _entry_coordinates(entry)
            if coordinates is None:
                continue
            catalog_name, app_name = coordinates
            version = entry.spec.chart.version
            if version:
                resources.append(_metadata(
                    ResourceURI(RESOURCE_TYPE_SCHEMA, catalog=catalog_name, name=app_name, version=version),
                    f"Schema: {catalog_name}/{app_name}@{version}",
                    f"Configuration schema for {app_name} version {version}",
                ))
            if coordinates not in seen:
                seen.add(coordinates)
                resources.append(_metadata(
                    ResourceURI(RESOURCE_TYPE_CHANGELOG, catalog=catalog_name, name=app_name),
                    f"Changelog: {catalog_name}/{app_name}",
                    f"Version history for {app_name}",
                ))
        return resources

    def get_resource(self, uri: str) -> Dict[str, Any]:
        parsed = ResourceURI.parse(uri)
        handlers = {
            RESOURCE_TYPE_APP: self.get_app_resource,
            RESOURCE_TYPE_CATALOG: self.get_catalog_resource,
            RESOURCE_TYPE_CONFIG: self.get_config_resource,
            RESOURCE_TYPE_SCHEMA: self.get_schema_resource,
            RESOURCE_TYPE_CHANGELOG: self.get_changelog_resource,
        }
        return handlers[parsed.type](parsed)

    def get_app_resource(self, uri: ResourceURI) -> Dict[str, Any]:
        app = self.app_client.get(uri.namespace, uri.name)
        content: Dict[str, Any] = {
            "name": uri.name,
            "namespace": uri.namespace,
            "version": app.spec.version,
            "catalog": app.spec.catalog,
            "status": app.status.release_status,
        }

        config: Dict[str, str] = {}
        if app.spec.config is not None and app.spec.config.config_map is not None:
            try:
                config_map = self.config_client.get_config_map(uri.namespace, app.spec.config.config_map.name)
            except GiantSwarmAPIError as e:
                logger.debug(f"App config for {uri.namespace}/{uri.name} unavailable: {e}")
            else:
                config.update(config_map.data)
        if config:
            content["config"] = config
        if app.labels:
            content["metadata"] = dict(app.labels)
        if app.creation_timestamp:
            content["lastUpdated"] = app.creation_timestamp
        return content

    def get_catalog_resource(self, uri: ResourceURI) -> Dict[str, Any]:
        matches = [c for c in self.catalog_client.list() if c.name == uri.name]
        if not matches:
            raise ResourceNotFoundError(f"catalog {uri.name} not found")
        catalog = matches[0]

        content: Dict[str, Any] = {
            "name": uri.name,
            "title": catalog.spec.title,
            "description": catalog.spec.description,
            "type": catalog.catalog_type(),
            "visibility": catalog.catalog_visibility(),
            "url": catalog.spec.storage.url if catalog.spec.storage.type == "helm" else "",
            "appCount": 0,
        }
        try:
            entries = self.entry_client.list()
        except GiantSwarmAPIError as e:
            logger.debug(f"Could not count apps in catalog {uri.name}: {e}")
        else:
            content["appCount"] = sum(1 for entry in entries if entry.name.startswith(uri.name + "-"))
        if catalog.creation_timestamp:
            content["lastUpdated"] = catalog.creation_timestamp
        return content

    def get_config_resource(self, uri: ResourceURI) -> Dict[str, Any]:
        """User-supplied values of an app; a referenced Secret overrides a ConfigMap."""
        app = self.app_client.get(uri.namespace, uri.name)
        content: Dict[str, Any] = {
            "appName": uri.name,
            "namespace": uri.namespace,
            "values": {},
            "source": "",
        }

        user_config = app.spec.user_config
        if user_config is not None:
            refs = [
                (CONFIG_TYPE_CONFIGMAP, user_config.config_map),
                (CONFIG_TYPE_SECRET, user_config.secret),
            ]
            for config_type, ref in refs:
                if ref is None:
                    continue
                try:
                    config = self.config_client.get(uri.namespace, ref.name, config_type)
                except GiantSwarmAPIError as e:
                    logger.debug(f"User {config_type} for {uri.namespace}/{uri.name} unavailable: {e}")
                    continue
                if not config.data:
                    continue
                for key, raw in config.data.items():
                    content["values"][key] = _parse_value(raw)
                content["source"] = config_type

        if app.creation_timestamp:
            content["lastUpdate"] = app.creation_timestamp
        return content

    def get_schema_resource(self, uri: ResourceURI) -> Dict[str, Any]:
        """Basic values schema titled after the entry's chart.

        Catalog entries do not carry the chart's ``values.schema.json``, so the
        schema lists the ``replicaCount`` and ``image`` keys common to charts.
        """
        search_name = f"{uri.catalog}-{uri.name}-{uri.version}"
        target = None
        for entry in self.entry_client.list():
            if entry.name == search_name:
                target = entry
                break
            if _entry_coordinates(entry) == (uri.catalog, uri.name) and entry.spec.chart.version == uri.version:
                target = entry
                break
        if target is None:
            raise ResourceNotFoundError(
                f"app catalog entry not found for {uri.catalog}/{uri.name}@{uri.version}"
            )

        return {
            "appName": uri.name,
            "version": uri.version,
            "schema": {
                "type": "object",
                "title": target.spec.chart.name,
                "description": target.spec.chart.description,
                "properties": {
                    "replicaCount": {
                        "type": "integer",
                        "description": "Number of replicas",
                        "default": 1,
                    },
                    "image": {
                        "type": "object",
                        "properties": {
                            "repository": {"type": "string", "description": "Image repository"},
                            "tag": {"type": "string", "description": "Image tag"},
                        },
                    },
                },
            },
        }

    def get_changelog_resource(self, uri: ResourceURI) -> Dict[str, Any]:
        """Published versions newest first; a major version bump over the next older entry is breaking."""
        versions = []
        for entry in self.entry_client.list():
            if not _belongs_to(entry, uri.catalog, uri.name):
                continue
            created = entry.spec.date_created
            versions.append({
                "version": entry.spec.chart.version,
                "date": created.strftime("%Y-%m-%d") if created else "",
                "description": entry.spec.chart.description,
            })
        versions.sort(key=lambda v: v["date"], reverse=True)

        for index, item in enumerate(versions):
            older = versions[index + 1] if index + 1 < len(versions) else None
            item["breaking"] = older is not None and is_breaking_change(item["version"], older["version"])

        return {
            "appName": uri.name,
            "catalog": uri.catalog,
            "entries": versions,
        }
