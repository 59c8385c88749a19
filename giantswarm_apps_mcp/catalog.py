"""Giant Swarm Catalog resources."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from kubernetes import client

from giantswarm_apps_mcp.app import ConfigRef
from giantswarm_apps_mcp.dynamic import CATALOG_GVR, DynamicClient, resource_version
from giantswarm_apps_mcp.errors import GiantSwarmAPIError
from giantswarm_apps_mcp.unstructured import get_map, get_str, get_str_map, split_object

logger = logging.getLogger("mcp-server")

CATALOG_TYPE_LABEL = "application.giantswarm.io/catalog-type"
CATALOG_VISIBILITY_LABEL = "application.giantswarm.io/catalog-visibility"


@dataclass
class Repository:
    type: str = ""
    url: str = ""

    def to_dict(self) -> Dict[str, str]:
        # the CRD spells it URL
        return {"type": self.type, "URL": self.url}


@dataclass
class CatalogSpec:
    title: str = ""
    description: str = ""
    logo_url: str = ""
    storage: Repository = field(default_factory=Repository)
    repositories: List[Repository] = field(default_factory=list)
    config: Optional[ConfigRef] = None


@dataclass
class Catalog:
    name: str
    namespace: str
    labels: Dict[str, str] = field(default_factory=dict)
    creation_timestamp: str = ""
    spec: CatalogSpec = field(default_factory=CatalogSpec)

    def catalog_type(self) -> str:
        return self.labels.get(CATALOG_TYPE_LABEL, "unknown")

    def catalog_visibility(self) -> str:
        return self.labels.get(CATALOG_VISIBILITY_LABEL, "unknown")

    @classmethod
    def from_unstructured(cls, obj: Dict[str, Any]) -> "Catalog":
        metadata, spec, _ = split_object(obj, "Catalog")
        catalog = cls(
            name=get_str(metadata, "name"),
            namespace=get_str(metadata, "namespace"),
            labels=get_str_map(metadata, "labels"),
            creation_timestamp=get_str(metadata, "creationTimestamp"),
        )
        catalog.spec.title = get_str(spec, "title")
        catalog.spec.description = get_str(spec, "description")
        catalog.spec.logo_url = get_str(spec, "logoURL")

        storage = get_map(spec, "storage")
        if storage is not None:
            catalog.spec.storage = Repository(get_str(storage, "type"), get_str(storage, "URL"))

        repositories = spec.get("repositories")
        if isinstance(repositories, list):
            catalog.spec.repositories = [
                Repository(get_str(repo, "type"), get_str(repo, "URL"))
                for repo in repositories
                if isinstance(repo, dict)
            ]

        config = get_map(spec, "config")
        if config is not None:
            catalog.spec.config = ConfigRef.from_dict(config)
        return catalog

    def to_unstructured(self) -> Dict[str, Any]:
        spec: Dict[str, Any] = {
            "title": self.spec.title,
            "description": self.spec.description,
            "logoURL": self.spec.logo_url,
            "storage": self.spec.storage.to_dict(),
        }
        if self.spec.repositories:
            spec["repositories"] = [repo.to_dict() for repo in self.spec.repositories]
        if self.spec.config is not None:
            spec["config"] = self.spec.config.to_dict()
        return {
            "apiVersion": CATALOG_GVR.api_version,
            "kind": "Catalog",
            "metadata": {
                "name": self.name,
                "namespace": self.namespace,
                "labels": dict(self.labels),
            },
            "spec": spec,
        }

    def summary(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "namespace": self.namespace,
            "title": self.spec.title,
            "type": self.catalog_type(),
            "visibility": self.catalog_visibility(),
            "url": self.spec.storage.url,
        }


class CatalogClient:
    def __init__(self, custom_api: client.CustomObjectsApi):
        self.dynamic = DynamicClient(custom_api)

    def list(self, namespace: str = "") -> List[Catalog]:
        try:
            items = self.dynamic.list(CATALOG_GVR, namespace)
        except Exception as e:
            raise GiantSwarmAPIError("list catalogs in", namespace or "all namespaces", e) from e

        catalogs: List[Catalog] = []
        for item in items:
            try:
                catalogs.append(Catalog.from_unstructured(item))
            except ValueError as e:
                logger.debug(f"Skipping undecodable catalog: {e}")
        return catalogs

    def get(self, namespace: str, name: str) -> Catalog:
        try:
            obj = self.dynamic.get(CATALOG_GVR, namespace, name)
        except Exception as e:
            raise GiantSwarmAPIError("get catalog", f"{namespace}/{name}", e) from e
        return Catalog.from_unstructured(obj)

    def create(self, catalog: Catalog) -> Catalog:
        try:
            created = self.dynamic.create(CATALOG_GVR, catalog.namespace, catalog.to_unstructured())
        except Exception as e:
            raise GiantSwarmAPIError("create catalog", f"{catalog.namespace}/{catalog.name}", e) from e
        return Catalog.from_unstructured(created)

    def update(self, catalog: Catalog) -> Catalog:
        identity = f"{catalog.namespace}/{catalog.name}"
        try:
            current = self.dynamic.get(CATALOG_GVR, catalog.namespace, catalog.name)
        except Exception as e:
            raise GiantSwarmAPIError("get catalog", identity, e) from e

        body = catalog.to_unstructured()
        body["metadata"]["resourceVersion"] = resource_version(current)
        try:
            updated = self.dynamic.replace(CATALOG_GVR, catalog.namespace, catalog.name, body)
        except Exception as e:
            raise GiantSwarmAPIError("update catalog", identity, e) from e
        return Catalog.from_unstructured(updated)

    def delete(self, namespace: str, name: str) -> None:
        try:
            self.dynamic.delete(CATALOG_GVR, namespace, name)
        except Exception as e:
            raise GiantSwarmAPIError("delete catalog", f"{namespace}/{name}", e) from e


def filter_by_type(catalogs: List[Catalog], catalog_type: str) -> List[Catalog]:
    if not catalog_type:
        return catalogs
    return [c for c in catalogs if c.catalog_type() == catalog_type]


def filter_by_visibility(catalogs: List[Catalog], visibility: str) -> List[Catalog]:
    if not visibility:
        return catalogs
    return [c for c in catalogs if c.catalog_visibility() == visibility]


def validate_repository_url(url: str) -> None:
    if not url:
        raise ValueError("repository URL cannot be empty")
