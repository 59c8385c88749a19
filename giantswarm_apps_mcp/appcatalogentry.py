"""AppCatalogEntry resources: one entry per app version published in a catalog."""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from kubernetes import client

from giantswarm_apps_mcp.dynamic import APP_CATALOG_ENTRY_GVR, DynamicClient
from giantswarm_apps_mcp.errors import GiantSwarmAPIError
from giantswarm_apps_mcp.unstructured import (
    format_rfc3339,
    get_bool,
    get_map,
    get_str,
    get_str_list,
    get_str_map,
    parse_rfc3339,
    split_object,
)

logger = logging.getLogger("mcp-server")


@dataclass
class ChartSpec:
    api_version: str = ""
    app_version: str = ""
    description: str = ""
    home: str = ""
    icon: str = ""
    keywords: List[str] = field(default_factory=list)
    name: str = ""
    sources: List[str] = field(default_factory=list)
    urls: List[str] = field(default_factory=list)
    version: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChartSpec":
        return cls(
            api_version=get_str(data, "apiVersion"),
            app_version=get_str(data, "appVersion"),
            description=get_str(data, "description"),
            home=get_str(data, "home"),
            icon=get_str(data, "icon"),
            keywords=get_str_list(data, "keywords"),
            name=get_str(data, "name"),
            sources=get_str_list(data, "sources"),
            urls=get_str_list(data, "urls"),
            version=get_str(data, "version"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "apiVersion": self.api_version,
            "appVersion": self.app_version,
            "description": self.description,
            "home": self.home,
            "icon": self.icon,
            "name": self.name,
            "version": self.version,
        }
        if self.keywords:
            out["keywords"] = list(self.keywords)
        if self.sources:
            out["sources"] = list(self.sources)
        if self.urls:
            out["urls"] = list(self.urls)
        return out


@dataclass
class Restrictions:
    cluster_singleton: bool = False
    namespace_singleton: bool = False
    fixed_namespace: str = ""
    gpu_instances: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clusterSingleton": self.cluster_singleton,
            "namespaceSingleton": self.namespace_singleton,
            "fixedNamespace": self.fixed_namespace,
            "gpuInstances": self.gpu_instances,
        }


@dataclass
class AppCatalogEntrySpec:
    app_name: str = ""
    app_version: str = ""
    catalog_name: str = ""
    catalog_namespace: str = ""
    chart: ChartSpec = field(default_factory=ChartSpec)
    date_created: Optional[datetime] = None
    date_updated: Optional[datetime] = None
    restrictions: Optional[Restrictions] = None


@dataclass
class AppCatalogEntry:
    name: str
    namespace: str
    labels: Dict[str, str] = field(default_factory=dict)
    annotations: Dict[str, str] = field(default_factory=dict)
    spec: AppCatalogEntrySpec = field(default_factory=AppCatalogEntrySpec)

    def latest_version(self) -> str:
        return self.spec.chart.version or self.spec.app_version

    def chart_app_version(self) -> str:
        return self.spec.chart.app_version or self.spec.app_version

    def is_cluster_app(self) -> bool:
        return self.spec.restrictions is not None and self.spec.restrictions.cluster_singleton

    def display_name(self) -> str:
        return self.spec.app_name or self.spec.chart.name

    def last_changed(self) -> Optional[datetime]:
        return self.spec.date_updated or self.spec.date_created

    @classmethod
    def from_unstructured(cls, obj: Dict[str, Any]) -> "AppCatalogEntry":
        metadata, spec, _ = split_object(obj, "AppCatalogEntry")
        entry = cls(
            name=get_str(metadata, "name"),
            namespace=get_str(metadata, "namespace"),
            labels=get_str_map(metadata, "labels"),
            annotations=get_str_map(metadata, "annotations"),
        )
        entry.spec.app_name = get_str(spec, "appName")
        entry.spec.app_version = get_str(spec, "appVersion")

        catalog = get_map(spec, "catalog")
        if catalog is not None:
            entry.spec.catalog_name = get_str(catalog, "name")
            entry.spec.catalog_namespace = get_str(catalog, "namespace")

        chart = get_map(spec, "chart")
        if chart is not None:
            entry.spec.chart = ChartSpec.from_dict(chart)

        entry.spec.date_created = parse_rfc3339(get_str(spec, "dateCreated"))
        entry.spec.date_updated = parse_rfc3339(get_str(spec, "dateUpdated"))

        restrictions = get_map(spec, "restrictions")
        if restrictions is not None:
            entry.spec.restrictions = Restrictions(
                cluster_singleton=get_bool(restrictions, "clusterSingleton"),
                namespace_singleton=get_bool(restrictions, "namespaceSingleton"),
                fixed_namespace=get_str(restrictions, "fixedNamespace"),
                gpu_instances=get_bool(restrictions, "gpuInstances"),
            )
        return entry

    def to_unstructured(self) -> Dict[str, Any]:
        spec: Dict[str, Any] = {
            "appName": self.spec.app_name,
            "appVersion": self.spec.app_version,
            "catalog": {
                "name": self.spec.catalog_name,
                "namespace": self.spec.catalog_namespace,
            },
            "chart": self.spec.chart.to_dict(),
        }
        if self.spec.date_created is not None:
            spec["dateCreated"] = format_rfc3339(self.spec.date_created)
        if self.spec.date_updated is not None:
            spec["dateUpdated"] = format_rfc3339(self.spec.date_updated)
        if self.spec.restrictions is not None:
            spec["restrictions"] = self.spec.restrictions.to_dict()
        return {
            "apiVersion": APP_CATALOG_ENTRY_GVR.api_version,
            "kind": "AppCatalogEntry",
            "metadata": {
                "name": self.name,
                "namespace": self.namespace,
                "labels": dict(self.labels),
                "annotations": dict(self.annotations),
            },
            "spec": spec,
        }

    def summary(self) -> Dict[str, Any]:
        changed = self.last_changed()
        return {
            "name": self.name,
            "namespace": self.namespace,
            "app": self.display_name(),
            "version": self.latest_version(),
            "appVersion": self.chart_app_version(),
            "catalog": self.spec.catalog_name,
            "clusterApp": self.is_cluster_app(),
            "updated": format_rfc3339(changed) if changed else None,
        }


class AppCatalogEntryClient:
    def __init__(self, custom_api: client.CustomObjectsApi):
        self.dynamic = DynamicClient(custom_api)

    def list(self, namespace: str = "", label_selector: str = "") -> List[AppCatalogEntry]:
        try:
            items = self.dynamic.list(APP_CATALOG_ENTRY_GVR, namespace, label_selector)
        except Exception as e:
            raise GiantSwarmAPIError("list app catalog entries in", namespace or "all namespaces", e) from e

        entries: List[AppCatalogEntry] = []
        for item in items:
            try:
                entries.append(AppCatalogEntry.from_unstructured(item))
            except ValueError as e:
                logger.debug(f"Skipping undecodable app catalog entry: {e}")
        return entries

    def list_by_catalog(self, catalog_name: str, catalog_namespace: str = "") -> List[AppCatalogEntry]:
        return [
            entry for entry in self.list()
            if entry.spec.catalog_name == catalog_name
            and (not catalog_namespace or entry.spec.catalog_namespace == catalog_namespace)
        ]

    def get(self, namespace: str, name: str) -> AppCatalogEntry:
        try:
            obj = self.dynamic.get(APP_CATALOG_ENTRY_GVR, namespace, name)
        except Exception as e:
            raise GiantSwarmAPIError("get app catalog entry", f"{namespace}/{name}", e) from e
        return AppCatalogEntry.from_unstructured(obj)

    def search(self, query: str) -> List[AppCatalogEntry]:
        """Case-insensitive match on app name, chart name, description or keywords."""
        needle = query.lower()
        results = []
        for entry in self.list():
            chart = entry.spec.chart
            haystacks = [entry.spec.app_name, chart.name, chart.description] + chart.keywords
            if any(needle in text.lower() for text in haystacks):
                results.append(entry)
        return results

    def get_versions(self, app_name: str) -> List[AppCatalogEntry]:
        return [
            entry for entry in self.list()
            if entry.spec.app_name == app_name or entry.spec.chart.name == app_name
        ]

    def filter_by_labels(self, label_selector: str) -> List[AppCatalogEntry]:
        return self.list(label_selector=label_selector)


def filter_by_restrictions(entries: List[AppCatalogEntry], cluster_app: bool) -> List[AppCatalogEntry]:
    return [entry for entry in entries if entry.is_cluster_app() == cluster_app]


def sort_by_date(entries: List[AppCatalogEntry]) -> List[AppCatalogEntry]:
    """Newest first by update (else creation) date; undated entries go last."""
    dated = [e for e in entries if e.last_changed() is not None]
    undated = [e for e in entries if e.last_changed() is None]
    dated.sort(key=lambda e: e.last_changed(), reverse=True)
    return dated + undated


def group_by_app(entries: List[AppCatalogEntry]) -> Dict[str, List[AppCatalogEntry]]:
    grouped: Dict[str, List[AppCatalogEntry]] = OrderedDict()
    for entry in entries:
        grouped.setdefault(entry.display_name(), []).append(entry)
    return grouped
