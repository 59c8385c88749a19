"""Group/version/resource coordinates and a thin CustomObjectsApi wrapper."""

from dataclasses import dataclass
from typing import Any, Dict, List

from kubernetes import client

APPLICATION_GROUP = "application.giantswarm.io"
APPLICATION_VERSION = "v1alpha1"


@dataclass(frozen=True)
class GroupVersionResource:
    group: str
    version: str
    plural: str

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}"


APP_GVR = GroupVersionResource(APPLICATION_GROUP, APPLICATION_VERSION, "apps")
CATALOG_GVR = GroupVersionResource(APPLICATION_GROUP, APPLICATION_VERSION, "catalogs")
APP_CATALOG_ENTRY_GVR = GroupVersionResource(APPLICATION_GROUP, APPLICATION_VERSION, "appcatalogentries")
CLUSTER_GVR = GroupVersionResource("cluster.x-k8s.io", "v1beta1", "clusters")

REQUIRED_APPLICATION_RESOURCES = ("apps", "catalogs", "appcatalogentries")


class DynamicClient:
    """Namespaced-or-cluster-wide CRUD over ``CustomObjectsApi``.

    An empty namespace addresses the resource across all namespaces for
    listing and as a cluster-scoped object for reads and writes.
    """

    def __init__(self, custom_api: client.CustomObjectsApi):
        self.custom_api = custom_api

    def list(self, gvr: GroupVersionResource, namespace: str = "", label_selector: str = "") -> List[Dict[str, Any]]:
        kwargs: Dict[str, Any] = {}
        if label_selector:
            kwargs["label_selector"] = label_selector

        if namespace:
            raw = self.custom_api.list_namespaced_custom_object(
                group=gvr.group, version=gvr.version, namespace=namespace,
                plural=gvr.plural, **kwargs,
            )
        else:
            raw = self.custom_api.list_cluster_custom_object(
                group=gvr.group, version=gvr.version, plural=gvr.plural, **kwargs,
            )
        return raw.get("items", []) or []

    def get(self, gvr: GroupVersionResource, namespace: str, name: str) -> Dict[str, Any]:
        if namespace:
            return self.custom_api.get_namespaced_custom_object(
                group=gvr.group, version=gvr.version, namespace=namespace,
                plural=gvr.plural, name=name,
            )
        return self.custom_api.get_cluster_custom_object(
            group=gvr.group, version=gvr.version, plural=gvr.plural, name=name,
        )

    def create(self, gvr: GroupVersionResource, namespace: str, body: Dict[str, Any]) -> Dict[str, Any]:
        if namespace:
            return self.custom_api.create_namespaced_custom_object(
                group=gvr.group, version=gvr.version, namespace=namespace,
                plural=gvr.plural, body=body,
            )
        return self.custom_api.create_cluster_custom_object(
            group=gvr.group, version=gvr.version, plural=gvr.plural, body=body,
        )

    def replace(self, gvr: GroupVersionResource, namespace: str, name: str, body: Dict[str, Any]) -> Dict[str, Any]:
        if namespace:
            return self.custom_api.replace_namespaced_custom_object(
                group=gvr.group, version=gvr.version, namespace=namespace,
                plural=gvr.plural, name=name, body=body,
            )
        return self.custom_api.replace_cluster_custom_object(
            group=gvr.group, version=gvr.version, plural=gvr.plural, name=name, body=body,
        )

    def delete(self, gvr: GroupVersionResource, namespace: str, name: str) -> None:
        if namespace:
            self.custom_api.delete_namespaced_custom_object(
                group=gvr.group, version=gvr.version, namespace=namespace,
                plural=gvr.plural, name=name,
            )
            return
        self.custom_api.delete_cluster_custom_object(
            group=gvr.group, version=gvr.version, plural=gvr.plural, name=name,
        )

    def check_crds_exist(self) -> None:
        """Raise LookupError unless the application.giantswarm.io CRDs are served."""
        resources = self.custom_api.get_api_resources(APPLICATION_GROUP, APPLICATION_VERSION)
        served = {r.name for r in (getattr(resources, "resources", None) or [])}
        missing = [name for name in REQUIRED_APPLICATION_RESOURCES if name not in served]
        if missing:
            raise LookupError(f"required CRD {missing[0]}.{APPLICATION_GROUP} not found")


def resource_version(obj: Dict[str, Any]) -> str:
    metadata = obj.get("metadata") or {}
    return metadata.get("resourceVersion", "") or ""
