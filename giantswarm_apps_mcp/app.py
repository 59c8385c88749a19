"""Giant Swarm App resources (application.giantswarm.io/v1alpha1, kind App)."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from kubernetes import client

from giantswarm_apps_mcp.dynamic import APP_GVR, DynamicClient, resource_version
from giantswarm_apps_mcp.errors import GiantSwarmAPIError
from giantswarm_apps_mcp.organization import namespaces_by_organization
from giantswarm_apps_mcp.unstructured import get_bool, get_map, get_str, get_str_map, split_object

logger = logging.getLogger("mcp-server")

ORGANIZATION_LABEL_SELECTOR = "giantswarm.io/organization=true"


@dataclass
class ObjectRef:
    name: str = ""
    namespace: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "namespace": self.namespace}


@dataclass
class ConfigRef:
    """ConfigMap and/or Secret a resource reads its values from."""

    config_map: Optional[ObjectRef] = None
    secret: Optional[ObjectRef] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfigRef":
        ref = cls()
        config_map = get_map(data, "configMap")
        if config_map is not None:
            ref.config_map = ObjectRef(get_str(config_map, "name"), get_str(config_map, "namespace"))
        secret = get_map(data, "secret")
        if secret is not None:
            ref.secret = ObjectRef(get_str(secret, "name"), get_str(secret, "namespace"))
        return ref

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.config_map is not None:
            out["configMap"] = self.config_map.to_dict()
        if self.secret is not None:
            out["secret"] = self.secret.to_dict()
        return out


@dataclass
class AppSpec:
    catalog: str = ""
    name: str = ""
    namespace: str = ""
    version: str = ""
    in_cluster: bool = False
    config: Optional[ConfigRef] = None
    user_config: Optional[ConfigRef] = None


@dataclass
class AppStatus:
    app_version: str = ""
    version: str = ""
    release_status: str = ""
    last_deployed: str = ""


@dataclass
class App:
    name: str
    namespace: str
    labels: Dict[str, str] = field(default_factory=dict)
    creation_timestamp: str = ""
    spec: AppSpec = field(default_factory=AppSpec)
    status: AppStatus = field(default_factory=AppStatus)

    @classmethod
    def from_unstructured(cls, obj: Dict[str, Any]) -> "App":
        metadata, spec, status = split_object(obj, "App")
        app = cls(
            name=get_str(metadata, "name"),
            namespace=get_str(metadata, "namespace"),
            labels=get_str_map(metadata, "labels"),
            creation_timestamp=get_str(metadata, "creationTimestamp"),
        )

        app.spec.catalog = get_str(spec, "catalog")
        app.spec.name = get_str(spec, "name")
        app.spec.namespace = get_str(spec, "namespace")
        app.spec.version = get_str(spec, "version")
        kube_config = get_map(spec, "kubeConfig")
        if kube_config is not None:
            app.spec.in_cluster = get_bool(kube_config, "inCluster")
        config = get_map(spec, "config")
        if config is not None:
            app.spec.config = ConfigRef.from_dict(config)
        user_config = get_map(spec, "userConfig")
        if user_config is not None:
            app.spec.user_config = ConfigRef.from_dict(user_config)

        app.status.app_version = get_str(status, "appVersion")
        app.status.version = get_str(status, "version")
        release = get_map(status, "release")
        if release is not None:
            app.status.last_deployed = get_str(release, "lastDeployed")
            app.status.release_status = get_str(release, "status")
        return app

    def to_unstructured(self) -> Dict[str, Any]:
        spec: Dict[str, Any] = {
            "catalog": self.spec.catalog,
            "name": self.spec.name,
            "namespace": self.spec.namespace,
            "version": self.spec.version,
            "kubeConfig": {"inCluster": self.spec.in_cluster},
        }
        if self.spec.config is not None:
            spec["config"] = self.spec.config.to_dict()
        if self.spec.user_config is not None:
            spec["userConfig"] = self.spec.user_config.to_dict()
        metadata: Dict[str, Any] = {"name": self.name, "namespace": self.namespace}
        if self.labels:
            metadata["labels"] = dict(self.labels)
        return {
            "apiVersion": APP_GVR.api_version,
            "kind": "App",
            "metadata": metadata,
            "spec": spec,
        }

    def summary(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "namespace": self.namespace,
            "catalog": self.spec.catalog,
            "app": self.spec.name,
            "version": self.spec.version,
            "targetNamespace": self.spec.namespace,
            "status": self.status.release_status or "unknown",
        }


class AppClient:
    def __init__(self, custom_api: client.CustomObjectsApi, core_api: Optional[client.CoreV1Api] = None):
        self.dynamic = DynamicClient(custom_api)
        self.core_api = core_api

    def list(self, namespace: str = "", label_selector: str = "") -> List[App]:
        try:
            items = self.dynamic.list(APP_GVR, namespace, label_selector)
        except Exception as e:
            raise GiantSwarmAPIError("list apps in", namespace or "all namespaces", e) from e

        apps: List[App] = []
        for item in items:
            try:
                apps.append(App.from_unstructured(item))
            except ValueError as e:
                logger.debug(f"Skipping undecodable app: {e}")
        return apps

    def get(self, namespace: str, name: str) -> App:
        try:
            obj = self.dynamic.get(APP_GVR, namespace, name)
        except Exception as e:
            raise GiantSwarmAPIError("get app", f"{namespace}/{name}", e) from e
        return App.from_unstructured(obj)

    def create(self, app: App) -> App:
        try:
            created = self.dynamic.create(APP_GVR, app.namespace, app.to_unstructured())
        except Exception as e:
            raise GiantSwarmAPIError("create app", f"{app.namespace}/{app.name}", e) from e
        return App.from_unstructured(created)

    def update(self, app: App) -> App:
        try:
            current = self.dynamic.get(APP_GVR, app.namespace, app.name)
        except Exception as e:
            raise GiantSwarmAPIError("get app", f"{app.namespace}/{app.name}", e) from e

        body = app.to_unstructured()
        body["metadata"]["resourceVersion"] = resource_version(current)
        try:
            updated = self.dynamic.replace(APP_GVR, app.namespace, app.name, body)
        except Exception as e:
            raise GiantSwarmAPIError("update app", f"{app.namespace}/{app.name}", e) from e
        return App.from_unstructured(updated)

    def delete(self, namespace: str, name: str) -> None:
        try:
            self.dynamic.delete(APP_GVR, namespace, name)
        except Exception as e:
            raise GiantSwarmAPIError("delete app", f"{namespace}/{name}", e) from e

    def update_version(self, namespace: str, name: str, version: str) -> App:
        app = self.get(namespace, name)
        app.spec.version = version
        return self.update(app)

    def list_by_organization(self, organization: str, label_selector: str = "") -> List[App]:
        """Apps across every namespace of the organization, workload cluster namespaces included.

        Namespaces that cannot be listed are skipped.
        """
        apps: List[App] = []
        for namespace in namespaces_by_organization(self.core_api, organization):
            try:
                apps.extend(self.list(namespace, label_selector))
            except GiantSwarmAPIError as e:
                logger.debug(f"Skipping namespace {namespace}: {e}")
        return apps

    def get_organization_namespaces(self) -> List[str]:
        """Names of organization namespaces, by label or else by ``org-`` prefix."""
        try:
            labelled = self.core_api.list_namespace(label_selector=ORGANIZATION_LABEL_SELECTOR)
        except Exception as e:
            logger.debug(f"Listing labelled organization namespaces failed, falling back to prefix: {e}")
            try:
                everything = self.core_api.list_namespace()
            except Exception as inner:
                raise GiantSwarmAPIError("list", "namespaces", inner) from inner
            return [
                ns.metadata.name for ns in everything.items
                if len(ns.metadata.name) > 4 and ns.metadata.name.startswith("org-")
            ]
        return [ns.metadata.name for ns in labelled.items]


def filter_by_status(apps: List[App], status: str) -> List[App]:
    if not status:
        return apps
    return [app for app in apps if app.status.release_status == status]


def filter_by_catalog(apps: List[App], catalog: str) -> List[App]:
    if not catalog:
        return apps
    return [app for app in apps if app.spec.catalog == catalog]
