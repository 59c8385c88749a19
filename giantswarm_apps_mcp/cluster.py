"""Cluster API (cluster.x-k8s.io/v1beta1) clusters managed by Giant Swarm."""

import base64
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from kubernetes import client

from giantswarm_apps_mcp.app import App, AppClient
from giantswarm_apps_mcp.dynamic import CLUSTER_GVR, DynamicClient
from giantswarm_apps_mcp.errors import GiantSwarmAPIError
from giantswarm_apps_mcp.organization import (
    ORGANIZATION_LABEL,
    WORKLOAD_CLUSTER_NAMESPACE_PREFIX,
    namespaces_by_organization,
    organization_namespace,
)
from giantswarm_apps_mcp.unstructured import (
    get_bool,
    get_int,
    get_map,
    get_str,
    get_str_list,
    get_str_map,
    split_object,
)

logger = logging.getLogger("mcp-server")

PROVIDER_LABEL = "cluster.x-k8s.io/provider"
CLUSTER_TYPE_LABEL = "giantswarm.io/cluster-type"
PROVISIONED_PHASE = "Provisioned"
MANAGEMENT_NAMESPACES = ("default", "giantswarm")


@dataclass
class ObjectReference:
    api_version: str = ""
    kind: str = ""
    name: str = ""
    namespace: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ObjectReference":
        return cls(
            api_version=get_str(data, "apiVersion"),
            kind=get_str(data, "kind"),
            name=get_str(data, "name"),
            namespace=get_str(data, "namespace"),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "name": self.name,
            "namespace": self.namespace,
        }


@dataclass
class ClusterNetwork:
    api_server_port: Optional[int] = None
    services: Optional[List[str]] = None
    pods: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClusterNetwork":
        network = cls(api_server_port=get_int(data, "apiServerPort"))
        services = get_map(data, "services")
        if services is not None:
            network.services = get_str_list(services, "cidrBlocks")
        pods = get_map(data, "pods")
        if pods is not None:
            network.pods = get_str_list(pods, "cidrBlocks")
        return network

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.api_server_port is not None:
            out["apiServerPort"] = self.api_server_port
        if self.services is not None:
            out["services"] = {"cidrBlocks": list(self.services)}
        if self.pods is not None:
            out["pods"] = {"cidrBlocks": list(self.pods)}
        return out


@dataclass
class Condition:
    type: str = ""
    status: str = ""
    last_transition_time: str = ""
    reason: str = ""
    message: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "type": self.type,
            "status": self.status,
            "lastTransitionTime": self.last_transition_time,
            "reason": self.reason,
            "message": self.message,
        }


@dataclass
class ClusterSpec:
    cluster_network: Optional[ClusterNetwork] = None
    infrastructure_ref: Optional[ObjectReference] = None
    control_plane_ref: Optional[ObjectReference] = None


@dataclass
class ClusterStatus:
    phase: str = ""
    infrastructure_ready: bool = False
    control_plane_ready: bool = False
    conditions: List[Condition] = field(default_factory=list)


@dataclass
class Cluster:
    name: str
    namespace: str
    labels: Dict[str, str] = field(default_factory=dict)
    spec: ClusterSpec = field(default_factory=ClusterSpec)
    status: ClusterStatus = field(default_factory=ClusterStatus)

    def is_ready(self) -> bool:
        return (
            self.status.phase == PROVISIONED_PHASE
            and self.status.infrastructure_ready
            and self.status.control_plane_ready
        )

    def organization(self) -> str:
        return self.labels.get(ORGANIZATION_LABEL, "")

    def provider(self) -> str:
        """Provider label, else the infrastructure kind without ``Cluster`` (AWSCluster -> AWS)."""
        if PROVIDER_LABEL in self.labels:
            return self.labels[PROVIDER_LABEL]
        ref = self.spec.infrastructure_ref
        if ref is not None and len(ref.kind) > len("Cluster") and ref.kind.endswith("Cluster"):
            return ref.kind[: -len("Cluster")]
        return "unknown"

    @classmethod
    def from_unstructured(cls, obj: Dict[str, Any]) -> "Cluster":
        metadata, spec, status = split_object(obj, "Cluster")
        cluster = cls(
            name=get_str(metadata, "name"),
            namespace=get_str(metadata, "namespace"),
            labels=get_str_map(metadata, "labels"),
        )

        network = get_map(spec, "clusterNetwork")
        if network is not None:
            cluster.spec.cluster_network = ClusterNetwork.from_dict(network)
        infra = get_map(spec, "infrastructureRef")
        if infra is not None:
            cluster.spec.infrastructure_ref = ObjectReference.from_dict(infra)
        control_plane = get_map(spec, "controlPlaneRef")
        if control_plane is not None:
            cluster.spec.control_plane_ref = ObjectReference.from_dict(control_plane)

        cluster.status.phase = get_str(status, "phase")
        cluster.status.infrastructure_ready = get_bool(status, "infrastructureReady")
        cluster.status.control_plane_ready = get_bool(status, "controlPlaneReady")
        conditions = status.get("conditions")
        if isinstance(conditions, list):
            cluster.status.conditions = [
                Condition(
                    type=get_str(c, "type"),
                    status=get_str(c, "status"),
                    last_transition_time=get_str(c, "lastTransitionTime"),
                    reason=get_str(c, "reason"),
                    message=get_str(c, "message"),
                )
                for c in conditions
                if isinstance(c, dict)
            ]
        return cluster

    def to_unstructured(self) -> Dict[str, Any]:
        spec: Dict[str, Any] = {}
        if self.spec.cluster_network is not None:
            spec["clusterNetwork"] = self.spec.cluster_network.to_dict()
        if self.spec.infrastructure_ref is not None:
            spec["infrastructureRef"] = self.spec.infrastructure_ref.to_dict()
        if self.spec.control_plane_ref is not None:
            spec["controlPlaneRef"] = self.spec.control_plane_ref.to_dict()
        return {
            "apiVersion": CLUSTER_GVR.api_version,
            "kind": "Cluster",
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
            "organization": self.organization(),
            "provider": self.provider(),
            "phase": self.status.phase,
            "ready": self.is_ready(),
        }


class ClusterClient:
    def __init__(self, custom_api: client.CustomObjectsApi, core_api: client.CoreV1Api):
        self.dynamic = DynamicClient(custom_api)
        self.core_api = core_api
        self.app_client = AppClient(custom_api, core_api)

    def list(self, namespace: str = "", label_selector: str = "") -> List[Cluster]:
        try:
            items = self.dynamic.list(CLUSTER_GVR, namespace, label_selector)
        except Exception as e:
            raise GiantSwarmAPIError("list clusters in", namespace or "all namespaces", e) from e

        clusters: List[Cluster] = []
        for item in items:
            try:
                clusters.append(Cluster.from_unstructured(item))
            except ValueError as e:
                logger.debug(f"Skipping undecodable cluster: {e}")
        return clusters

    def get(self, namespace: str, name: str) -> Cluster:
        try:
            obj = self.dynamic.get(CLUSTER_GVR, namespace, name)
        except Exception as e:
            raise GiantSwarmAPIError("get cluster", f"{namespace}/{name}", e) from e
        return Cluster.from_unstructured(obj)

    def list_by_organization(self, organization: str) -> List[Cluster]:
        """Clusters labelled with the organization across its namespaces.

        Namespaces that cannot be listed are skipped.
        """
        clusters: List[Cluster] = []
        for namespace in namespaces_by_organization(self.core_api, organization):
            try:
                found = self.list(namespace)
            except GiantSwarmAPIError as e:
                logger.debug(f"Skipping namespace {namespace}: {e}")
                continue
            clusters.extend(c for c in found if c.organization() == organization)
        return clusters

    def get_kubeconfig(self, cluster: Cluster) -> bytes:
        secret_name = f"{cluster.name}-kubeconfig"
        try:
            secret = self.core_api.read_namespaced_secret(secret_name, cluster.namespace)
        except Exception as e:
            raise GiantSwarmAPIError("get kubeconfig secret", f"{cluster.namespace}/{secret_name}", e) from e

        data = secret.data or {}
        for key in ("value", "kubeconfig"):
            if key in data:
                return base64.b64decode(data[key])
        raise LookupError("kubeconfig not found in secret")

    def list_apps(self, cluster: Cluster) -> List[App]:
        """Apps in the cluster's workload namespace plus out-of-cluster apps of its organization."""
        namespace = cluster_namespace(cluster.name)
        apps = self.app_client.list(namespace)

        org = cluster.organization()
        if org:
            try:
                org_apps = self.app_client.list(organization_namespace(org))
            except GiantSwarmAPIError as e:
                logger.debug(f"Skipping organization apps for {org}: {e}")
            else:
                apps.extend(app for app in org_apps if not app.spec.in_cluster)
        return apps

    def is_workload_cluster(self, cluster: Cluster) -> bool:
        if cluster.namespace in MANAGEMENT_NAMESPACES:
            return False
        if CLUSTER_TYPE_LABEL in cluster.labels:
            return cluster.labels[CLUSTER_TYPE_LABEL] == "workload"
        return True


def filter_by_provider(clusters: List[Cluster], provider: str) -> List[Cluster]:
    """Clusters whose provider matches, ignoring case."""
    if not provider:
        return clusters
    wanted = provider.lower()
    return [c for c in clusters if c.provider().lower() == wanted]


def filter_by_status(clusters: List[Cluster], ready: bool) -> List[Cluster]:
    return [c for c in clusters if c.is_ready() == ready]


def cluster_namespace(cluster_name: str) -> str:
    return f"{WORKLOAD_CLUSTER_NAMESPACE_PREFIX}{cluster_name}"


def cluster_labels(organization: str = "", cluster_type: str = "") -> Dict[str, str]:
    labels: Dict[str, str] = {}
    if organization:
        labels[ORGANIZATION_LABEL] = organization
    if cluster_type:
        labels[CLUSTER_TYPE_LABEL] = cluster_type
    return labels
