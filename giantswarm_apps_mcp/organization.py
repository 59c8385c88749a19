"""Organization and workload-cluster namespace conventions.

Giant Swarm tenants live in ``org-<name>`` namespaces; each workload cluster
gets a ``workload-<cluster>`` namespace labelled with its owning organization.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from kubernetes import client

from giantswarm_apps_mcp.errors import GiantSwarmAPIError

logger = logging.getLogger("mcp-server")

ORGANIZATION_NAMESPACE_PREFIX = "org-"
ORGANIZATION_LABEL = "giantswarm.io/organization"
WORKLOAD_CLUSTER_NAMESPACE_PREFIX = "workload-"
OWNER_LABEL = "giantswarm.io/owner"
CLUSTER_LABEL = "giantswarm.io/cluster"

NAMESPACE_TYPE_ORGANIZATION = "organization"
NAMESPACE_TYPE_WORKLOAD_CLUSTER = "workload-cluster"
NAMESPACE_TYPE_SYSTEM = "system"
NAMESPACE_TYPE_OTHER = "other"

SYSTEM_NAMESPACES = frozenset([
    "kube-system",
    "kube-public",
    "kube-node-lease",
    "default",
    "giantswarm",
    "flux-system",
    "monitoring",
])


@dataclass
class NamespaceInfo:
    name: str
    type: str
    organization: str = ""
    cluster_id: str = ""
    labels: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "type": self.type,
            "organization": self.organization,
            "clusterID": self.cluster_id,
            "labels": dict(self.labels),
        }


def is_organization_namespace(namespace: str) -> bool:
    return namespace.startswith(ORGANIZATION_NAMESPACE_PREFIX)


def is_workload_cluster_namespace(namespace: str) -> bool:
    return namespace.startswith(WORKLOAD_CLUSTER_NAMESPACE_PREFIX)


def is_system_namespace(namespace: str) -> bool:
    return namespace in SYSTEM_NAMESPACES


def organization_from_namespace(namespace: str) -> str:
    """``org-giantswarm`` -> ``giantswarm``."""
    if not is_organization_namespace(namespace):
        raise ValueError(f"namespace {namespace} is not an organization namespace")
    return namespace[len(ORGANIZATION_NAMESPACE_PREFIX):]


def organization_namespace(organization: str) -> str:
    """``giantswarm`` -> ``org-giantswarm``; already-prefixed names are returned as-is."""
    if is_organization_namespace(organization):
        return organization
    return ORGANIZATION_NAMESPACE_PREFIX + organization


def _labels(namespace) -> Dict[str, str]:
    return dict(namespace.metadata.labels or {})


def list_organization_namespaces(core_api: client.CoreV1Api) -> List[str]:
    """Organization namespaces by label, falling back to the ``org-`` prefix.

    The prefix scan is used both when the labelled listing fails and when it
    comes back empty.
    """
    try:
        labelled = core_api.list_namespace(label_selector=f"{ORGANIZATION_LABEL}=true")
        if labelled.items:
            return [ns.metadata.name for ns in labelled.items]
    except Exception as e:
        logger.debug(f"Listing labelled organization namespaces failed: {e}")

    try:
        everything = core_api.list_namespace()
    except Exception as e:
        raise GiantSwarmAPIError("list", "namespaces", e) from e
    return [ns.metadata.name for ns in everything.items if is_organization_namespace(ns.metadata.name)]


def namespaces_by_organization(core_api: client.CoreV1Api, organization: str) -> List[str]:
    """The organization namespace plus namespaces labelled or owned by it."""
    org_namespace = organization_namespace(organization)
    try:
        everything = core_api.list_namespace()
    except Exception as e:
        raise GiantSwarmAPIError("list", "namespaces", e) from e

    namespaces = []
    for ns in everything.items:
        name = ns.metadata.name
        labels = _labels(ns)
        if name == org_namespace:
            namespaces.append(name)
        elif labels.get(ORGANIZATION_LABEL) == organization:
            namespaces.append(name)
        elif is_workload_cluster_namespace(name) and labels.get(OWNER_LABEL) == organization:
            namespaces.append(name)
    return namespaces


def namespace_info(core_api: client.CoreV1Api, namespace: str) -> NamespaceInfo:
    try:
        ns = core_api.read_namespace(namespace)
    except Exception as e:
        raise GiantSwarmAPIError("get namespace", namespace, e) from e

    labels = _labels(ns)
    if is_organization_namespace(namespace):
        return NamespaceInfo(
            name=namespace,
            type=NAMESPACE_TYPE_ORGANIZATION,
            organization=organization_from_namespace(namespace),
            labels=labels,
        )
    if is_workload_cluster_namespace(namespace):
        return NamespaceInfo(
            name=namespace,
            type=NAMESPACE_TYPE_WORKLOAD_CLUSTER,
            organization=labels.get(OWNER_LABEL, ""),
            cluster_id=labels.get(CLUSTER_LABEL, ""),
            labels=labels,
        )
    if is_system_namespace(namespace):
        return NamespaceInfo(name=namespace, type=NAMESPACE_TYPE_SYSTEM, labels=labels)
    return NamespaceInfo(
        name=namespace,
        type=NAMESPACE_TYPE_OTHER,
        organization=labels.get(ORGANIZATION_LABEL, ""),
        labels=labels,
    )


def validate_namespace_access(core_api: client.CoreV1Api, namespace: str) -> None:
    """Raise GiantSwarmAPIError when the namespace cannot be read."""
    try:
        core_api.read_namespace(namespace)
    except Exception as e:
        raise GiantSwarmAPIError("access namespace", namespace, e) from e
