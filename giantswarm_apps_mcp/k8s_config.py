"""Kubernetes client loading.

In-cluster configuration wins when the server runs inside a pod. Otherwise
the kubeconfig at ``$KUBECONFIG`` (or ``~/.kube/config``) is used, with the
context chosen per call, then by ``--kube-context``, then by ``KUBE_CONTEXT``.
"""

import logging
import os
from typing import List, Optional, Tuple

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

logger = logging.getLogger("mcp-server")

IN_CLUSTER_CONTEXT = "in-cluster"

_default_context = ""


def set_default_context(context: Optional[str]) -> None:
    global _default_context
    _default_context = context or ""


def get_kubeconfig_path() -> str:
    env_path = os.environ.get("KUBECONFIG", "")
    if env_path:
        return env_path
    return os.path.join(os.path.expanduser("~"), ".kube", "config")


def _resolve_context(context: str = "") -> str:
    return context or _default_context or os.environ.get("KUBE_CONTEXT", "")


def _in_cluster_configuration() -> Optional[client.Configuration]:
    configuration = client.Configuration()
    try:
        config.load_incluster_config(client_configuration=configuration)
    except ConfigException:
        return None
    return configuration


def get_api_client(context: str = "") -> client.ApiClient:
    configuration = _in_cluster_configuration()
    if configuration is not None:
        return client.ApiClient(configuration=configuration)

    kube_context = _resolve_context(context)
    logger.debug(f"Loading kubeconfig {get_kubeconfig_path()} (context: {kube_context or 'current'})")
    return config.new_client_from_config(
        config_file=get_kubeconfig_path(),
        context=kube_context or None,
    )


def get_custom_objects_client(context: str = "") -> client.CustomObjectsApi:
    return client.CustomObjectsApi(get_api_client(context))


def get_core_v1_client(context: str = "") -> client.CoreV1Api:
    return client.CoreV1Api(get_api_client(context))


def get_version_client(context: str = "") -> client.VersionApi:
    return client.VersionApi(get_api_client(context))


def list_contexts() -> Tuple[List[str], str]:
    """Return the kubeconfig context names and the current one."""
    contexts, active = config.list_kube_config_contexts(config_file=get_kubeconfig_path())
    names = [ctx["name"] for ctx in contexts or []]
    current = active["name"] if active else ""
    return names, current


def get_current_context(context: str = "") -> str:
    if _in_cluster_configuration() is not None:
        return IN_CLUSTER_CONTEXT
    requested = _resolve_context(context)
    if requested:
        return requested
    try:
        _, current = list_contexts()
    except (ConfigException, OSError) as e:
        logger.debug(f"Could not read kubeconfig contexts: {e}")
        return ""
    return current
