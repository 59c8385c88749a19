"""App configuration stored in ConfigMaps and Secrets.

Both kinds are handled through one ``Config`` record holding plain string
values; Secret payloads are base64-encoded only at the API boundary.
Secret values that are not UTF-8 text stay in their original base64 form
and are written back untouched.
"""

import base64
import binascii
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

import yaml
from kubernetes import client

from giantswarm_apps_mcp.errors import GiantSwarmAPIError, is_not_found

logger = logging.getLogger("mcp-server")

CONFIG_TYPE_CONFIGMAP = "configmap"
CONFIG_TYPE_SECRET = "secret"
CONFIG_TYPES = (CONFIG_TYPE_CONFIGMAP, CONFIG_TYPE_SECRET)

APP_NAME_LABEL = "app.kubernetes.io/name"

SKIPPED_SECRET_TYPES = frozenset([
    "kubernetes.io/service-account-token",
    "kubernetes.io/dockercfg",
    "kubernetes.io/dockerconfigjson",
])


def validate_config_type(config_type: str) -> str:
    if config_type not in CONFIG_TYPES:
        raise ValueError(f"invalid type: {config_type} (must be configmap or secret)")
    return config_type


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def encode_value(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def decode_value(value: str) -> str:
    return base64.b64decode(value, validate=True).decode("utf-8")


@dataclass
class ConfigDiff:
    added: Dict[str, str] = field(default_factory=dict)
    modified: Dict[str, Tuple[str, str]] = field(default_factory=dict)
    removed: Dict[str, str] = field(default_factory=dict)

    def has_changes(self) -> bool:
        return bool(self.added or self.modified or self.removed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "added": dict(self.added),
            "modified": {k: {"old": old, "new": new} for k, (old, new) in self.modified.items()},
            "removed": dict(self.removed),
            "hasChanges": self.has_changes(),
        }


@dataclass
class ConfigSchema:
    required_keys: List[str] = field(default_factory=list)
    optional_keys: List[str] = field(default_factory=list)
    key_patterns: Dict[str, str] = field(default_factory=dict)


@dataclass
class ValidationResult:
    valid: bool = True
    errors: List[str] = field(default_factory=list)

    def fail(self, message: str) -> None:
        self.valid = False
        self.errors.append(message)


@dataclass
class Config:
    name: str
    namespace: str
    type: str = CONFIG_TYPE_CONFIGMAP
    data: Dict[str, str] = field(default_factory=dict)
    labels: Dict[str, str] = field(default_factory=dict)
    # secret keys whose value is still the base64 read from the API
    binary_keys: Set[str] = field(default_factory=set)

    def is_secret(self) -> bool:
        return self.type == CONFIG_TYPE_SECRET

    def get_value(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_value(self, key: str, value: str) -> None:
        self.data[key] = value
        self.binary_keys.discard(key)

    def remove_value(self, key: str) -> None:
        self.data.pop(key, None)
        self.binary_keys.discard(key)

    def replace_data(self, data: Dict[str, str]) -> None:
        self.data = dict(data)
        self.binary_keys = set()

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.data, default_flow_style=False, sort_keys=True)

    def to_json(self) -> str:
        return json.dumps(self.data, indent=2, sort_keys=True)

    def from_yaml(self, text: str) -> None:
        try:
            loaded = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"failed to unmarshal YAML: {e}") from e
        self._load_mapping(loaded or {}, "YAML")

    def from_json(self, text: str) -> None:
        try:
            loaded = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"failed to unmarshal JSON: {e}") from e
        self._load_mapping(loaded, "JSON")

    def _load_mapping(self, loaded: Any, fmt: str) -> None:
        if not isinstance(loaded, dict):
            raise ValueError(f"failed to unmarshal {fmt}: expected a mapping")
        for key, value in loaded.items():
            self.data[str(key)] = _stringify(value)

    def merge_with(self, other: "Config") -> None:
        self.data.update(other.data)
        self.binary_keys -= set(other.data)
        self.binary_keys |= other.binary_keys

    def diff(self, other: "Config") -> ConfigDiff:
        """Changes that turn this config into ``other``."""
        result = ConfigDiff()
        for key, new in other.data.items():
            if key not in self.data:
                result.added[key] = new
            elif self.data[key] != new:
                result.modified[key] = (self.data[key], new)
        for key, old in self.data.items():
            if key not in other.data:
                result.removed[key] = old
        return result

    def _encoded_data(self) -> Dict[str, str]:
        return {
            k: v if k in self.binary_keys else encode_value(v)
            for k, v in self.data.items()
        }

    def encode_secret_data(self) -> None:
        if not self.is_secret():
            return
        self.data = self._encoded_data()

    def decode_secret_data(self) -> None:
        """Decode every value; binary keys are already in their base64 form."""
        if not self.is_secret():
            return
        decoded = {}
        for key, value in self.data.items():
            if key in self.binary_keys:
                decoded[key] = value
                continue
            try:
                decoded[key] = decode_value(value)
            except (binascii.Error, UnicodeDecodeError) as e:
                raise ValueError(f"failed to decode key {key}: {e}") from e
        self.data = decoded

    def _metadata(self) -> client.V1ObjectMeta:
        return client.V1ObjectMeta(name=self.name, namespace=self.namespace, labels=dict(self.labels) or None)

    def to_config_map(self) -> client.V1ConfigMap:
        return client.V1ConfigMap(metadata=self._metadata(), data=dict(self.data))

    def to_secret(self) -> client.V1Secret:
        return client.V1Secret(
            metadata=self._metadata(),
            type="Opaque",
            data=self._encoded_data(),
        )

    @classmethod
    def from_config_map(cls, config_map: client.V1ConfigMap) -> "Config":
        return cls(
            name=config_map.metadata.name,
            namespace=config_map.metadata.namespace,
            type=CONFIG_TYPE_CONFIGMAP,
            data=dict(config_map.data or {}),
            labels=dict(config_map.metadata.labels or {}),
        )

    @classmethod
    def from_secret(cls, secret: client.V1Secret) -> "Config":
        data = {}
        binary_keys = set()
        for key, value in (secret.data or {}).items():
            try:
                data[key] = decode_value(value)
            except (binascii.Error, UnicodeDecodeError):
                logger.debug(f"Keeping undecodable secret key {key} as-is")
                data[key] = value
                binary_keys.add(key)
        return cls(
            name=secret.metadata.name,
            namespace=secret.metadata.namespace,
            type=CONFIG_TYPE_SECRET,
            data=data,
            labels=dict(secret.metadata.labels or {}),
            binary_keys=binary_keys,
        )


class ConfigClient:
    def __init__(self, core_api: client.CoreV1Api):
        self.core_api = core_api

    def get_config_map(self, namespace: str, name: str) -> Config:
        try:
            return Config.from_config_map(self.core_api.read_namespaced_config_map(name, namespace))
        except Exception as e:
            raise GiantSwarmAPIError("get configmap", f"{namespace}/{name}", e) from e

    def get_secret(self, namespace: str, name: str) -> Config:
        try:
            return Config.from_secret(self.core_api.read_namespaced_secret(name, namespace))
        except Exception as e:
            raise GiantSwarmAPIError("get secret", f"{namespace}/{name}", e) from e

    def get(self, namespace: str, name: str, config_type: str) -> Config:
        if validate_config_type(config_type) == CONFIG_TYPE_SECRET:
            return self.get_secret(namespace, name)
        return self.get_config_map(namespace, name)

    def create(self, config: Config) -> None:
        validate_config_type(config.type)
        identity = f"{config.namespace}/{config.name}"
        try:
            if config.is_secret():
                self.core_api.create_namespaced_secret(config.namespace, config.to_secret())
            else:
                self.core_api.create_namespaced_config_map(config.namespace, config.to_config_map())
        except Exception as e:
            raise GiantSwarmAPIError(f"create {config.type}", identity, e) from e

    def update(self, config: Config) -> None:
        """Replace the object, carrying over the server's resourceVersion."""
        validate_config_type(config.type)
        identity = f"{config.namespace}/{config.name}"
        try:
            if config.is_secret():
                current = self.core_api.read_namespaced_secret(config.name, config.namespace)
                body = config.to_secret()
                body.metadata.resource_version = current.metadata.resource_version
                self.core_api.replace_namespaced_secret(config.name, config.namespace, body)
            else:
                current = self.core_api.read_namespaced_config_map(config.name, config.namespace)
                body = config.to_config_map()
                body.metadata.resource_version = current.metadata.resource_version
                self.core_api.replace_namespaced_config_map(config.name, config.namespace, body)
        except Exception as e:
            raise GiantSwarmAPIError(f"update {config.type}", identity, e) from e

    def delete(self, namespace: str, name: str, config_type: str) -> None:
        """Delete the object; a missing object is not an error."""
        validate_config_type(config_type)
        try:
            if config_type == CONFIG_TYPE_SECRET:
                self.core_api.delete_namespaced_secret(name, namespace)
            else:
                self.core_api.delete_namespaced_config_map(name, namespace)
        except Exception as e:
            if is_not_found(e):
                return
            raise GiantSwarmAPIError(f"delete {config_type}", f"{namespace}/{name}", e) from e

    def list_config_maps(self, namespace: str, label_selector: str = "") -> List[Config]:
        kwargs = {"label_selector": label_selector} if label_selector else {}
        try:
            items = self.core_api.list_namespaced_config_map(namespace, **kwargs).items
        except Exception as e:
            raise GiantSwarmAPIError("list configmaps in", namespace, e) from e
        return [Config.from_config_map(cm) for cm in items]

    def list_secrets(self, namespace: str, label_selector: str = "") -> List[Config]:
        """Secrets in the namespace, without service-account tokens and registry credentials."""
        kwargs = {"label_selector": label_selector} if label_selector else {}
        try:
            items = self.core_api.list_namespaced_secret(namespace, **kwargs).items
        except Exception as e:
            raise GiantSwarmAPIError("list secrets in", namespace, e) from e
        return [Config.from_secret(s) for s in items if s.type not in SKIPPED_SECRET_TYPES]

    def validate(self, config: Config, schema: ConfigSchema) -> ValidationResult:
        result = ValidationResult()
        for key in schema.required_keys:
            if key not in config.data:
                result.fail(f"missing required key: {key}")

        allowed = set(schema.required_keys) | set(schema.optional_keys)
        for key in sorted(config.data):
            if allowed and key not in allowed:
                result.fail(f"unexpected key: {key}")

            pattern = schema.key_patterns.get(key)
            if pattern is None:
                continue
            try:
                matched = re.search(pattern, config.data[key]) is not None
            except re.error as e:
                result.fail(f"invalid pattern for key {key}: {e}")
                continue
            if not matched:
                result.fail(f"value for key {key} does not match pattern {pattern}")
        return result

    def get_app_config(self, namespace: str, app_name: str, config_type: str) -> Config:
        selector = f"{APP_NAME_LABEL}={app_name}"
        if validate_config_type(config_type) == CONFIG_TYPE_SECRET:
            configs = self.list_secrets(namespace, selector)
        else:
            configs = self.list_config_maps(namespace, selector)
        if not configs:
            raise LookupError(f"no {config_type} found for app {app_name}")
        return configs[0]


def merge_configs(*configs: Optional[Config]) -> Optional[Config]:
    """Merge configs left to right; later values and labels win."""
    present = [c for c in configs if c is not None]
    if not present:
        return None
    first = present[0]
    merged = Config(name=first.name, namespace=first.namespace, type=first.type)
    for config in present:
        merged.merge_with(config)
        merged.labels.update(config.labels)
    return merged
