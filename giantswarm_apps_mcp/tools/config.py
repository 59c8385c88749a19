"""App configuration tools over ConfigMaps and Secrets.

Tools:
    config_get       - Show a ConfigMap or Secret as text, YAML or JSON
    config_validate  - Check keys against required/optional key lists
    config_diff      - Compare two configurations of the same type
    config_merge     - Merge several configurations, later ones winning
    config_set       - Set one key, optionally creating the object
    secret_create    - Create an Opaque Secret from key=value pairs
    secret_update    - Set one key or replace/merge the whole Secret data
"""

import logging
from typing import Any, Dict, List

from mcp.types import ToolAnnotations

from giantswarm_apps_mcp.appconfig import (
    APP_NAME_LABEL,
    CONFIG_TYPE_CONFIGMAP,
    CONFIG_TYPE_SECRET,
    Config,
    ConfigClient,
    ConfigSchema,
    merge_configs,
    validate_config_type,
)
from giantswarm_apps_mcp.errors import is_not_found
from giantswarm_apps_mcp.k8s_config import get_core_v1_client
from giantswarm_apps_mcp.tools.common import error_result, parse_key_values, split_list

logger = logging.getLogger("mcp-server")

OUTPUT_FORMATS = ("text", "yaml", "json")
MAX_TEXT_VALUE_LENGTH = 100


def _validate_format(fmt: str) -> str:
    fmt = fmt or "text"
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"invalid format: {fmt} (must be text, yaml or json)")
    return fmt


def _truncate(value: str) -> str:
    if len(value) > MAX_TEXT_VALUE_LENGTH and "\n" not in value:
        return value[:MAX_TEXT_VALUE_LENGTH - 3] + "..."
    return value


def _render(config: Config, fmt: str) -> Dict[str, Any]:
    if fmt == "yaml":
        return {"format": "yaml", "content": config.to_yaml()}
    if fmt == "json":
        return {"format": "json", "content": config.to_json()}
    return {
        "format": "text",
        "data": {key: _truncate(config.data[key]) for key in sorted(config.data)},
    }


def register_config_tools(server, non_destructive: bool):
    """Register ConfigMap/Secret configuration tools."""

    @server.tool(
        annotations=ToolAnnotations(
            title="Get App Configuration",
            readOnlyHint=True,
        ),
    )
    def config_get(
        name: str,
        namespace: str,
        type: str = CONFIG_TYPE_CONFIGMAP,
        format: str = "text",
        decode: bool = False,
        context: str = ""
    ) -> Dict[str, Any]:
        """Get app configuration stored in a ConfigMap or Secret.

        Secret values stay base64-encoded in text output unless decode is set.
        Long single-line values are shortened in text output.

        Args:
            name: Name of the ConfigMap or Secret
            namespace: Namespace
            type: configmap or secret
            format: Output format: text, yaml or json
            decode: Show decoded Secret values in text output
            context: Kubernetes context (uses current if not specified)
        """
        try:
            config_type = validate_config_type(type or CONFIG_TYPE_CONFIGMAP)
            fmt = _validate_format(format)
            config = ConfigClient(get_core_v1_client(context)).get(namespace, name, config_type)

            encoded = fmt == "text" and config.is_secret() and not decode
            if encoded:
                config.encode_secret_data()

            result: Dict[str, Any] = {
                "success": True,
                "context": context or "current",
                "name": config.name,
                "namespace": config.namespace,
                "type": config.type,
                "labels": dict(config.labels),
            }
            result.update(_render(config, fmt))
            if encoded:
                result["note"] = "Values are base64 encoded; set decode to view them"
            return result
        except Exception as e:
            return error_result("getting configuration", e, hint="Check the name, namespace and type of the configuration")

    @server.tool(
        annotations=ToolAnnotations(
            title="Validate App Configuration",
            readOnlyHint=True,
        ),
    )
    def config_validate(
        name: str,
        namespace: str,
        type: str = CONFIG_TYPE_CONFIGMAP,
        required_keys: str = "",
        optional_keys: str = "",
        context: str = ""
    ) -> Dict[str, Any]:
        """Validate a configuration against required and optional keys.

        Keys outside both lists are reported as unexpected, unless both lists are empty.

        Args:
            name: Name of the ConfigMap or Secret
            namespace: Namespace
            type: configmap or secret
            required_keys: Comma-separated list of required keys
            optional_keys: Comma-separated list of optional keys
            context: Kubernetes context (uses current if not specified)
        """
        try:
            config_type = validate_config_type(type or CONFIG_TYPE_CONFIGMAP)
            config_client = ConfigClient(get_core_v1_client(context))
            config = config_client.get(namespace, name, config_type)

            schema = ConfigSchema(
                required_keys=split_list(required_keys),
                optional_keys=split_list(optional_keys),
            )
            result = config_client.validate(config, schema)
            return {
                "success": True,
                "context": context or "current",
                "valid": result.valid,
                "errors": result.errors,
            }
        except Exception as e:
            return error_result("validating configuration", e)

    @server.tool(
        annotations=ToolAnnotations(
            title="Diff App Configurations",
            readOnlyHint=True,
        ),
    )
    def config_diff(
        name1: str,
        namespace1: str,
        name2: str,
        namespace2: str,
        type: str = CONFIG_TYPE_CONFIGMAP,
        context: str = ""
    ) -> Dict[str, Any]:
        """Show the differences between two configurations.

        Added and modified keys are those that turn the first configuration into the second.

        Args:
            name1: Name of the first ConfigMap/Secret
            namespace1: Namespace of the first configuration
            name2: Name of the second ConfigMap/Secret
            namespace2: Namespace of the second configuration
            type: configmap or secret
            context: Kubernetes context (uses current if not specified)
        """
        try:
            config_type = validate_config_type(type or CONFIG_TYPE_CONFIGMAP)
            config_client = ConfigClient(get_core_v1_client(context))
            first = config_client.get(namespace1, name1, config_type)
            second = config_client.get(namespace2, name2, config_type)

            result = {
                "success": True,
                "context": context or "current",
                "from": f"{namespace1}/{name1}",
                "to": f"{namespace2}/{name2}",
            }
            result.update(first.diff(second).to_dict())
            return result
        except Exception as e:
            return error_result("diffing configurations", e)

    @server.tool(
        annotations=ToolAnnotations(
            title="Merge App Configurations",
            readOnlyHint=True,
        ),
    )
    def config_merge(
        configs: str,
        type: str = CONFIG_TYPE_CONFIGMAP,
        format: str = "text",
        context: str = ""
    ) -> Dict[str, Any]:
        """Merge multiple configurations; later ones take precedence.

        Args:
            configs: Comma-separated list of namespace/name references
            type: configmap or secret
            format: Output format: text, yaml or json
            context: Kubernetes context (uses current if not specified)
        """
        try:
            config_type = validate_config_type(type or CONFIG_TYPE_CONFIGMAP)
            fmt = _validate_format(format)
            config_client = ConfigClient(get_core_v1_client(context))

            loaded: List[Config] = []
            for ref in split_list(configs):
                parts = ref.split("/")
                if len(parts) != 2:
                    raise ValueError(f"invalid config reference: {ref} (expected namespace/name)")
                loaded.append(config_client.get(parts[0], parts[1], config_type))
            if not loaded:
                raise ValueError("at least one config reference must be specified")

            merged = merge_configs(*loaded)
            result: Dict[str, Any] = {
                "success": True,
                "context": context or "current",
                "sources": [f"{c.namespace}/{c.name}" for c in loaded],
            }
            result.update(_render(merged, fmt))
            return result
        except Exception as e:
            return error_result("merging configurations", e)

    if non_destructive:
        return

    @server.tool(
        annotations=ToolAnnotations(
            title="Set App Configuration Value",
            destructiveHint=True,
        ),
    )
    def config_set(
        name: str,
        namespace: str,
        key: str,
        value: str,
        type: str = CONFIG_TYPE_CONFIGMAP,
        create: bool = False,
        context: str = ""
    ) -> Dict[str, Any]:
        """Set a configuration value.

        Args:
            name: Name of the ConfigMap or Secret
            namespace: Namespace
            key: Configuration key to set
            value: Configuration value
            type: configmap or secret
            create: Create the ConfigMap or Secret when it does not exist
            context: Kubernetes context (uses current if not specified)
        """
        try:
            config_type = validate_config_type(type or CONFIG_TYPE_CONFIGMAP)
            config_client = ConfigClient(get_core_v1_client(context))

            try:
                config = config_client.get(namespace, name, config_type)
                exists = True
            except Exception as e:
                if not (create and is_not_found(e)):
                    raise
                config = Config(name=name, namespace=namespace, type=config_type)
                exists = False

            config.set_value(key, value)
            if exists:
                config_client.update(config)
            else:
                config_client.create(config)

            shown = "<redacted>" if config_type == CONFIG_TYPE_SECRET else value
            return {
                "success": True,
                "context": context or "current",
                "created": not exists,
                "message": f"Successfully set {key}={shown} in {config_type} {namespace}/{name}",
            }
        except Exception as e:
            return error_result("setting configuration value", e, hint="Set create to create it")

    @server.tool(
        annotations=ToolAnnotations(
            title="Create App Secret",
            destructiveHint=True,
        ),
    )
    def secret_create(
        name: str,
        namespace: str,
        data: str,
        app: str = "",
        labels: str = "",
        context: str = ""
    ) -> Dict[str, Any]:
        """Create a new secret for an app.

        Args:
            name: Name of the secret
            namespace: Namespace
            data: Secret data as comma-separated key=value pairs
            app: App name, stored as the app.kubernetes.io/name label
            labels: Additional labels as comma-separated key=value pairs
            context: Kubernetes context (uses current if not specified)
        """
        try:
            values = parse_key_values(data)
            secret_labels = {APP_NAME_LABEL: app} if app else {}
            secret_labels.update(parse_key_values(labels, what="label"))

            secret = Config(
                name=name,
                namespace=namespace,
                type=CONFIG_TYPE_SECRET,
                data=values,
                labels=secret_labels,
            )
            ConfigClient(get_core_v1_client(context)).create(secret)
            return {
                "success": True,
                "context": context or "current",
                "message": f"Successfully created secret {namespace}/{name} with {len(values)} keys",
                "keys": sorted(values),
            }
        except Exception as e:
            return error_result("creating secret", e)

    @server.tool(
        annotations=ToolAnnotations(
            title="Update App Secret",
            destructiveHint=True,
        ),
    )
    def secret_update(
        name: str,
        namespace: str,
        key: str = "",
        value: str = "",
        data: str = "",
        merge: bool = False,
        context: str = ""
    ) -> Dict[str, Any]:
        """Update an existing secret.

        Either set a single key/value, or pass data to replace the whole
        secret (or merge into it when merge is set).

        Args:
            name: Name of the secret
            namespace: Namespace
            key: Key to set
            value: Value for the key
            data: Complete data as comma-separated key=value pairs
            merge: Merge data into the existing keys instead of replacing them
            context: Kubernetes context (uses current if not specified)
        """
        try:
            if not (key and value) and not data:
                raise ValueError("either key/value or data must be specified")

            config_client = ConfigClient(get_core_v1_client(context))
            secret = config_client.get(namespace, name, CONFIG_TYPE_SECRET)

            if key and value:
                secret.set_value(key, value)
            else:
                values = parse_key_values(data)
                if merge:
                    for k, v in values.items():
                        secret.set_value(k, v)
                else:
                    secret.replace_data(values)

            config_client.update(secret)
            return {
                "success": True,
                "context": context or "current",
                "message": f"Successfully updated secret {namespace}/{name}",
                "keys": sorted(secret.data),
            }
        except Exception as e:
            return error_result("updating secret", e, hint="Use secret_create to create it")
