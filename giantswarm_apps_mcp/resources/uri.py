"""Scheme-qualified identifiers for MCP resources.

    app://{namespace}/{name}
    catalog://{name}
    config://{namespace}/{app}[/{subpath}]
    schema://{catalog}/{app}/{version}
    changelog://{catalog}/{app}
"""

from dataclasses import dataclass

RESOURCE_TYPE_APP = "app"
RESOURCE_TYPE_CATALOG = "catalog"
RESOURCE_TYPE_CONFIG = "config"
RESOURCE_TYPE_SCHEMA = "schema"
RESOURCE_TYPE_CHANGELOG = "changelog"

RESOURCE_TYPES = (
    RESOURCE_TYPE_APP,
    RESOURCE_TYPE_CATALOG,
    RESOURCE_TYPE_CONFIG,
    RESOURCE_TYPE_SCHEMA,
    RESOURCE_TYPE_CHANGELOG,
)

DEFAULT_CONFIG_SUBPATH = "values"


@dataclass
class ResourceURI:
    type: str
    namespace: str = ""
    name: str = ""
    catalog: str = ""
    version: str = ""
    subpath: str = ""

    @classmethod
    def parse(cls, uri: str) -> "ResourceURI":
        scheme, sep, path = uri.partition("://")
        if not sep:
            raise ValueError(f"invalid resource URI format: {uri}")
        if scheme not in RESOURCE_TYPES:
            raise ValueError(f"unknown resource type: {scheme}")

        parts = path.split("/")
        if scheme == RESOURCE_TYPE_APP:
            if len(parts) != 2:
                raise ValueError("invalid app resource path: expected namespace/name")
            return cls(type=scheme, namespace=parts[0], name=parts[1])

        if scheme == RESOURCE_TYPE_CATALOG:
            if len(parts) != 1:
                raise ValueError("invalid catalog resource path: expected name")
            return cls(type=scheme, name=parts[0])

        if scheme == RESOURCE_TYPE_CONFIG:
            if len(parts) < 2:
                raise ValueError("invalid config resource path: expected namespace/app/...")
            subpath = "/".join(parts[2:]) or DEFAULT_CONFIG_SUBPATH
            return cls(type=scheme, namespace=parts[0], name=parts[1], subpath=subpath)

        if scheme == RESOURCE_TYPE_SCHEMA:
            if len(parts) != 3:
                raise ValueError("invalid schema resource path: expected catalog/app/version")
            return cls(type=scheme, catalog=parts[0], name=parts[1], version=parts[2])

        if len(parts) != 2:
            raise ValueError("invalid changelog resource path: expected catalog/app")
        return cls(type=scheme, catalog=parts[0], name=parts[1])

    def __str__(self) -> str:
        if self.type == RESOURCE_TYPE_APP:
            return f"app://{self.namespace}/{self.name}"
        if self.type == RESOURCE_TYPE_CATALOG:
            return f"catalog://{self.name}"
        if self.type == RESOURCE_TYPE_CONFIG:
            return f"config://{self.namespace}/{self.name}/{self.subpath or DEFAULT_CONFIG_SUBPATH}"
        if self.type == RESOURCE_TYPE_SCHEMA:
            return f"schema://{self.catalog}/{self.name}/{self.version}"
        if self.type == RESOURCE_TYPE_CHANGELOG:
            return f"changelog://{self.catalog}/{self.name}"
        return ""
