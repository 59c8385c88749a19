"""Markdown assembly and argument checks shared by the guided prompts."""

import re
from typing import Iterable, List

DNS1123_LABEL = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
DNS1123_LABEL_MAX_LENGTH = 63

NAME_FIELDS = ("name", "namespace")


class PromptBuilder:
    """Collects ``## title`` sections and joins them with blank lines."""

    def __init__(self):
        self.sections: List[str] = []

    def add_section(self, title: str, content: str) -> "PromptBuilder":
        self.sections.append(f"## {title}\n\n{content}")
        return self

    def add_list(self, title: str, items: Iterable[str]) -> "PromptBuilder":
        return self.add_section(title, "".join(f"- {item}\n" for item in items))

    def add_code_block(self, title: str, language: str, code: str) -> "PromptBuilder":
        return self.add_section(title, f"```{language}\n{code}\n```")

    def action_required(self, message: str) -> "PromptBuilder":
        return self.add_section("Action Required", message)

    def build(self) -> str:
        return "\n\n".join(self.sections)


def is_valid_kubernetes_name(name: str) -> bool:
    """DNS-1123 label: lowercase alphanumerics and '-', alphanumeric at both ends."""
    return len(name) <= DNS1123_LABEL_MAX_LENGTH and DNS1123_LABEL.match(name) is not None


def validate_input(value: str, field: str, required: bool = False) -> None:
    """Raise ValueError for a missing required value or an invalid name.

    Only ``name`` and ``namespace`` fields are checked for Kubernetes name
    syntax; an empty optional value is accepted.
    """
    if not value:
        if required:
            raise ValueError(f"{field} is required")
        return
    if field in NAME_FIELDS and not is_valid_kubernetes_name(value):
        raise ValueError(
            f"{field} must be a valid Kubernetes resource name (lowercase alphanumeric and hyphens)"
        )
