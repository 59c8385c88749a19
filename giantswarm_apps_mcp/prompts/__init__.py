from giantswarm_apps_mcp.prompts.builder import PromptBuilder, is_valid_kubernetes_name, validate_input
from giantswarm_apps_mcp.prompts.configure_app import build_configure_app_prompt, register_configure_app_prompt
from giantswarm_apps_mcp.prompts.create_catalog import build_create_catalog_prompt, register_create_catalog_prompt
from giantswarm_apps_mcp.prompts.deploy_app import build_deploy_app_prompt, register_deploy_app_prompt
from giantswarm_apps_mcp.prompts.troubleshoot_app import build_troubleshoot_app_prompt, register_troubleshoot_app_prompt
from giantswarm_apps_mcp.prompts.upgrade_app import build_upgrade_app_prompt, register_upgrade_app_prompt

__all__ = [
    "PromptBuilder",
    "build_configure_app_prompt",
    "build_create_catalog_prompt",
    "build_deploy_app_prompt",
    "build_troubleshoot_app_prompt",
    "build_upgrade_app_prompt",
    "is_valid_kubernetes_name",
    "register_prompts",
    "validate_input",
]


def register_prompts(server):
    """Register the guided workflow prompts."""
    register_deploy_app_prompt(server)
    register_upgrade_app_prompt(server)
    register_troubleshoot_app_prompt(server)
    register_create_catalog_prompt(server)
    register_configure_app_prompt(server)
