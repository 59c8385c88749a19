"""troubleshoot-app: diagnostic steps for failing or misbehaving Apps."""

from typing import Tuple

from giantswarm_apps_mcp.prompts.builder import PromptBuilder, validate_input

ISSUE_TYPES = ("deployment", "configuration", "performance", "general")

EXAMPLE_RESOURCES = '''resources:
  requests:
    memory: "256Mi"
    cpu: "100m"
  limits:
    memory: "512Mi"
    cpu: "200m"'''


def _deployment_checks(pb: PromptBuilder, name: str, namespace: str) -> None:
    pb.add_section("Deployment Issues", "If the app is not deploying successfully:")
    pb.add_section("Check 1: Release Status", "Common deployment statuses and their meanings:")
    pb.add_list("Status Guide", [
        "**pending** - Deployment in progress, wait a few minutes",
        "**failed** - Deployment failed, check error messages",
        "**unknown** - Status cannot be determined",
        "**deployed** - Successfully deployed (no issue)",
    ])
    pb.add_section("Check 2: Configuration Issues", "Verify the configuration is correct:")
    pb.add_code_block("Check Config", "text", f"config://{namespace}/{name}/values")
    pb.add_list("Common Config Issues", [
        "Missing required configuration values",
        "Invalid YAML syntax",
        "Incorrect value types",
        "Referenced ConfigMap/Secret doesn't exist",
    ])
    pb.add_section("Check 3: Catalog and Version", "Ensure the app version exists in the catalog:")
    pb.add_code_block("Verify App in Catalog", "text", 'appcatalogentry_versions(app="<APP_NAME>")')
    pb.add_section("Check 4: Namespace Permissions", "Verify you have permissions in the namespace:")
    pb.add_code_block("Check Access", "text", f'organization_validate_access(namespace="{namespace}")')


def _configuration_checks(pb: PromptBuilder) -> None:
    pb.add_section("Configuration Issues", "For configuration-related problems:")
    pb.add_section("Validate Configuration", "Check if your configuration matches the schema:")
    pb.add_code_block("View Schema", "text", "schema://<CATALOG>/<APP_NAME>/<VERSION>")
    pb.add_section("Common Configuration Fixes", "")
    pb.add_list("Steps to Fix", [
        "Compare your values with the schema",
        "Check for typos in configuration keys",
        "Ensure all required values are provided",
        "Validate value types (string vs number vs boolean)",
        "Check for deprecated configuration options",
    ])


def _performance_checks(pb: PromptBuilder) -> None:
    pb.add_section("Performance Issues", "For apps experiencing performance problems:")
    pb.add_list("Performance Checks", [
        "Check resource requests and limits in configuration",
        "Verify cluster has sufficient resources",
        "Look for pod restarts or evictions",
        "Check if horizontal pod autoscaling is configured",
        "Review app-specific metrics and logs",
    ])
    pb.add_section("Resource Configuration", "Adjust resources if needed:")
    pb.add_code_block("Example Resource Config", "yaml", EXAMPLE_RESOURCES)


def build_troubleshoot_app_prompt(name: str = "", namespace: str = "", issue: str = "") -> Tuple[str, str]:
    """Return the prompt description and Markdown text for troubleshoot-app.

    An empty issue covers deployment, configuration and performance;
    "general" (or any unknown type) covers only the general steps.
    """
    validate_input(name, "name")
    validate_input(namespace, "namespace")
    issue = issue.strip().lower()
    if issue and issue not in ISSUE_TYPES:
        issue = "general"

    pb = PromptBuilder()
    pb.add_section(
        "Troubleshoot Giant Swarm App",
        "This guide will help you diagnose and resolve common issues with Giant Swarm apps. "
        "Follow the diagnostic steps to identify and fix problems.",
    )

    if not name or not namespace:
        pb.add_section("Identify the App", "To troubleshoot effectively, we need to identify the specific app:")
        pb.add_code_block("List Apps with Status", "text", "app_list(all_orgs=True)")
        pb.add_section(
            "Look For",
            "Apps with status other than 'deployed', such as:\n- failed\n- pending\n- unknown",
        )
        pb.action_required("Please specify 'name' and 'namespace' arguments for the app to troubleshoot.")
        return "Troubleshooting guide - app identification needed", pb.build()

    pb.add_section("App Details", f"Troubleshooting: **{name}** in namespace: **{namespace}**")
    pb.add_section("Step 1: Check App Status", "First, get detailed information about the app:")
    pb.add_code_block("Get App Details", "text", f'app_get(name="{name}", namespace="{namespace}")')
    pb.add_list("Key Information to Note", [
        "Release status",
        "Current version",
        "Last deployment time",
        "Any error messages",
        "Configuration references",
    ])

    if issue in ("deployment", ""):
        _deployment_checks(pb, name, namespace)
    if issue in ("configuration", ""):
        _configuration_checks(pb)
    if issue in ("performance", ""):
        _performance_checks(pb)

    pb.add_section("General Troubleshooting Steps", "")
    pb.add_section("1. Check Events", "Look for Kubernetes events related to the app:")
    pb.add_code_block(
        "View Events", "bash",
        f"kubectl get events -n {namespace} --field-selector involvedObject.name={name}",
    )
    pb.add_section("2. Check Logs", "If the app has pods running, check their logs in its target namespace:")
    pb.add_code_block("Get Pods", "bash", f"kubectl get pods -n {name} -l app.kubernetes.io/name={name}")
    pb.add_code_block("View Logs", "bash", f"kubectl logs -n {name} <POD_NAME>")
    pb.add_section("3. Inspect Resources", "Check the actual Kubernetes resources:")
    pb.add_code_block("Describe App", "bash", f"kubectl describe app {name} -n {namespace}")

    pb.add_section("Recovery Actions", "")
    pb.add_section("Option 1: Reapply Configuration", "If configuration was the issue:")
    pb.add_code_block(
        "Update Config", "text",
        f'app_update(name="{name}", namespace="{namespace}", config_name="<NEW_CONFIG>")',
    )
    pb.add_section("Option 2: Force Redeploy", "Trigger a fresh deployment:")
    pb.add_code_block("Delete and Recreate", "text", "\n".join([
        "# Delete the app",
        f'app_delete(name="{name}", namespace="{namespace}")',
        "",
        "# Recreate with same or updated configuration",
        f'app_create(name="{name}", namespace="{namespace}", catalog="<CATALOG>", app="<APP>", version="<VERSION>")',
    ]))
    pb.add_section("Option 3: Rollback Version", "If a recent upgrade caused issues:")
    pb.add_code_block(
        "Rollback", "text",
        f'app_update(name="{name}", namespace="{namespace}", version="<PREVIOUS_VERSION>")',
    )

    pb.add_section("Need More Help?", "")
    pb.add_list("Additional Resources", [
        "Check app-specific documentation",
        "Review Giant Swarm platform documentation",
        "Contact Giant Swarm support with gathered information",
        "Check if known issues exist for this app version",
    ])
    pb.add_section("Information to Provide to Support", "")
    pb.add_list("Gather This Information", [
        "App name, namespace, and version",
        "Error messages from app_get",
        "Kubernetes events",
        "Pod logs if available",
        "Configuration being used",
        "Time when issue started",
    ])

    return f"Comprehensive troubleshooting guide for {name}", pb.build()


def register_troubleshoot_app_prompt(server):

    @server.prompt(name="troubleshoot-app", description="Troubleshooting guide for Giant Swarm app issues")
    def troubleshoot_app(name: str = "", namespace: str = "", issue: str = "") -> str:
        """Troubleshooting guide for Giant Swarm app issues.

        Args:
            name: Name of the app having issues
            namespace: Namespace where the app is deployed
            issue: Type of issue: deployment, configuration, performance, or general
        """
        _, text = build_troubleshoot_app_prompt(name, namespace, issue)
        return text
