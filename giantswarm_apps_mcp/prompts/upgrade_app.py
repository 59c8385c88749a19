"""upgrade-app: move a deployed App to a new version with checks and a rollback path."""

from typing import Tuple

from giantswarm_apps_mcp.prompts.builder import PromptBuilder, validate_input


def build_upgrade_app_prompt(name: str = "", namespace: str = "", version: str = "") -> Tuple[str, str]:
    validate_input(name, "name")
    validate_input(namespace, "namespace")
    pb = PromptBuilder()
    pb.add_section(
        "Upgrade Giant Swarm App",
        "This guide will help you safely upgrade a Giant Swarm app to a new version. "
        "Follow these steps to ensure a smooth upgrade process.",
    )

    if not name or not namespace:
        pb.add_section(
            "Step 1: Identify the App",
            "First, identify the app you want to upgrade. List all apps to find the correct one:",
        )
        pb.add_code_block("List Apps", "text", "app_list(all_orgs=True)")
        pb.action_required("Please specify both 'name' and 'namespace' arguments for the app you want to upgrade.")
        return "Upgrade app guide - app identification needed", pb.build()

    pb.add_section("App Information", f"Upgrading app: **{name}** in namespace: **{namespace}**")
    pb.add_section("Step 2: Check Current Status", "Before upgrading, check the current status and version of your app:")
    pb.add_code_block("Get App Details", "text", f'app_get(name="{name}", namespace="{namespace}")')
    pb.add_list("What to Check", [
        "Current version",
        "Release status (should be 'deployed')",
        "Any existing errors or warnings",
        "Last deployment time",
    ])

    if not version:
        pb.add_section("Step 3: Select Target Version", "Check the available versions of the app:")
        pb.add_section(
            "Find Available Versions",
            "Take the catalog and app name from the app details, then list versions and read the changelog:",
        )
        pb.add_code_block("List Versions", "text", 'appcatalogentry_versions(app="<APP_NAME>")\nchangelog://<CATALOG>/<APP_NAME>')
        pb.add_list("Version Selection Guidelines", [
            "Check the changelog for breaking changes",
            "Prefer incremental upgrades over major jumps",
            "Verify version compatibility with your cluster",
            "Consider testing in a non-production environment first",
        ])
        pb.action_required("Please specify the target 'version' argument.")
        return "Upgrade app guide - version selection needed", pb.build()

    pb.add_section("Target Version", f"Upgrading to version: **{version}**")
    pb.add_section("Step 4: Pre-Upgrade Checklist", "Complete these checks before proceeding:")
    pb.add_list("Checklist", [
        f"✓ Review the changelog for version {version}",
        "✓ Check for breaking changes or migration requirements",
        "✓ Backup any important data or configurations",
        "✓ Verify cluster has sufficient resources",
        "✓ Plan a maintenance window if needed",
        "✓ Prepare rollback plan",
    ])

    pb.add_section("Step 5: Review Configuration", "Check if configuration changes are needed for the new version:")
    pb.add_code_block("View Current Config", "text", f"config://{namespace}/{name}/values")
    pb.add_section("Configuration Compatibility", "Compare your current configuration with the new version's schema:")
    pb.add_code_block("Check New Schema", "text", f"schema://<CATALOG>/<APP_NAME>/{version}")

    pb.add_section("Step 6: Perform the Upgrade", "Execute the upgrade:")
    pb.add_code_block("Upgrade Command", "text", f'app_update(name="{name}", namespace="{namespace}", version="{version}")')

    pb.add_section("Step 7: Monitor the Upgrade", "After initiating the upgrade, monitor its progress:")
    pb.add_code_block("Check Status", "text", f'app_get(name="{name}", namespace="{namespace}")')
    pb.add_list("Monitor These Aspects", [
        "Release status transitions",
        "Pod rollout status",
        "Any error messages",
        "Resource utilization",
    ])

    pb.add_section("Step 8: Verify the Upgrade", "Once the upgrade completes, verify everything is working:")
    pb.add_list("Verification Steps", [
        "Check app status shows 'deployed'",
        "Verify new version is running",
        "Test app functionality",
        "Check logs for any errors",
        "Monitor metrics and performance",
    ])

    pb.add_section("Rollback (If Needed)", "If issues occur, roll back to the previous version:")
    pb.add_code_block(
        "Rollback Command", "text",
        f'app_update(name="{name}", namespace="{namespace}", version="<PREVIOUS_VERSION>")',
    )
    pb.add_list("Upgrade Best Practices", [
        "Always test upgrades in non-production first",
        "Document the upgrade process",
        "Monitor the app for 24-48 hours post-upgrade",
        "Keep track of configuration changes",
        "Maintain a rollback plan",
    ])

    return f"Complete guide to upgrade {name} to version {version}", pb.build()


def register_upgrade_app_prompt(server):

    @server.prompt(name="upgrade-app", description="Guide for upgrading a Giant Swarm app to a new version")
    def upgrade_app(name: str = "", namespace: str = "", version: str = "") -> str:
        """Guide for upgrading a Giant Swarm app to a new version.

        Args:
            name: Name of the app to upgrade
            namespace: Namespace where the app is deployed
            version: Target version to upgrade to
        """
        _, text = build_upgrade_app_prompt(name, namespace, version)
        return text
