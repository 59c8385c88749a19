"""deploy-app: walk from organization to catalog to app to a running App."""

from typing import Tuple

from giantswarm_apps_mcp.organization import organization_namespace
from giantswarm_apps_mcp.prompts.builder import PromptBuilder, validate_input

COMMON_CATALOGS = [
    "giantswarm - Official Giant Swarm apps",
    "giantswarm-playground - Experimental apps",
    "giantswarm-incubator - Apps in development",
]

POPULAR_APPS = [
    "nginx-ingress-controller - Ingress controller",
    "prometheus-operator - Monitoring stack",
    "external-dns - DNS management",
    "cert-manager - Certificate management",
]


def build_deploy_app_prompt(
    organization: str = "",
    catalog: str = "",
    app: str = "",
    namespace: str = "",
    version: str = "",
    cluster: str = "",
) -> Tuple[str, str]:
    """Return the prompt description and Markdown text for deploy-app."""
    validate_input(namespace, "namespace")
    pb = PromptBuilder()
    pb.add_section(
        "Deploy Giant Swarm App",
        "This guide will help you deploy a Giant Swarm app to your Kubernetes cluster. "
        "Follow the steps below to ensure a successful deployment.",
    )

    if not organization:
        pb.add_section(
            "Step 1: Select Organization",
            "First, select the organization to deploy the app in. List the available organizations with:",
        )
        pb.add_code_block("List Organizations", "text", "organization_list()")
        pb.action_required("Please specify the organization using the 'organization' argument.")
        return "Deploy app guide - organization selection needed", pb.build()

    namespace = namespace or organization_namespace(organization)
    pb.add_section("Organization", f"Deploying to organization: **{organization}**")

    if not catalog:
        pb.add_section(
            "Step 2: Select Catalog",
            "Choose a catalog that contains the app you want to deploy. List the catalogs with:",
        )
        pb.add_code_block("List Catalogs", "text", f'catalog_list(organization="{organization}")')
        pb.add_list("Common Catalogs", COMMON_CATALOGS)
        pb.action_required("Please specify the catalog using the 'catalog' argument.")
        return "Deploy app guide - catalog selection needed", pb.build()

    pb.add_section("Catalog", f"Using catalog: **{catalog}**")

    if not app:
        pb.add_section("Step 3: Select App", "Browse the apps in the catalog to find the one you want to deploy:")
        pb.add_code_block("Browse Apps", "text", f'appcatalogentry_list(catalog="{catalog}", latest_only=True)')
        pb.add_list("Popular Apps", POPULAR_APPS)
        pb.action_required("Please specify the app using the 'app' argument.")
        return "Deploy app guide - app selection needed", pb.build()

    pb.add_section("App Selection", f"Deploying app: **{app}**")

    if cluster:
        pb.add_section(
            "Target Cluster",
            f"The app will be installed into workload cluster **{cluster}**. Check that the cluster is ready:",
        )
        pb.add_code_block("Check Cluster", "text", f'cluster_get(name="{cluster}", organization="{organization}")')

    if version:
        pb.add_section("Step 4: Confirm Version", f"Deploying version: **{version}**. Confirm it is available:")
    else:
        pb.add_section("Step 4: Select Version", "Check the available versions of the app:")
    pb.add_code_block("List Versions", "text", f'appcatalogentry_versions(app="{app}")')

    pb.add_section("Step 5: Configuration (Optional)", "Many apps require or support configuration. You can:")
    pb.add_list("Configuration Options", [
        "Use the default configuration (no action needed)",
        "Create a ConfigMap with custom values",
        "Reference an existing ConfigMap",
    ])
    pb.add_section("Check Configuration Schema", "To see the available configuration options, read the resource:")
    pb.add_code_block("View Schema", "text", f"schema://{catalog}/{app}/{version or '<VERSION>'}")

    pb.add_section("Step 6: Deploy the App", "Use the following tool call to deploy the app:")
    pb.add_code_block("Deploy Command", "text", "\n".join([
        "app_create(",
        f'    name="{app}",',
        f'    namespace="{namespace}",',
        f'    catalog="{catalog}",',
        f'    app="{app}",',
        f'    version="{version or "<VERSION>"}",',
        f'    target_namespace="{app}",',
        f"    in_cluster={not cluster},",
        ")",
    ]))

    pb.add_section("Step 7: Verify Deployment", "After deployment, verify the app status:")
    pb.add_code_block("Check Status", "text", f'app_get(name="{app}", namespace="{namespace}")')

    pb.add_list("Best Practices", [
        "Always specify a version instead of using 'latest'",
        "Review the app's documentation before deployment",
        "Test in a non-production environment first",
        "Use configuration management for custom values",
        "Monitor the app after deployment",
    ])
    pb.add_section("Need Help?", "If you encounter issues, use the troubleshooting guide:")
    pb.add_code_block("Troubleshooting", "text", "Run prompt: troubleshoot-app")

    return f"Complete guide to deploy {app} from {catalog} catalog", pb.build()


def register_deploy_app_prompt(server):

    @server.prompt(name="deploy-app", description="Step-by-step guide to deploy a Giant Swarm app")
    def deploy_app(
        organization: str = "",
        catalog: str = "",
        app: str = "",
        namespace: str = "",
        version: str = "",
        cluster: str = "",
    ) -> str:
        """Step-by-step guide to deploy a Giant Swarm app.

        Args:
            organization: Organization to deploy the app in (e.g., "giantswarm")
            catalog: Catalog name to browse apps from (e.g., "giantswarm")
            app: App name to deploy (e.g., "nginx-ingress-controller")
            namespace: Namespace for the App resource (defaults to the organization namespace)
            version: App version to deploy
            cluster: Workload cluster to deploy the app to
        """
        _, text = build_deploy_app_prompt(organization, catalog, app, namespace, version, cluster)
        return text
