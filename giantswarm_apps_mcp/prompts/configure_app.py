"""configure-app: discover an app's settings and wire a values ConfigMap into it."""

from typing import Dict, List, Tuple

from giantswarm_apps_mcp.organization import organization_namespace
from giantswarm_apps_mcp.prompts.builder import PromptBuilder

DEFAULT_NAMESPACE = "default"

# Well-known apps get a focused settings list and an example values file.
APP_PATTERNS: List[Tuple[Tuple[str, ...], Dict[str, object]]] = [
    (("nginx-ingress-controller", "ingress-nginx"), {
        "title": "Ingress Controller Configuration",
        "intro": "Key configuration areas for ingress controllers:",
        "settings": [
            "**Service Type**: LoadBalancer, NodePort, or ClusterIP",
            "**Replica Count**: Number of controller instances",
            "**Resources**: CPU and memory requests/limits",
            "**Default SSL Certificate**: For HTTPS termination",
            "**Custom Annotations**: Cloud provider specific settings",
        ],
        "example": """controller:
  replicaCount: 2
  service:
    type: LoadBalancer
    annotations:
      service.beta.kubernetes.io/aws-load-balancer-type: "nlb"
  resources:
    requests:
      cpu: 100m
      memory: 256Mi
    limits:
      cpu: 500m
      memory: 512Mi""",
    }),
    (("prometheus-operator", "kube-prometheus-stack"), {
        "title": "Monitoring Stack Configuration",
        "intro": "Key configuration areas for monitoring:",
        "settings": [
            "**Storage**: Persistent volume configuration",
            "**Retention**: How long to keep metrics",
            "**Resources**: Sizing for Prometheus instances",
            "**Ingress**: External access configuration",
            "**Alerting**: Alert manager configuration",
        ],
        "example": """prometheus:
  prometheusSpec:
    retention: 30d
    storageSpec:
      volumeClaimTemplate:
        spec:
          accessModes: ["ReadWriteOnce"]
          resources:
            requests:
              storage: 50Gi
alertmanager:
  enabled: true
  config:
    route:
      group_by: ['alertname', 'cluster']""",
    }),
    (("cert-manager",), {
        "title": "Certificate Manager Configuration",
        "intro": "Key configuration areas for cert-manager:",
        "settings": [
            "**Issuers**: Let's Encrypt or internal CA",
            "**DNS Providers**: For DNS-01 challenges",
            "**Resources**: Controller sizing",
            "**CRDs**: Custom Resource Definitions management",
        ],
        "example": """installCRDs: true
resources:
  requests:
    cpu: 10m
    memory: 64Mi
webhook:
  enabled: true""",
    }),
]

SAMPLE_VALUES = """replicaCount: 2
service:
  type: LoadBalancer
resources:
  requests:
    cpu: 100m
    memory: 256Mi"""


def _app_pattern(app: str):
    for names, pattern in APP_PATTERNS:
        if app in names:
            return pattern
    return None


def build_configure_app_prompt(
    app: str = "",
    catalog: str = "",
    version: str = "",
    organization: str = "",
) -> Tuple[str, str]:
    pb = PromptBuilder()
    pb.add_section(
        "App Configuration Wizard",
        "This guide will help you properly configure a Giant Swarm app. "
        "We'll explore available configuration options and create a valid configuration.",
    )

    if not app or not catalog:
        pb.add_section("Step 1: Select App to Configure", "First, identify which app you want to configure:")
        if not catalog:
            pb.add_code_block("List Available Catalogs", "text", "catalog_list(all_orgs=True)")
            pb.add_section(
                "Popular Catalogs",
                "- **giantswarm**: Official Giant Swarm apps\n"
                "- **giantswarm-playground**: Experimental apps\n"
                "- **giantswarm-incubator**: Apps in development",
            )
        else:
            pb.add_code_block("Browse Apps in Catalog", "text", f'appcatalogentry_list(catalog="{catalog}")')
        pb.action_required("Please specify both 'app' and 'catalog' arguments.")
        return "Configuration wizard - app selection needed", pb.build()

    pb.add_section("App Information", f"Configuring: **{app}** from catalog **{catalog}**")

    if not version:
        pb.add_section("Step 2: Select Version", "Check available versions and their configuration requirements:")
        pb.add_code_block("Get App Versions", "text", f'appcatalogentry_versions(app="{app}")')
        pb.add_section(
            "Version Selection Tips",
            "- Use the latest stable version for new deployments\n"
            "- Check version changelog for configuration changes\n"
            "- Match versions with your cluster compatibility",
        )
        pb.action_required("Please specify the 'version' argument.")
        return "Configuration wizard - version selection needed", pb.build()

    pb.add_section("Step 3: Understanding Configuration Options", "Let's explore what can be configured for this app:")
    pb.add_code_block("View Configuration Schema", "text", f"schema://{catalog}/{app}/{version}")

    pb.add_section("Common Configuration Patterns", "")
    pattern = _app_pattern(app)
    if pattern is not None:
        pb.add_section(pattern["title"], pattern["intro"])
        pb.add_list("Common Settings", pattern["settings"])
        pb.add_code_block("Example Configuration", "yaml", pattern["example"])

    namespace = organization_namespace(organization) if organization else DEFAULT_NAMESPACE
    config_name = f"{app}-config"

    pb.add_section(
        "Step 4: Create Your Configuration",
        "Based on the schema and your requirements, create a configuration file:",
    )
    pb.add_section("Option A: Create ConfigMap with Values", "Create a ConfigMap containing your configuration:")
    pb.add_code_block("Create ConfigMap", "bash", "\n".join([
        "# Create a values.yaml file with your configuration",
        f"cat > {app}-values.yaml << EOF",
        "# Your configuration here",
        "replicaCount: 2",
        "service:",
        "  type: LoadBalancer",
        "EOF",
        "",
        "# Create ConfigMap from file",
        f"kubectl create configmap {config_name} \\",
        f"  --namespace {namespace} \\",
        f"  --from-file=values.yaml={app}-values.yaml",
    ]))
    pb.add_section("Option B: Set Values Directly", "For simple configurations, create the ConfigMap with a single key:")
    pb.add_code_block(
        "Inline ConfigMap", "text",
        f'config_set(name="{config_name}", namespace="{namespace}", key="values", '
        f'value="""{SAMPLE_VALUES}""", create=True)',
    )

    pb.add_section("Step 5: Reference Configuration in App", "When creating or updating the app, reference your configuration:")
    pb.add_code_block("Deploy with Configuration", "text", "\n".join([
        "app_create(",
        f'    name="{app}",',
        f'    namespace="{namespace}",',
        f'    catalog="{catalog}",',
        f'    app="{app}",',
        f'    version="{version}",',
        f'    config_name="{config_name}",',
        ")",
    ]))

    pb.add_section("Step 6: Advanced Configuration Topics", "")
    pb.add_section("User Configuration vs App Configuration", "Giant Swarm apps support two configuration levels:")
    pb.add_list("Configuration Types", [
        "**App Configuration**: Platform-level defaults (managed by admins)",
        "**User Configuration**: User-specific overrides (higher precedence)",
    ])
    pb.add_section("Using Secrets for Sensitive Data", "For sensitive configuration like passwords:")
    pb.add_code_block(
        "Create Secret", "text",
        f'secret_create(name="{app}-secret", namespace="{namespace}", app="{app}", '
        'data="password=mysecretpassword,apiKey=myapikey")',
    )
    pb.add_section("Configuration Precedence", "Values are merged in this order (later overrides earlier):")
    pb.add_list("Precedence Order", [
        "1. Default values from the Helm chart",
        "2. App configuration (ConfigMap/Secret)",
        "3. User configuration (ConfigMap/Secret)",
        "4. Extra configuration (if supported)",
    ])

    pb.add_section("Configuration Best Practices", "")
    pb.add_list("Recommendations", [
        "Start with minimal configuration and add as needed",
        "Use comments to document your configuration choices",
        "Keep sensitive data in Secrets, not ConfigMaps",
        "Version your configuration files in Git",
        "Test configuration changes in non-production first",
        "Use meaningful names for ConfigMaps and Secrets",
        "Regular review and cleanup of unused configurations",
    ])

    pb.add_section("Validate Your Configuration", "")
    pb.add_section("Check Keys", "Check that the ConfigMap holds the keys the app expects:")
    pb.add_code_block(
        "Validation", "text",
        f'config_validate(name="{config_name}", namespace="{namespace}", required_keys="values")',
    )
    pb.add_section("Configuration Troubleshooting", "")
    pb.add_list("Common Issues", [
        "**YAML syntax errors**: Use a YAML validator",
        "**Type mismatches**: Check schema for correct types",
        "**Missing required values**: Review schema requirements",
        "**ConfigMap not found**: Ensure it exists in the right namespace",
        "**Values not applied**: Check configuration precedence",
    ])

    return f"Configuration guide for {app} v{version}", pb.build()


def register_configure_app_prompt(server):

    @server.prompt(name="configure-app", description="App configuration wizard for Giant Swarm apps")
    def configure_app(app: str = "", catalog: str = "", version: str = "", organization: str = "") -> str:
        """App configuration wizard for Giant Swarm apps.

        Args:
            app: App name to configure (e.g., "nginx-ingress-controller")
            catalog: Catalog containing the app
            version: App version to check configuration for
            organization: Organization context for the configuration
        """
        _, text = build_configure_app_prompt(app, catalog, version, organization)
        return text
