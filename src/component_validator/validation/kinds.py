"""Built-in schemas for the supported manifest kinds."""

from ..config import PolicyConfig
from .predicates import (
    contains_semver_suffix,
    equals,
    exact_set,
    kebab_case,
    mapping_contains_entry,
    non_empty,
    not_contains,
    not_equals,
    required,
)
from .schema import Schema, SchemaRegistry, dive, rule

TEKTON_API_VERSION = "tekton.dev/v1"
COMPONENT_API_VERSION = "supply-chain.apps.tanzu.vmware.com/v1alpha1"
CATALOG_LABEL = "supply-chain.apps.tanzu.vmware.com/catalog"
CATALOG_VALUE = "tanzu"

SECURITY_CONTEXT = "spec.stepTemplate.securityContext"
SECURITY_CONTEXT_GROUP = "security-context"


def _named_element():
    return (rule("name", required(), kebab_case()),)


def task_schema(policy: PolicyConfig | None = None) -> Schema:
    policy = policy or PolicyConfig()
    group = SECURITY_CONTEXT_GROUP

    return Schema(
        kind="Task",
        api_version=TEKTON_API_VERSION,
        rules=(
            rule("apiVersion", required(), equals(TEKTON_API_VERSION)),
            rule("kind", required(), equals("Task")),
            rule("metadata", required()),
            rule("metadata.name", required(), kebab_case()),
            rule("spec", required()),
            dive("spec.params", rules=_named_element()),
            dive("spec.results", rules=_named_element()),
            rule("spec.stepTemplate", required()),
            rule(SECURITY_CONTEXT, required()),
            rule(f"{SECURITY_CONTEXT}.allowPrivilegeEscalation", equals(False), group=group),
            rule(f"{SECURITY_CONTEXT}.capabilities", required(), group=group),
            rule(f"{SECURITY_CONTEXT}.capabilities.drop", exact_set({"ALL"}), group=group),
            rule(f"{SECURITY_CONTEXT}.runAsNonRoot", required(), equals(True), group=group),
            rule(f"{SECURITY_CONTEXT}.runAsUser", required(), not_equals(0), group=group),
            rule(f"{SECURITY_CONTEXT}.seccompProfile", required(), group=group),
            rule(f"{SECURITY_CONTEXT}.seccompProfile.type", required(), equals("RuntimeDefault"), group=group),
        ),
        fail_fast_groups=frozenset({group}) if policy.security_context_fail_fast else frozenset(),
    )


def pipeline_schema(policy: PolicyConfig | None = None) -> Schema:
    return Schema(
        kind="Pipeline",
        api_version=TEKTON_API_VERSION,
        rules=(
            rule("apiVersion", required(), equals(TEKTON_API_VERSION)),
            rule("kind", required(), equals("Pipeline")),
            rule("metadata.name", required(), kebab_case()),
        ),
    )


def component_schema(policy: PolicyConfig | None = None) -> Schema:
    policy = policy or PolicyConfig()

    name_constraints = [required(), kebab_case(), contains_semver_suffix()]
    if policy.forbid_component_in_name:
        name_constraints.append(not_contains("component"))

    return Schema(
        kind="Component",
        api_version=COMPONENT_API_VERSION,
        rules=(
            rule("apiVersion", required(), equals(COMPONENT_API_VERSION)),
            rule("kind", required(), equals("Component")),
            rule("metadata.name", *name_constraints),
            rule("metadata.labels", mapping_contains_entry(CATALOG_LABEL, CATALOG_VALUE)),
            rule("spec", required()),
            rule("spec.description", required(), non_empty()),
            rule("spec.pipelineRun", required()),
            dive("spec.pipelineRun.params", rules=_named_element()),
            rule("spec.pipelineRun.pipelineRef", required()),
            rule("spec.pipelineRun.pipelineRef.name", required(), kebab_case()),
        ),
    )


BUILTIN_SCHEMAS = (task_schema, pipeline_schema, component_schema)


def default_registry(policy: PolicyConfig | None = None) -> SchemaRegistry:
    """Registry holding the built-in schemas under the given policy."""
    return SchemaRegistry([build(policy) for build in BUILTIN_SCHEMAS])
