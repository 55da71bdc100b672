"""
Deterministic serialization of a validated ``BuildPlan``.

The same plan always produces byte-identical output so that build executors
can cache on the plan digest. Nothing here touches the disk or the network.
"""
import hashlib
import json

from .errors import PlanFormatError
from .models import (
    AppVersion,
    BuildPlan,
    IdentityOverride,
    PluginActivation,
    ToolchainDescriptor,
    ToolchainOverrides,
    VariantConfig,
    TOOLCHAIN_FIELDS,
)

FORMAT_VERSION = 1


def _plugin_to_dict(plugin):
    return {
        "name": plugin.name,
        "required_min_toolchain": plugin.required_min_toolchain,
        "ordered": plugin.ordered,
        "after": list(plugin.after),
        "min_supported_version": plugin.min_supported_version,
    }


def _version_to_dict(version):
    return {"code": version.code, "name": version.name}


def plan_to_dict(plan):
    variant = plan.variant
    return {
        "format": FORMAT_VERSION,
        "toolchain": {name: getattr(plan.toolchain, name) for name in TOOLCHAIN_FIELDS},
        "required_min_toolchain": plan.required_min_toolchain,
        "plugins": [_plugin_to_dict(p) for p in plan.plugins],
        "activation_order": list(plan.activation_order),
        "variant": {
            "name": variant.name,
            "signing_ref": variant.signing_ref,
            "inherited_from": variant.inherited_from,
            "overrides": {name: getattr(variant.overrides, name) for name in TOOLCHAIN_FIELDS},
            "version": _version_to_dict(variant.version),
        },
        "identity": {
            "canonical_id": plan.identity.canonical_id,
            "effective_id": plan.identity.effective_id,
        },
        "version": _version_to_dict(plan.version),
        "provenance": dict(plan.provenance),
        "warnings": list(plan.warnings),
    }


def emit(plan):
    text = json.dumps(plan_to_dict(plan), indent=2, ensure_ascii=False)
    return (text + "\n").encode("utf-8")


def plan_digest(serialized):
    return hashlib.sha256(serialized).hexdigest()


def parse_plan(serialized):
    """Rebuild a ``BuildPlan`` from the output of ``emit``."""
    try:
        data = json.loads(serialized)
    except (UnicodeDecodeError, ValueError) as e:
        raise PlanFormatError(f"Serialized plan is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise PlanFormatError("Serialized plan must be a JSON object.")
    if data.get("format") != FORMAT_VERSION:
        raise PlanFormatError(f"Unsupported plan format {data.get('format')!r}, expected {FORMAT_VERSION}.")

    try:
        variant = data["variant"]
        plugins = tuple(
            PluginActivation(
                name=p["name"],
                required_min_toolchain=p["required_min_toolchain"],
                ordered=p["ordered"],
                after=tuple(p["after"]),
                min_supported_version=p["min_supported_version"],
            )
            for p in data["plugins"]
        )
        if [p.name for p in plugins] != data["activation_order"]:
            raise PlanFormatError("activation_order does not match the plugin list.")
        return BuildPlan(
            toolchain=ToolchainDescriptor(**data["toolchain"]),
            plugins=plugins,
            required_min_toolchain=data["required_min_toolchain"],
            variant=VariantConfig(
                name=variant["name"],
                signing_ref=variant["signing_ref"],
                overrides=ToolchainOverrides(**variant["overrides"]),
                inherited_from=variant["inherited_from"],
                version=AppVersion(**variant["version"]),
            ),
            identity=IdentityOverride(**data["identity"]),
            version=AppVersion(**data["version"]),
            provenance=tuple(data["provenance"].items()),
            warnings=tuple(data["warnings"]),
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise PlanFormatError(f"Serialized plan is missing or has a malformed field: {e}") from e
