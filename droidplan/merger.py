"""
Precedence merger.

Combines the base toolchain descriptor, the plugin activations and the
variant overrides into a candidate ``BuildPlan``. Explicit variant values win
over plugin-declared minimums, which win over base defaults. Merging never
fails: every correctness check is left to the validator.
"""
import dataclasses

from .models import (
    AppVersion,
    BuildPlan,
    ToolchainDescriptor,
    TOOLCHAIN_FIELDS,
    APP_LAYER,
    BASE_LAYER,
    plugin_layer,
    variant_layer,
)
from .errors import ConfigError
from .cli_logger import logger


def inherit_signing(variant, fallback):
    """Fill a missing ``signing_ref`` on ``variant`` from ``fallback``."""
    if variant.signing_ref or fallback is None or variant.name == fallback.name:
        return variant
    if not fallback.signing_ref:
        return variant
    logger.debug(f"Variant '{variant.name}' inherits signing_ref '{fallback.signing_ref}' from '{fallback.name}'")
    return dataclasses.replace(variant, signing_ref=fallback.signing_ref, inherited_from=fallback.name)


def select_variant(variants, name, fallback="debug"):
    """Look up variant ``name`` and apply signing inheritance from ``fallback``."""
    if name not in variants:
        known = ", ".join(sorted(variants)) or "none"
        raise ConfigError(f"Unknown variant '{name}'. Known variants: {known}.")
    return inherit_signing(variants[name], variants.get(fallback))


def _plugin_minimum(plugins):
    required, source = 0, None
    for plugin in plugins:
        if plugin.required_min_toolchain > required:
            required, source = plugin.required_min_toolchain, plugin.name
    return required, source


def _plugin_floor(plugins):
    floor, source = None, None
    for plugin in plugins:
        if plugin.min_supported_version is None:
            continue
        if floor is None or plugin.min_supported_version > floor:
            floor, source = plugin.min_supported_version, plugin.name
    return floor, source


def _merge_version(app_version, variant, provenance):
    resolved = {}
    for attr, key in (("code", "version_code"), ("name", "version_name")):
        value = getattr(variant.version, attr)
        if value is not None:
            provenance[key] = variant_layer(variant.name)
        else:
            value = getattr(app_version, attr)
            if value is not None:
                provenance[key] = APP_LAYER
        resolved[attr] = value
    return AppVersion(**resolved)


def merge(base, plugins, variant, identity, app_version=None):
    plugins = tuple(plugins)
    values = {name: getattr(base, name) for name in TOOLCHAIN_FIELDS}
    provenance = {name: BASE_LAYER for name in TOOLCHAIN_FIELDS}
    warnings = []

    floor, floor_source = _plugin_floor(plugins)
    if floor is not None and floor > values["min_supported_version"]:
        values["min_supported_version"] = floor
        provenance["min_supported_version"] = plugin_layer(floor_source)

    for name, value in variant.overrides.explicit().items():
        if name == "min_supported_version" and floor is not None and value < floor:
            warnings.append(
                f"variant '{variant.name}' sets min_supported_version={value}, "
                f"below the {floor} required by plugin '{floor_source}'"
            )
        values[name] = value
        provenance[name] = variant_layer(variant.name)

    required, required_source = _plugin_minimum(plugins)
    if required_source is not None:
        provenance["required_min_toolchain"] = plugin_layer(required_source)

    if variant.signing_ref:
        provenance["signing_ref"] = variant_layer(variant.inherited_from or variant.name)

    version = _merge_version(app_version or AppVersion(), variant, provenance)

    plan = BuildPlan(
        toolchain=ToolchainDescriptor(**values),
        plugins=plugins,
        required_min_toolchain=required,
        variant=variant,
        identity=identity,
        provenance=tuple(provenance.items()),
        warnings=tuple(warnings),
        version=version,
    )
    logger.debug(f"Merged candidate plan for variant '{variant.name}' with {len(plugins)} plugin(s)")
    return plan
