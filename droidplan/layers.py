"""
Turns a parsed droidplan.toml into the typed descriptor layers.

Shape errors (wrong types, unknown keys, missing required values) raise
ConfigError. Semantic problems such as an empty canonical identity are left
for the validator so they are reported together with everything else.
"""
import os
from dataclasses import dataclass, field
from typing import Optional

from .errors import ConfigError
from .models import (
    AppVersion,
    IdentityOverride,
    PluginActivation,
    ToolchainDescriptor,
    ToolchainOverrides,
    VariantConfig,
    TOOLCHAIN_FIELDS,
    VERSION_FIELDS,
)
from .signing import SigningTable

DEFAULT_FALLBACK = "debug"
APP_VERSION_KEYS = ("version_code", "version_name")


@dataclass(frozen=True)
class DescriptorLayers:
    toolchain: ToolchainDescriptor
    plugins: tuple
    variants: dict
    fallback: str
    identity: IdentityOverride
    signing: SigningTable
    service_config: Optional[str] = None
    app_version: AppVersion = field(default_factory=AppVersion)


def _table(conf, key):
    value = conf.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"[{key}] must be a table.")
    return value


def _as_int(value, where):
    if isinstance(value, bool):
        raise ConfigError(f"{where} must be an integer, got {value!r}.")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ConfigError(f"{where} must be an integer, got {value!r}.")


def _as_str(value, where):
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        return str(value)
    raise ConfigError(f"{where} must be a string, got {value!r}.")


def _as_bool(value, where):
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ConfigError(f"{where} must be a boolean, got {value!r}.")


def _convert(name, value, where):
    if name in VERSION_FIELDS:
        return _as_int(value, where)
    return _as_str(value, where)


def load_toolchain(conf):
    table = _table(conf, "toolchain")
    unknown = set(table) - set(TOOLCHAIN_FIELDS)
    if unknown:
        raise ConfigError(f"Unknown keys in [toolchain]: {', '.join(sorted(unknown))}.")
    values = {}
    for name in VERSION_FIELDS:
        if name not in table:
            raise ConfigError(f"[toolchain] is missing required key '{name}'.")
    for name in TOOLCHAIN_FIELDS:
        if name in table:
            values[name] = _convert(name, table[name], f"toolchain.{name}")
    return ToolchainDescriptor(**values)


def load_plugins(conf):
    entries = conf.get("plugins", [])
    if not isinstance(entries, list):
        raise ConfigError("[[plugins]] must be an array of tables.")
    plugins = []
    for position, entry in enumerate(entries, start=1):
        where = f"plugins[{position}]"
        if not isinstance(entry, dict) or not entry.get("name"):
            raise ConfigError(f"{where} must be a table with a non-empty 'name'.")
        after = entry.get("after", [])
        if isinstance(after, str):
            after = [after]
        if not isinstance(after, list):
            raise ConfigError(f"{where}.after must be a list of plugin names.")
        floor = entry.get("min_supported_version")
        plugins.append(PluginActivation(
            name=_as_str(entry["name"], f"{where}.name"),
            required_min_toolchain=_as_int(entry.get("required_min_toolchain", 0), f"{where}.required_min_toolchain"),
            ordered=_as_bool(entry.get("ordered", False), f"{where}.ordered"),
            after=tuple(_as_str(a, f"{where}.after") for a in after),
            min_supported_version=None if floor is None else _as_int(floor, f"{where}.min_supported_version"),
        ))
    return tuple(plugins)


def load_variants(conf):
    table = _table(conf, "variants")
    fallback = _as_str(table.get("fallback", DEFAULT_FALLBACK), "variants.fallback")
    variants = {}
    for name, entry in table.items():
        if name == "fallback":
            continue
        if not isinstance(entry, dict):
            raise ConfigError(f"[variants.{name}] must be a table.")
        unknown = set(entry) - set(TOOLCHAIN_FIELDS) - {"signing_ref"} - set(APP_VERSION_KEYS)
        if unknown:
            raise ConfigError(f"Unknown keys in [variants.{name}]: {', '.join(sorted(unknown))}.")
        overrides = {
            key: _convert(key, entry[key], f"variants.{name}.{key}")
            for key in TOOLCHAIN_FIELDS if key in entry
        }
        signing_ref = entry.get("signing_ref")
        variants[name] = VariantConfig(
            name=name,
            signing_ref=None if signing_ref in (None, "") else _as_str(signing_ref, f"variants.{name}.signing_ref"),
            overrides=ToolchainOverrides(**overrides),
            version=_load_version(entry, f"variants.{name}"),
        )
    if not variants:
        # Android's implicit build types.
        variants = {
            "debug": VariantConfig(name="debug", signing_ref="debug"),
            "release": VariantConfig(name="release"),
        }
    return variants, fallback


def _load_version(table, where):
    code = table.get("version_code")
    name = table.get("version_name")
    if code is not None:
        code = _as_int(code, f"{where}.version_code")
        if code < 1:
            raise ConfigError(f"{where}.version_code must be a positive integer, got {code}.")
    return AppVersion(
        code=code,
        name=None if name in (None, "") else _as_str(name, f"{where}.version_name"),
    )


def load_app_version(conf):
    table = _table(conf, "app")
    unknown = set(table) - set(APP_VERSION_KEYS)
    if unknown:
        raise ConfigError(f"Unknown keys in [app]: {', '.join(sorted(unknown))}.")
    return _load_version(table, "app")


def load_identity(conf):
    table = _table(conf, "identity")
    canonical_id = _as_str(table.get("canonical_id", ""), "identity.canonical_id")
    effective_id = _as_str(table.get("effective_id", canonical_id), "identity.effective_id")
    return IdentityOverride(canonical_id=canonical_id, effective_id=effective_id)


def load_layers(conf, path="."):
    if not conf:
        raise ConfigError("Configuration is empty.")
    variants, fallback = load_variants(conf)
    service_config = _table(conf, "identity").get("service_config")
    if service_config:
        service_config = os.path.join(path, _as_str(service_config, "identity.service_config"))
    signing_conf = _table(conf, "signing")
    for name, entry in signing_conf.items():
        if not isinstance(entry, dict):
            raise ConfigError(f"[signing.{name}] must be a table.")
    return DescriptorLayers(
        toolchain=load_toolchain(conf),
        plugins=load_plugins(conf),
        variants=variants,
        fallback=fallback,
        identity=load_identity(conf),
        signing=SigningTable.from_config(signing_conf),
        service_config=service_config or None,
        app_version=load_app_version(conf),
    )
