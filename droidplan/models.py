"""
Typed, immutable records for the three descriptor layers and the resolved plan.
"""
from dataclasses import dataclass, field, fields
from typing import Optional

TOOLCHAIN_FIELDS = (
    "compile_target_version",
    "min_supported_version",
    "target_version",
    "native_toolchain_version",
    "language_level",
)
VERSION_FIELDS = ("compile_target_version", "min_supported_version", "target_version")

BASE_LAYER = "base"
APP_LAYER = "app"


def plugin_layer(name):
    return f"plugin:{name}"


def variant_layer(name):
    return f"variant:{name}"


@dataclass(frozen=True)
class ToolchainDescriptor:
    compile_target_version: int
    min_supported_version: int
    target_version: int
    native_toolchain_version: str = ""
    language_level: str = ""


@dataclass(frozen=True)
class ToolchainOverrides:
    """Explicit variant-level toolchain values. ``None`` means not set."""
    compile_target_version: Optional[int] = None
    min_supported_version: Optional[int] = None
    target_version: Optional[int] = None
    native_toolchain_version: Optional[str] = None
    language_level: Optional[str] = None

    def explicit(self):
        """Return the overridden fields as an ordered dict."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


@dataclass(frozen=True)
class PluginActivation:
    name: str
    required_min_toolchain: int = 0
    ordered: bool = False
    after: tuple = ()
    min_supported_version: Optional[int] = None


@dataclass(frozen=True)
class IdentityOverride:
    canonical_id: str
    effective_id: str

    @property
    def overridden(self):
        return bool(self.effective_id) and self.effective_id != self.canonical_id


@dataclass(frozen=True)
class AppVersion:
    """versionCode / versionName of the packaged artifact. ``None`` means not set."""
    code: Optional[int] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class VariantConfig:
    name: str
    signing_ref: Optional[str] = None
    overrides: ToolchainOverrides = field(default_factory=ToolchainOverrides)
    inherited_from: Optional[str] = None
    version: AppVersion = field(default_factory=AppVersion)


@dataclass(frozen=True)
class SigningIdentity:
    name: str
    store_file: str = ""
    key_alias: str = ""
    debuggable: bool = False


@dataclass(frozen=True)
class BuildPlan:
    toolchain: ToolchainDescriptor
    plugins: tuple
    required_min_toolchain: int
    variant: VariantConfig
    identity: IdentityOverride
    provenance: tuple = ()
    warnings: tuple = ()
    version: AppVersion = field(default_factory=AppVersion)

    @property
    def activation_order(self):
        return tuple(p.name for p in self.plugins)

    def source_of(self, field_name):
        """Return the layer that supplied ``field_name``, or ``base``."""
        return dict(self.provenance).get(field_name, BASE_LAYER)
