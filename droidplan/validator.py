from dataclasses import dataclass

from packaging.version import Version, InvalidVersion

from .errors import (
    SigningIdentityNotFound,
    VersionRangeViolation,
    UnsatisfiedPluginRequirement,
    UnresolvedSigningIdentity,
    MissingCanonicalIdentity,
    MissingEffectiveIdentity,
    UnregisteredServiceIdentity,
)
from .models import plugin_layer, variant_layer
from .cli_logger import logger

RELEASE_VARIANT = "release"


@dataclass(frozen=True)
class ValidationReport:
    errors: tuple = ()
    warnings: tuple = ()

    @property
    def ok(self):
        return not self.errors


class CompatibilityValidator:
    """
    Checks a candidate plan against hard constraints.

    Every check runs independently and all violations are returned together.
    The signing-identity lookup is injected so no signing backend is needed.
    """

    def __init__(self, lookup_signing_identity, registered_identities=None):
        self.lookup_signing_identity = lookup_signing_identity
        self.registered_identities = (
            frozenset(registered_identities) if registered_identities is not None else None
        )

    def validate(self, plan):
        errors, warnings = [], []
        errors.extend(self._check_version_range(plan))
        errors.extend(self._check_plugin_requirements(plan))
        signing_errors, signing_warnings = self._check_signing(plan)
        errors.extend(signing_errors)
        warnings.extend(signing_warnings)
        errors.extend(self._check_identity(plan))
        warnings.extend(self._toolchain_warnings(plan))
        if plan.identity.overridden:
            warnings.append(
                f"publishing as '{plan.identity.effective_id}' instead of canonical '{plan.identity.canonical_id}'"
            )

        report = ValidationReport(errors=tuple(errors), warnings=tuple(warnings))
        logger.debug(f"Validation found {len(report.errors)} error(s) and {len(report.warnings)} warning(s)")
        return report

    def _check_version_range(self, plan):
        toolchain = plan.toolchain
        if toolchain.min_supported_version > toolchain.target_version:
            yield VersionRangeViolation(
                layer=plan.source_of("min_supported_version"),
                field="min_supported_version",
                message=(
                    f"min_supported_version {toolchain.min_supported_version} is greater than "
                    f"target_version {toolchain.target_version} (from {plan.source_of('target_version')})"
                ),
            )
        if toolchain.target_version > toolchain.compile_target_version:
            yield VersionRangeViolation(
                layer=plan.source_of("target_version"),
                field="target_version",
                message=(
                    f"target_version {toolchain.target_version} is greater than "
                    f"compile_target_version {toolchain.compile_target_version} "
                    f"(from {plan.source_of('compile_target_version')})"
                ),
            )

    def _check_plugin_requirements(self, plan):
        available = plan.toolchain.compile_target_version
        for plugin in plan.plugins:
            if plugin.required_min_toolchain > available:
                yield UnsatisfiedPluginRequirement(
                    layer=plugin_layer(plugin.name),
                    field="required_min_toolchain",
                    message=(
                        f"plugin '{plugin.name}' requires toolchain {plugin.required_min_toolchain}, "
                        f"but compile_target_version is {available} (from {plan.source_of('compile_target_version')})"
                    ),
                    plugin=plugin.name,
                    required=plugin.required_min_toolchain,
                    available=available,
                )

    def _check_signing(self, plan):
        variant = plan.variant
        layer = plan.source_of("signing_ref")
        if not variant.signing_ref:
            error = UnresolvedSigningIdentity(
                layer=variant_layer(variant.name),
                field="signing_ref",
                message=f"variant '{variant.name}' has no signing_ref and its fallback provides none",
            )
            return [error], []
        try:
            identity = self.lookup_signing_identity(variant.signing_ref)
        except SigningIdentityNotFound as e:
            error = UnresolvedSigningIdentity(
                layer=layer,
                field="signing_ref",
                message=f"variant '{variant.name}' refers to '{variant.signing_ref}': {e}",
            )
            return [error], []

        warnings = []
        if variant.name == RELEASE_VARIANT and identity.debuggable:
            warnings.append(
                f"variant '{variant.name}' is signed with debuggable identity '{identity.name}'"
            )
        return [], warnings

    def _check_identity(self, plan):
        identity = plan.identity
        if not identity.canonical_id:
            yield MissingCanonicalIdentity(
                layer="identity",
                field="canonical_id",
                message="the canonical identity must be declared even when it is overridden",
            )
        if not identity.effective_id:
            yield MissingEffectiveIdentity(
                layer="identity",
                field="effective_id",
                message="the effective (published) identity is empty",
            )
        elif self.registered_identities is not None and identity.effective_id not in self.registered_identities:
            registered = ", ".join(sorted(self.registered_identities)) or "none"
            yield UnregisteredServiceIdentity(
                layer="identity",
                field="effective_id",
                message=(
                    f"'{identity.effective_id}' is not registered with the external service "
                    f"(registered: {registered})"
                ),
            )

    def _toolchain_warnings(self, plan):
        native = plan.toolchain.native_toolchain_version
        if native:
            try:
                Version(native)
            except InvalidVersion:
                yield (
                    f"native_toolchain_version '{native}' from {plan.source_of('native_toolchain_version')} "
                    f"is not a valid version"
                )


def validate(plan, lookup_signing_identity, registered_identities=None):
    return CompatibilityValidator(lookup_signing_identity, registered_identities).validate(plan)
