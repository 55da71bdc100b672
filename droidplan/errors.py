from dataclasses import dataclass


class DroidPlanError(Exception):
    """Base class for every error raised by droidplan."""


class ConfigError(DroidPlanError):
    """A descriptor layer could not be read or is malformed."""


class RegistryError(DroidPlanError):
    pass


class DuplicateNameError(RegistryError):
    def __init__(self, name):
        super().__init__(f"Plugin '{name}' is already registered.")
        self.name = name


class PluginOrderError(RegistryError):
    def __init__(self, name, must_follow):
        super().__init__(
            f"Plugin '{must_follow}' must be registered after '{name}', "
            f"but it was registered first."
        )
        self.name = name
        self.must_follow = must_follow


class RegistryFrozenError(RegistryError):
    def __init__(self, name):
        super().__init__(f"Cannot register '{name}': the plugin registry is frozen.")
        self.name = name


class SigningIdentityNotFound(DroidPlanError):
    def __init__(self, name):
        super().__init__(f"Signing identity '{name}' is not known.")
        self.name = name


class PlanFormatError(DroidPlanError):
    """A serialized plan could not be parsed back."""


# ---------------- Validation results ----------------
# These are collected and returned by the validator, never raised.

@dataclass(frozen=True)
class CompatibilityError:
    layer: str
    field: str
    message: str

    @property
    def kind(self):
        return type(self).__name__

    def __str__(self):
        return f"{self.kind} [{self.layer}] {self.field}: {self.message}"


@dataclass(frozen=True)
class VersionRangeViolation(CompatibilityError):
    pass


@dataclass(frozen=True)
class UnsatisfiedPluginRequirement(CompatibilityError):
    plugin: str = ""
    required: int = 0
    available: int = 0


@dataclass(frozen=True)
class UnresolvedSigningIdentity(CompatibilityError):
    pass


@dataclass(frozen=True)
class MissingCanonicalIdentity(CompatibilityError):
    pass


@dataclass(frozen=True)
class MissingEffectiveIdentity(CompatibilityError):
    pass


@dataclass(frozen=True)
class UnregisteredServiceIdentity(CompatibilityError):
    pass
