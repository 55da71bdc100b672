import dataclasses
import enum
from dataclasses import dataclass
from typing import Optional

from . import emitter
from .merger import merge, inherit_signing
from .models import BuildPlan
from .validator import CompatibilityValidator
from .cli_logger import logger


class RunState(enum.Enum):
    COLLECTING = "collecting"
    MERGING = "merging"
    VALIDATING = "validating"
    EMITTED = "emitted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class ResolutionResult:
    state: RunState
    plan: BuildPlan
    errors: tuple = ()
    serialized: Optional[bytes] = None

    @property
    def emitted(self):
        return self.state is RunState.EMITTED


class Resolver:
    """
    Runs resolutions: collect, merge, validate, then emit or reject.

    The run state lives in each ``resolve`` call and is reported on the
    returned ``ResolutionResult``, so one resolver can serve concurrent runs.
    There are no retries; a rejected run has to be corrected and run again by
    the caller.
    """

    def __init__(self, registry, lookup_signing_identity, registered_identities=None):
        self.registry = registry
        self.validator = CompatibilityValidator(lookup_signing_identity, registered_identities)

    def _enter(self, current, state):
        logger.debug(f"Resolution state: {current.value} -> {state.value}")
        return state

    def resolve(self, base, variant, identity, app_version=None):
        state = RunState.COLLECTING
        plugins = self.registry.freeze()

        state = self._enter(state, RunState.MERGING)
        plan = merge(base, plugins, variant, identity, app_version)

        state = self._enter(state, RunState.VALIDATING)
        report = self.validator.validate(plan)
        if not report.ok:
            state = self._enter(state, RunState.REJECTED)
            return ResolutionResult(state=state, plan=plan, errors=report.errors)

        plan = dataclasses.replace(plan, warnings=plan.warnings + report.warnings)
        serialized = emitter.emit(plan)
        state = self._enter(state, RunState.EMITTED)
        return ResolutionResult(state=state, plan=plan, serialized=serialized)

    def resolve_variants(self, base, variants, identity, fallback="debug", app_version=None):
        """Resolve every variant in ``variants`` (a name -> VariantConfig mapping)."""
        fallback_variant = variants.get(fallback)
        results = {}
        for name, variant in variants.items():
            results[name] = self.resolve(base, inherit_signing(variant, fallback_variant), identity, app_version)
        return results
