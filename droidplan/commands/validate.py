import click
import sys
from ..decorators import handle_exceptions, EXIT_REJECTED
from ..merger import select_variant, merge
from ..validator import CompatibilityValidator
from ..cli_logger import logger
from ._project import load_project, report_rejection

@click.command()
@click.pass_context
@click.option("--variant", "-V", "variant_names", multiple=True, help="Variant to check. Repeat for several; defaults to all.")
@handle_exceptions
def validate(ctx, variant_names):
    """Check the configuration without emitting a plan."""
    layers, registry, registered = load_project(ctx.obj["path"])
    plugins = registry.freeze()
    validator = CompatibilityValidator(layers.signing, registered_identities=registered)

    rejected = False
    for name in variant_names or sorted(layers.variants):
        variant = select_variant(layers.variants, name, layers.fallback)
        logger.info(f"Validating variant '{name}'...")
        plan = merge(layers.toolchain, plugins, variant, layers.identity, layers.app_version)
        report = validator.validate(plan)
        for warning in plan.warnings + report.warnings:
            logger.warning(warning)
        if report.ok:
            logger.success(f"Variant '{name}' is valid.")
        else:
            rejected = True
            report_rejection(report.errors)

    if rejected:
        sys.exit(EXIT_REJECTED)
