import click
import sys
from .. import emitter
from ..decorators import handle_exceptions, EXIT_REJECTED
from ..merger import select_variant
from ..resolver import Resolver
from ..cli_logger import logger
from ._project import load_project, report_rejection

@click.command()
@click.pass_context
@click.option("--variant", "-V", "variant_name", default="release", show_default=True, help="Variant to resolve (e.g., debug, release).")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Write the plan to this file instead of stdout.")
@click.option("--digest", is_flag=True, help="Also print the SHA-256 digest of the emitted plan.")
@handle_exceptions
def resolve(ctx, variant_name, output, digest):
    """Resolve, validate and emit the build plan for one variant.

    Exits 0 when the plan is emitted, 1 when validation rejects it and 2 when
    an input layer is malformed.
    """
    layers, registry, registered = load_project(ctx.obj["path"])
    variant = select_variant(layers.variants, variant_name, layers.fallback)

    logger.info(f"Resolving build plan for variant '{variant.name}'...")
    resolver = Resolver(registry, layers.signing, registered_identities=registered)
    result = resolver.resolve(layers.toolchain, variant, layers.identity, layers.app_version)

    if not result.emitted:
        report_rejection(result.errors)
        sys.exit(EXIT_REJECTED)

    for warning in result.plan.warnings:
        logger.warning(warning)

    if output:
        with open(output, "wb") as f:
            f.write(result.serialized)
        logger.success(f"Build plan for '{variant.name}' written to {output}")
    else:
        click.echo(result.serialized.decode("utf-8"), nl=False)
        logger.success(f"Build plan for '{variant.name}' emitted.")

    if digest:
        click.echo(emitter.plan_digest(result.serialized))
