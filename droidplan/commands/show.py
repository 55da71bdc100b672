import click
from .. import emitter
from ..decorators import handle_exceptions
from ..cli_logger import logger

@click.command()
@click.argument("plan_file", type=click.Path(exists=True, dir_okay=False))
@handle_exceptions
def show(plan_file):
    """Summarize an emitted build plan file and print its digest."""
    with open(plan_file, "rb") as f:
        serialized = f.read()
    plan = emitter.parse_plan(serialized)

    toolchain = plan.toolchain
    logger.step_info(f"Variant:     {plan.variant.name} (signing: {plan.variant.signing_ref or '-'})")
    logger.step_info(f"Identity:    {plan.identity.effective_id} (canonical {plan.identity.canonical_id})")
    logger.step_info(f"Version:     {plan.version.name or '-'} (code {plan.version.code or '-'})")
    logger.step_info(
        f"Toolchain:   min {toolchain.min_supported_version} / target {toolchain.target_version} "
        f"/ compile {toolchain.compile_target_version}"
    )
    logger.step_info(f"Native:      {toolchain.native_toolchain_version or '-'}")
    logger.step_info(f"Language:    {toolchain.language_level or '-'}")
    logger.step_info(f"Plugins:     {', '.join(plan.activation_order) or '-'}")
    for warning in plan.warnings:
        logger.warning(warning)
    click.echo(f"Digest:      {emitter.plan_digest(serialized)}")
