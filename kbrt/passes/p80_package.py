"""
Pass 80 — Packaging

Final packaging of the document, markup, trace, and diagnostics.
Runs output validators before returning.
"""

from kbrt.core.context import RenderContext
from kbrt.core.logging import get_pass_logger
from kbrt.ir.enums import RenderStatus
from kbrt.validate.idempotence import IdempotenceValidator
from kbrt.validate.schema import SchemaValidator

PASS_NAME = "p80_package"
log = get_pass_logger(PASS_NAME)

VALIDATORS = [SchemaValidator(), IdempotenceValidator()]


def package(ctx: RenderContext) -> RenderContext:
    """
    Package the final output.

    This pass:
    - Runs the output validators
    - Sets final status
    """
    log.verbose("starting_packaging")

    if ctx.html is None:
        ctx.html = ""

    errors: list[str] = []
    for validator in VALIDATORS:
        for error in validator.validate(ctx):
            errors.append(error)
            log.warning("validation_error", validator=validator.name, error=error)
            ctx.add_diagnostic(
                level="warning",
                code="VALIDATION_FAILED",
                message=f"[{validator.name}] {error}",
                source=PASS_NAME,
            )

    if errors and ctx.status == RenderStatus.SUCCESS:
        ctx.status = RenderStatus.PARTIAL

    log.verbose(
        "packaged",
        status=ctx.status.value,
        segments=len(ctx.segments),
        blocks=len(ctx.blocks),
        diagnostics=len(ctx.diagnostics),
        validation_errors=len(errors),
    )

    ctx.add_trace(
        pass_name=PASS_NAME,
        action="packaged",
        after=f"status={ctx.status.value}, errors={len(errors)}",
    )

    return ctx
