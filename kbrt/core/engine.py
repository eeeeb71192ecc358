"""
Engine — Pipeline orchestration.

The engine selects a pipeline, runs passes in order,
and packages output. A failing pass never escapes to the caller:
it is logged, recorded as a diagnostic, and the result is marked as error.

The engine is NOT where parsing logic lives.
"""

from dataclasses import dataclass
from typing import Optional

from kbrt.core.context import RenderContext, RenderRequest
from kbrt.core.contracts import Pass
from kbrt.core.logging import RenderLogger
from kbrt.ir.enums import RenderStatus
from kbrt.ir.schema import RenderResult


@dataclass
class Pipeline:
    """A named sequence of passes."""

    id: str
    name: str
    passes: list[Pass]


class Engine:
    """
    Pipeline orchestrator.

    Runs passes in order, handles errors, and packages results.
    """

    def __init__(self) -> None:
        self._pipelines: dict[str, Pipeline] = {}

    def register_pipeline(self, pipeline: Pipeline) -> None:
        """Register a pipeline by ID."""
        self._pipelines[pipeline.id] = pipeline

    def list_pipelines(self) -> list[str]:
        """List registered pipeline IDs."""
        return list(self._pipelines.keys())

    def run(
        self,
        request: RenderRequest,
        pipeline_id: Optional[str] = None,
    ) -> RenderResult:
        """
        Run a rendering.

        Args:
            request: The render request
            pipeline_id: Which pipeline to use (default: 'default')

        Returns:
            RenderResult with document IR, markup, trace, and diagnostics
        """
        pipeline_id = pipeline_id or "default"
        ctx = RenderContext.from_request(request)

        if pipeline_id not in self._pipelines:
            ctx.status = RenderStatus.ERROR
            ctx.add_diagnostic(
                level="error",
                code="PIPELINE_NOT_FOUND",
                message=f"Pipeline '{pipeline_id}' not registered",
                source="engine",
            )
            return ctx.to_result()

        pipeline = self._pipelines[pipeline_id]
        tlog = RenderLogger(request.request_id)
        tlog.bind(pipeline=pipeline_id, theme=ctx.theme)

        for pass_fn in pipeline.passes:
            pass_name = pass_fn.__name__
            try:
                tlog.pass_start(pass_name)
                ctx = pass_fn(ctx)
                tlog.pass_end(pass_name)
            except Exception as e:
                tlog.pass_error(pass_name, e)
                ctx.status = RenderStatus.ERROR
                ctx.add_diagnostic(
                    level="error",
                    code="PASS_ERROR",
                    message=f"Pass '{pass_name}' failed: {e}",
                    source="engine",
                )
                ctx.add_trace(pass_name=pass_name, action="error")
                break

        tlog.render_complete(
            status=ctx.status.value,
            segments=len(ctx.segments),
            blocks=len(ctx.blocks),
            diagnostics=len(ctx.diagnostics),
        )

        return ctx.to_result()


def setup_default_pipeline(engine: Engine) -> None:
    """Register the default document rendering pipeline."""
    from kbrt.passes import classify, format_inline, normalize, package, render, segment

    engine.register_pipeline(
        Pipeline(
            id="default",
            name="Default KBRT Pipeline",
            passes=[
                normalize,
                segment,
                classify,
                format_inline,
                render,
                package,
            ],
        )
    )


# Global engine instance
_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """Get or create the global engine with the default pipeline registered."""
    global _engine
    if _engine is None:
        _engine = Engine()
        setup_default_pipeline(_engine)
    return _engine


def render_document(
    text: str,
    theme: Optional[str] = None,
    pipeline_id: Optional[str] = None,
) -> RenderResult:
    """
    Convenience function for simple renderings.

    Args:
        text: Raw model-generated article text
        theme: Style theme name (default: KBRT_THEME or 'default')
        pipeline_id: Which pipeline to use

    Returns:
        RenderResult
    """
    request = RenderRequest(text=text, theme=theme)
    return get_engine().run(request, pipeline_id)


def render_html(text: str, theme: Optional[str] = None) -> str:
    """Render text straight to the final markup string."""
    return render_document(text, theme=theme).html
