"""
RenderContext — State passed between pipeline passes for one request.

Each pass reads prior artifacts and fills only its own fields.
The context lives for one request and is discarded afterwards.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

from kbrt.ir.enums import DiagnosticLevel, RenderStatus
from kbrt.ir.schema import (
    Block,
    Diagnostic,
    Document,
    RenderResult,
    Segment,
    TraceEntry,
)


@dataclass
class RenderRequest:
    """Input to the rendering pipeline."""

    text: str
    theme: Optional[str] = None
    request_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.request_id is None:
            self.request_id = str(uuid4())


@dataclass
class RenderContext:
    """
    Context passed through pipeline passes.

    Each pass may read all fields but should only fill
    the fields it is responsible for.
    """

    # Input
    request: RenderRequest
    raw_text: str
    normalized_text: str = ""
    theme: str = "default"

    # Set by p10_segment
    segments: list[Segment] = field(default_factory=list)

    # Set by p20_classify, spans filled in by p30_inline
    blocks: list[Block] = field(default_factory=list)

    # Set by p70_render
    fragments: list[str] = field(default_factory=list)
    html: Optional[str] = None

    # Trace and diagnostics
    trace: list[TraceEntry] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    status: RenderStatus = RenderStatus.SUCCESS

    start_time: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_request(cls, request: RenderRequest) -> "RenderContext":
        """Create a context from a render request."""
        from kbrt.render.theme import resolve_theme_name

        return cls(
            request=request,
            raw_text=request.text,
            theme=resolve_theme_name(request.theme),
        )

    def add_trace(self, pass_name: str, action: str, **kwargs: Any) -> None:
        """Add a trace entry."""
        self.trace.append(
            TraceEntry(
                id=str(uuid4()),
                timestamp=datetime.now(),
                pass_name=pass_name,
                action=action,
                before=kwargs.get("before"),
                after=kwargs.get("after"),
                affected_ids=kwargs.get("affected_ids", []),
            )
        )

    def add_diagnostic(
        self,
        level: str,
        code: str,
        message: str,
        source: str,
        affected_ids: Optional[list[str]] = None,
    ) -> None:
        """Add a diagnostic message."""
        self.diagnostics.append(
            Diagnostic(
                id=str(uuid4()),
                level=DiagnosticLevel(level),
                code=code,
                message=message,
                source=source,
                affected_ids=affected_ids or [],
            )
        )

    def to_result(self) -> RenderResult:
        """Convert context to final RenderResult."""
        duration_ms = (datetime.now() - self.start_time).total_seconds() * 1000
        return RenderResult(
            request_id=self.request.request_id or str(uuid4()),
            timestamp=self.start_time,
            processing_duration_ms=duration_ms,
            theme=self.theme,
            segments=self.segments,
            document=Document(blocks=self.blocks),
            html=self.html if self.status != RenderStatus.ERROR and self.html else "",
            status=self.status,
            trace=self.trace,
            diagnostics=self.diagnostics,
        )
