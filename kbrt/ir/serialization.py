"""
IR Serialization — JSON import/export for pipeline artifacts.
"""

from pathlib import Path
from typing import Union

from kbrt.ir.schema import RenderResult, Report


def to_json(result: Union[RenderResult, Report], indent: int = 2) -> str:
    """Serialize a RenderResult or Report to JSON string."""
    return result.model_dump_json(indent=indent)


def from_json(json_str: str) -> RenderResult:
    """Deserialize a RenderResult from JSON string."""
    return RenderResult.model_validate_json(json_str)


def report_from_json(json_str: str) -> Report:
    """Deserialize a Report from JSON string."""
    return Report.model_validate_json(json_str)


def save(result: Union[RenderResult, Report], path: Union[str, Path]) -> None:
    """Save an artifact to a JSON file."""
    Path(path).write_text(to_json(result))


def load(path: Union[str, Path]) -> RenderResult:
    """Load a RenderResult from a JSON file."""
    return from_json(Path(path).read_text())
