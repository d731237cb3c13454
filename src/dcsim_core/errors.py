# src/dcsim_core/errors.py
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class DCSimError(Exception):
    """Base class for the errors DCSim Core lets reach the caller."""
    pass

class SchematicLoadError(DCSimError):
    """
    A schematic file could not be turned into a snapshot. The message is a
    pre-formatted diagnostic report.
    """
    pass

class SolveRunError(DCSimError):
    """
    An unexpected internal fault during a solve. Singular systems and input errors come
    back as unsolved results instead. The message is a pre-formatted diagnostic report.
    """
    pass


class DiagnosableError(Exception, ABC):
    """Internal error that knows how to render itself as a diagnostic report."""

    @abstractmethod
    def get_diagnostic_report(self) -> str:
        raise NotImplementedError


# Context keys shown in a report header, in display order.
_CONTEXT_LABELS: Tuple[Tuple[str, str], ...] = (
    ("element_id", "Element"),
    ("source_file", "Source File"),
    ("matrix_size", "Matrix Size"),
)

_RULE = "=" * 63


def _indented(text: str) -> str:
    return "\n".join(f"  {line}" for line in text.splitlines())


def format_diagnostic_report(
    error_type: str,
    details: str,
    suggestion: str,
    context: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Renders the multi-line report shared by every diagnosable error and by
    `SolveRunError`.

    Args:
        error_type: Short category, e.g. "Singular Matrix Encountered".
        details: Description of the problem; may span several lines.
        suggestion: What the user can change. Omitted when empty.
        context: Optional header values keyed by 'element_id', 'source_file' or
                 'matrix_size'. Empty values are skipped.
    """
    context = context or {}
    header = [f"{'Error Type:':<16}{error_type}"]
    header += [
        f"{label + ':':<16}{context[key]}" for key, label in _CONTEXT_LABELS if context.get(key)
    ]

    sections = ["\n".join(header), f"Details:\n{_indented(details)}"]
    if suggestion:
        sections.append(f"Suggestion:\n{_indented(suggestion)}")

    return "\n".join([
        "\n",
        " DCSim Core: Diagnostic Report ".center(len(_RULE), "="),
        "\n\n".join(sections),
        _RULE,
    ])
