# src/dcsim_core/parser/exceptions.py
"""
Defines custom, diagnosable exceptions for loading YAML schematic snapshots.

`ParsingError` covers file-level and syntax problems; `SchemaValidationError` covers
documents that are valid YAML but do not match the snapshot structure checked by
Cerberus. Invalid element values are reported as `ElementDefinitionError` by the
components package.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from ..errors import DiagnosableError, format_diagnostic_report


class BaseParsingError(DiagnosableError):
    """A local base class for all YAML parsing and schema validation errors."""
    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Generic Parsing Error",
            details=str(self),
            suggestion="Please check the format and content of the schematic YAML."
        )


@dataclass()
class ParsingError(BaseParsingError):
    """
    Raised when a snapshot cannot be loaded at all: missing or unreadable file,
    invalid YAML syntax, or a root that is not a mapping.
    """
    details: str
    file_path: Optional[Path] = None

    def __str__(self):
        source = f" in file '{self.file_path}'" if self.file_path is not None else ""
        return f"Parsing error{source}: {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="YAML Parsing or File Error",
            details=self.details,
            suggestion="Ensure the file exists, has the correct read permissions, and contains valid YAML syntax.",
            context={'source_file': self.file_path}
        )


@dataclass()
class SchemaValidationError(BaseParsingError):
    """
    Raised when the YAML is syntactically valid but does not conform to the snapshot
    structure (missing keys, unknown element kinds, invalid or duplicate element ids).
    """
    errors: Dict[str, Any]
    file_path: Optional[Path] = None

    def _error_lines(self, prefix: str):
        return [f"  - {prefix} '{k}': {v}" for k, v in sorted(self.errors.items(), key=lambda kv: str(kv[0]))]

    def __str__(self):
        source = f" for file '{self.file_path}'" if self.file_path is not None else ""
        return f"YAML schema validation failed{source}:\n" + "\n".join(self._error_lines("In field"))

    def get_diagnostic_report(self) -> str:
        error_list_str = "\n".join(self._error_lines("Field"))
        details = (
            "The structure of the YAML snapshot does not conform to the required schema.\n"
            f"See details for {len(self.errors)} issue(s) below:\n\n{error_list_str}"
        )
        return format_diagnostic_report(
            error_type="YAML Schema Validation Error",
            details=details,
            suggestion="Correct the specified fields to match the documented format. Element ids may only contain letters, numbers and underscores, must be unique, and every element needs 'id', 'kind' and 'value'.",
            context={'source_file': self.file_path}
        )
