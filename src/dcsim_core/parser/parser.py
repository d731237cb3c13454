# src/dcsim_core/parser/parser.py
import logging
import re
import string
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import cerberus
import pint
import yaml

from ..components import ELEMENT_REGISTRY, ElementBase, ElementDefinitionError, make_element
from ..data_structures import Connection, Schematic
from ..errors import DiagnosableError, SchematicLoadError
from ..simulation.config import ConfigParsingError, parse_engine_config
from ..units import to_magnitude
from .exceptions import ParsingError, SchemaValidationError
from .raw_data import ParsedSnapshot

logger = logging.getLogger(__name__)

# Element ids may not contain '.', which separates element id and slot in generated terminal ids.
ID_REGEX = r"^[a-zA-Z_][a-zA-Z0-9_]*$"
ALLOWED_ID_CHARS = set(string.ascii_letters + string.digits + "_")


class EnhancedValidator(cerberus.Validator):
    """Custom Cerberus validator adding identifier and uniqueness rules."""
    def __init__(self, *args, **kwargs):
        super(EnhancedValidator, self).__init__(*args, **kwargs)
        self.rules['id_regex'] = {'schema': {'type': 'boolean'}}
        self.rules['unique_elements_by_key'] = {'schema': {'type': 'string'}}

    def _validate_id_regex(self, constraint: bool, field: str, value: Any):
        if not constraint: return
        if not isinstance(value, str):
            self._error(field, "must be a string to be validated by id_regex.")
            return

        if not re.match(ID_REGEX, value):
            invalid_chars = sorted(list(set(value) - ALLOWED_ID_CHARS))
            message = (
                f"Identifier '{value}' is invalid. Identifiers must start with a letter or underscore, "
                "and can only contain letters, numbers, and underscores. "
                f"This identifier contains the following forbidden character(s): {invalid_chars}"
            )
            self._error(field, message)

    def _validate_unique_elements_by_key(self, key_for_uniqueness: str, field: str, value: List[Dict]):
        """
        Validates that all dictionaries in a list have a unique value for a given key.
        The rule's arguments are validated against this schema:
        {'type': 'string'}
        """
        if not isinstance(value, list):
            return

        seen_keys = set()
        duplicates = []
        for item in value:
            if not isinstance(item, dict):
                continue
            item_key = item.get(key_for_uniqueness)
            if item_key is not None:
                if item_key in seen_keys:
                    duplicates.append(item_key)
                else:
                    seen_keys.add(item_key)

        if duplicates:
            unique_duplicates = sorted(list(set(duplicates)))
            self._error(field, f"Duplicate values found for key '{key_for_uniqueness}': {unique_duplicates}")


class SchematicParser:
    """
    Parses and validates a YAML schematic snapshot into a `Schematic` and an
    `EngineConfig`. Element order in the file is creation order.
    """
    _terminal_rule = {"type": "string", "empty": False}

    _element_schema = {
        "id": {"type": "string", "required": True, "empty": False, "id_regex": True},
        "kind": {"type": "string", "required": True, "allowed": sorted(ELEMENT_REGISTRY)},
        "value": {"type": ["string", "number"], "required": True},
        "terminals": {"type": "list", "required": False, "schema": _terminal_rule},
    }

    _connection_schema = {
        "id": {"type": "string", "required": False},
        "a": {"type": "string", "required": True, "nullable": True, "empty": False},
        "b": {"type": "string", "required": True, "nullable": True, "empty": False},
    }

    _schema = {
        "name": {"type": "string", "required": False, "empty": False},
        "settings": {"type": "dict", "required": False, "valuesrules": {"type": ["string", "number"]}},
        "elements": {"type": "list", "required": True, "unique_elements_by_key": "id", "schema": {"type": "dict", "schema": _element_schema}},
        "connections": {"type": "list", "required": False, "schema": {"type": "dict", "schema": _connection_schema}},
    }

    def __init__(self):
        self._validator = EnhancedValidator(self._schema)
        self._validator.allow_unknown = False
        logger.debug("SchematicParser initialized.")

    def parse_file(self, path: Union[str, Path]) -> ParsedSnapshot:
        """Loads a snapshot from a YAML file."""
        source = Path(path).resolve()
        logger.info(f"Loading schematic snapshot from: {source}")
        if not source.is_file():
            raise ParsingError(details=f"Schematic file not found at path: {source}", file_path=source)
        try:
            text = source.read_text(encoding="utf-8")
        except PermissionError as e:
            raise ParsingError(details=f"Permission denied when trying to read file: {e}", file_path=source) from e
        return self._parse(text, source, default_name=source.stem)

    def parse(self, text: str) -> ParsedSnapshot:
        """Loads a snapshot from YAML text."""
        return self._parse(text, None, default_name="schematic")

    def _parse(self, text: str, source: Optional[Path], default_name: str) -> ParsedSnapshot:
        content = self._load_yaml(text, source)
        if not self._validator.validate(content):
            raise SchemaValidationError(self._validator.errors, source)
        document = self._validator.document

        elements = [self._build_element(record) for record in document["elements"]]
        connections = [
            Connection(terminal_a=record.get("a"), terminal_b=record.get("b"), connection_id=record.get("id"))
            for record in document.get("connections") or []
        ]

        try:
            config = parse_engine_config(document.get("settings"))
        except ConfigParsingError as e:
            raise ParsingError(details=f"Invalid 'settings' block: {e}", file_path=source) from e

        snapshot = ParsedSnapshot(
            name=document.get("name", default_name),
            schematic=Schematic(elements=tuple(elements), connections=tuple(connections)),
            config=config,
            source_path=source,
        )
        logger.debug(
            f"Parsed snapshot '{snapshot.name}': {len(elements)} element(s), {len(connections)} connection(s)."
        )
        return snapshot

    @staticmethod
    def _build_element(record: Dict[str, Any]) -> ElementBase:
        element_id = record["id"]
        cls = ELEMENT_REGISTRY[record["kind"]]
        dimension = cls.declare_value_dimension()
        try:
            value = to_magnitude(record["value"], dimension)
        except (ValueError, TypeError, pint.DimensionalityError, pint.UndefinedUnitError) as e:
            raise ElementDefinitionError(
                element_id=element_id,
                details=f"Value '{record['value']}' is not a valid quantity of dimension '{dimension}': {e}"
            ) from e
        return make_element(record["kind"], element_id, value, record.get("terminals"))

    @staticmethod
    def _load_yaml(text: str, source: Optional[Path]) -> Dict[str, Any]:
        try:
            content = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ParsingError(details=f"Invalid YAML syntax: {e}", file_path=source) from e
        if content is None:
            raise ParsingError(details="The YAML document is empty or contains no valid content.", file_path=source)
        if not isinstance(content, dict):
            raise ParsingError(details="The root of the YAML document must be a dictionary (mapping).", file_path=source)
        return content


def load_schematic(path: Union[str, Path]) -> ParsedSnapshot:
    """
    User-facing loader: parses a snapshot file and turns any diagnosable failure into a
    `SchematicLoadError` whose message is the diagnostic report.
    """
    try:
        return SchematicParser().parse_file(path)
    except DiagnosableError as e:
        logger.error(f"Failed to load schematic '{path}': {e}")
        raise SchematicLoadError(e.get_diagnostic_report()) from e
