"""
Configuration Validator Service
Validates the search weights configuration against its JSON schema
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft7Validator, SchemaError

logger = logging.getLogger(__name__)

WEIGHTS_SCHEMA_NAME = "search_weights"


@dataclass
class ValidationResult:
    """Result of a validation check"""
    config_name: str
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, error: str):
        """Add an error message"""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str):
        """Add a warning message"""
        self.warnings.append(warning)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses"""
        return {
            "config_name": self.config_name,
            "is_valid": self.is_valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
        }


class ConfigValidator:
    """
    JSON schema validation for configuration documents.

    Schemas live in config/schemas/<name>.schema.json and are cached after
    the first load.
    """

    def __init__(self, schema_dir: Optional[Path] = None):
        """
        Initialize validator

        Args:
            schema_dir: Path to schema directory (defaults to resource_search/config/schemas)
        """
        if schema_dir is None:
            schema_dir = Path(__file__).parent.parent.parent / "config" / "schemas"

        self.schema_dir = Path(schema_dir)
        self._schema_cache: Dict[str, Dict[str, Any]] = {}

        logger.info(f"ConfigValidator initialized - schema_dir: {self.schema_dir}")

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Load JSON schema from schemas directory

        Args:
            schema_name: Name of schema file (without .schema.json extension)

        Returns:
            Schema dictionary

        Raises:
            FileNotFoundError: If schema file doesn't exist
            json.JSONDecodeError: If schema is invalid JSON
        """
        if schema_name in self._schema_cache:
            return self._schema_cache[schema_name]

        schema_path = self.schema_dir / f"{schema_name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema file not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        self._schema_cache[schema_name] = schema
        logger.debug(f"Loaded schema: {schema_name}")
        return schema

    def validate_document(
        self,
        document: Any,
        schema_name: str,
        config_name: Optional[str] = None,
    ) -> ValidationResult:
        """
        Validate an already-parsed document against a schema.

        Every schema violation is reported, not just the first one.

        Args:
            document: Parsed JSON document
            schema_name: Schema to validate against
            config_name: Name reported in the result (defaults to schema_name)

        Returns:
            ValidationResult with one error per violation
        """
        result = ValidationResult(config_name=config_name or schema_name)

        try:
            schema = self.load_schema(schema_name)
            validator = Draft7Validator(schema)
            for error in sorted(validator.iter_errors(document), key=lambda e: list(e.path)):
                path = ".".join(str(p) for p in error.path)
                result.add_error(f"{path}: {error.message}" if path else error.message)
        except FileNotFoundError as e:
            result.add_error(f"File not found: {e}")
        except json.JSONDecodeError as e:
            result.add_error(f"Invalid schema JSON: {e}")
        except SchemaError as e:
            result.add_error(f"Invalid schema: {e.message}")

        if result.is_valid and isinstance(document, dict) and "keyword_variations" not in document:
            result.add_warning("keyword_variations missing, default multipliers will be used")

        return result

    def validate_weights_config(self, document: Any) -> ValidationResult:
        """Validate a parsed search weights document"""
        return self.validate_document(document, WEIGHTS_SCHEMA_NAME, config_name="search_weights")

    def validate_weights_file(self, config_path: Path) -> ValidationResult:
        """
        Load and validate a search weights file

        Args:
            config_path: Path to the JSON file

        Returns:
            ValidationResult (file and JSON errors are reported, not raised)
        """
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except FileNotFoundError:
            result = ValidationResult(config_name="search_weights")
            result.add_error(f"File not found: {config_path}")
            return result
        except json.JSONDecodeError as e:
            result = ValidationResult(config_name="search_weights")
            result.add_error(f"Invalid JSON: {e}")
            return result

        return self.validate_weights_config(document)


# Singleton instance
_validator: Optional[ConfigValidator] = None


def get_validator() -> ConfigValidator:
    """Get singleton validator instance"""
    global _validator
    if _validator is None:
        _validator = ConfigValidator()
    return _validator
