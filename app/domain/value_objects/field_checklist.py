"""Mandatory-field checklist value object."""

from dataclasses import dataclass, field
from typing import Any, Union

from app.domain.value_objects.stage_metadata import StageMetadata

# Stage catalogs store checklists either as ["a", "b"] or as
# {"a": {"required": true}, "b": {"required": false}}.
ChecklistConfig = Union[list[str], tuple[str, ...], dict[str, Any], None]


@dataclass(frozen=True)
class FieldChecklist:
    """Normalized mandatory-field checklist: field name -> required flag."""

    fields: dict[str, bool] = field(default_factory=dict)

    @classmethod
    def from_config(cls, mandatory_fields: ChecklistConfig) -> "FieldChecklist":
        """
        Normalize either checklist shape.

        Args:
            mandatory_fields: List of field names (all required) or a map of field name to
                config. A mapped field is required unless its config sets
                required to False.

        Returns:
            FieldChecklist instance

        Raises:
            ValueError: If the value is neither a list nor a map
        """
        if mandatory_fields is None:
            return cls()

        if isinstance(mandatory_fields, (list, tuple)):
            return cls({str(name): True for name in mandatory_fields})

        if isinstance(mandatory_fields, dict):
            fields: dict[str, bool] = {}
            for name, config in mandatory_fields.items():
                if isinstance(config, dict):
                    fields[str(name)] = config.get("required", True) is not False
                elif isinstance(config, bool):
                    fields[str(name)] = config
                else:
                    fields[str(name)] = True
            return cls(fields)

        raise ValueError(f"Unsupported mandatory_fields shape: {type(mandatory_fields).__name__}")

    @property
    def required_fields(self) -> list[str]:
        """Names of required fields, in catalog order."""
        return [name for name, required in self.fields.items() if required]

    def missing_from(self, metadata: StageMetadata) -> list[str]:
        """
        Collect every required field without a usable value.

        Args:
            metadata: Proposed merged metadata

        Returns:
            Missing field names in catalog order (empty when complete)
        """
        return [name for name in self.required_fields if not metadata.is_present(name)]

    def to_config(self) -> dict[str, dict[str, bool]]:
        """Serialize to the map form."""
        return {name: {"required": required} for name, required in self.fields.items()}
