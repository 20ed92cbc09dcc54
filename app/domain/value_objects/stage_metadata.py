"""Stage metadata value object."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterator, Mapping, Optional, Union

MetadataValue = Union[str, int, float, bool, date, datetime, None]

_SCALAR_TYPES = (str, int, float, bool, date, datetime)


@dataclass(frozen=True)
class StageMetadata:
    """
    Accumulated checklist answers for a lead.

    Collected across every stage the lead has passed through. Instances are
    immutable: merge() returns a new instance holding the union of both maps,
    with the update's values winning. Keys are never removed.
    """

    values: dict[str, MetadataValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate keys and values."""
        for key, value in self.values.items():
            if not isinstance(key, str):
                raise ValueError(f"Metadata keys must be strings, got {key!r}")
            if value is not None and not isinstance(value, _SCALAR_TYPES):
                raise ValueError(
                    f"Metadata value for '{key}' must be a scalar, date or boolean"
                )

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "StageMetadata":
        """Build metadata from a plain mapping (None is treated as empty)."""
        return cls(dict(data or {}))

    def merge(self, update: Union["StageMetadata", Mapping[str, Any], None]) -> "StageMetadata":
        """
        Shallow-merge an update into a new metadata instance.

        Args:
            update: Partial metadata; its values override existing ones

        Returns:
            New StageMetadata with the union of keys
        """
        if update is None:
            return StageMetadata(dict(self.values))
        incoming = update.values if isinstance(update, StageMetadata) else dict(update)
        merged = dict(self.values)
        merged.update(incoming)
        return StageMetadata(merged)

    def get(self, key: str, default: MetadataValue = None) -> MetadataValue:
        """Get a value by key."""
        return self.values.get(key, default)

    def is_present(self, key: str) -> bool:
        """
        Check whether a field holds a usable value.

        None and the empty string count as missing. False and 0 are present.
        """
        value = self.values.get(key)
        if value is None:
            return False
        if isinstance(value, str) and value == "":
            return False
        return True

    def is_true(self, key: str) -> bool:
        """Check that a field is exactly the boolean True."""
        return self.values.get(key) is True

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize for a JSON column (dates become ISO strings)."""
        result: dict[str, Any] = {}
        for key, value in self.values.items():
            if isinstance(value, (date, datetime)):
                result[key] = value.isoformat()
            else:
                result[key] = value
        return result

    def __contains__(self, key: object) -> bool:
        return key in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)
