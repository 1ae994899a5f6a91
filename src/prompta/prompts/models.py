"""
Prompt record model.

Records are stored with camelCase keys (``createdAt``/``updatedAt``) so the
library file stays readable by other tools using the same layout. Unknown keys
are kept as extras and written back unchanged.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, model_validator

RECORD_REQUIRED_KEYS = ("id", "createdAt")


def generate_id() -> str:
    """Return a fresh, collision-resistant prompt identifier."""
    return uuid.uuid4().hex


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """Format a moment as ISO-8601 UTC with millisecond precision.

    Args:
        moment: Time to format, defaults to now

    Returns:
        Timestamp such as ``2025-01-31T09:15:02.114Z``
    """
    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Parameter(BaseModel):
    """A placeholder name with its default substitution value."""

    model_config = ConfigDict(extra="allow")

    name: str
    default: str = ""


class Prompt(BaseModel):
    """A named, user-authored template."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(default_factory=generate_id)
    name: str
    content: str
    parameters: List[Parameter] = Field(default_factory=list)
    created_at: str = Field(default_factory=utc_timestamp, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    @model_validator(mode="before")
    @classmethod
    def _require_stored_keys(cls, data: Any, info: ValidationInfo) -> Any:
        # A stored record must already carry its identity and creation time
        if info.context and info.context.get("record") and isinstance(data, dict):
            missing = [key for key in RECORD_REQUIRED_KEYS if data.get(key) is None]
            if missing:
                raise ValueError(f"record is missing {', '.join(missing)}")
        return data

    @property
    def parameter_names(self) -> List[str]:
        """Names of the prompt's parameters in order."""
        return [param.name for param in self.parameters]

    def to_record(self) -> Dict[str, Any]:
        """Serialize to the persisted record layout."""
        record = self.model_dump(by_alias=True)
        # updatedAt is absent until the first edit, unless the record had it
        if record.get("updatedAt") is None and "updated_at" not in self.model_fields_set:
            record.pop("updatedAt", None)
        return record

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Prompt":
        """Build a prompt from a persisted record.

        Raises:
            pydantic.ValidationError: If the record lacks ``id`` or ``createdAt``
                or has fields of the wrong type
        """
        return cls.model_validate(data, context={"record": True})
