"""
Event Records

Rows produced by the upstream parser. Only Actor, Target and Action are
read; every other column travels through untouched in `payload`.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from actor_graph.utils.names import split_names

_RECORD_COLUMNS = ("Actor", "Target", "Action")


class EventRecord(BaseModel):
    """
    One "Actor did Action to Target" statement.

    Attributes:
        actor: Comma-separated actor names
        target: Comma-separated target names
        action: Action label ("unknown" when the row has none)
        payload: Remaining columns, opaque to the graph code
    """

    actor: str = Field(default="", alias="Actor")
    target: str = Field(default="", alias="Target")
    action: str = Field(default="unknown", alias="Action")
    payload: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("actor", "target", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("action", mode="before")
    @classmethod
    def _default_action(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return "unknown"
        return value

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "EventRecord":
        """Build a record from a parsed row, keeping extra columns in payload."""
        return cls(
            Actor=row.get("Actor"),
            Target=row.get("Target"),
            Action=row.get("Action"),
            payload={k: v for k, v in row.items() if k not in _RECORD_COLUMNS},
        )

    @property
    def actors(self) -> list[str]:
        """Actor names, trimmed, empties dropped."""
        return split_names(self.actor)

    @property
    def targets(self) -> list[str]:
        """Target names, trimmed, empties dropped."""
        return split_names(self.target)

    def to_row(self) -> dict[str, Any]:
        """Inverse of from_row."""
        return {"Actor": self.actor, "Target": self.target, "Action": self.action, **self.payload}
