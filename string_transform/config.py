"""Declarative transformation configuration.

TransformConfig describes handlers, lookups and rules as plain data so a
configuration can be validated before it touches a Transform:

    config = TransformConfig(
        values={"NAME": "Ada"},
        rules=["trim", "expand:(?i)\\$\\{(?P<key>[A-Z_]+)\\}"],
    )
    t = Transform(config)

Steps are applied in field order: handlers, values, lookups, rules,
expand_env. Several configs passed to a Transform are applied one after
the other.
"""

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from string_transform.lookups import lookup_map
from string_transform.types import LookupFunc, TransformFunc

if TYPE_CHECKING:
    from string_transform.pipeline import Transform


class TransformConfig(BaseModel):
    """Validated configuration steps for a Transform."""

    model_config = ConfigDict(extra="forbid")

    handlers: dict[str, TransformFunc | None] = Field(
        default_factory=dict,
        description="Handlers to register by tag; None removes the tag",
    )
    values: dict[str, str] = Field(
        default_factory=dict,
        description="Static variable values, added as a map lookup",
    )
    lookups: list[LookupFunc] = Field(
        default_factory=list,
        description="Additional lookup sources, in resolution order",
    )
    rules: list[str | TransformFunc] = Field(
        default_factory=list,
        description="Default rules: string specs are parsed, functions added as-is",
    )
    expand_env: bool = Field(
        default=False,
        description="Append the ${KEY} environment expansion rule",
    )

    @field_validator("handlers")
    @classmethod
    def normalize_tags(
        cls, handlers: dict[str, TransformFunc | None]
    ) -> dict[str, TransformFunc | None]:
        """Store tags lowercase; an empty tag can not be registered."""
        normalized = {}
        for tag, func in handlers.items():
            tag = tag.strip().lower()
            if not tag:
                raise ValueError("handler tag must not be empty")
            normalized[tag] = func
        return normalized

    @field_validator("rules", mode="before")
    @classmethod
    def wrap_single_rule(cls, rules: Any) -> Any:
        """Accept a single rule spec string such as "trim, upcase"."""
        if isinstance(rules, str):
            return [rules]
        return rules

    def apply(self, transform: "Transform") -> None:
        """Apply the configuration steps to a transform, in order.

        Raises:
            ConfigurationError: If a rule spec can not be parsed
        """
        for tag, func in self.handlers.items():
            transform.register_handler(tag, func)

        if self.values:
            transform.add_lookups(lookup_map(dict(self.values)))

        transform.add_lookups(*self.lookups)

        for rule in self.rules:
            if isinstance(rule, str):
                transform.add_string_rules(rule)
            else:
                transform.add_rules(rule)

        if self.expand_env:
            transform.expand_env()
