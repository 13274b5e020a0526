"""Person attribute records returned by attribute sources."""

from __future__ import annotations

from dataclasses import dataclass, field

type AttributeValues = list[object]
type AttributeMap = dict[str, AttributeValues]


@dataclass(slots=True)
class PersonAttributes:
    """A username plus its multi-valued attributes."""

    name: str
    attributes: AttributeMap = field(default_factory=dict[str, "AttributeValues"])

    @classmethod
    def case_insensitive(
        cls, name: str, attributes: AttributeMap | None = None
    ) -> PersonAttributes:
        """Build a record whose name is stored lower-cased for case-insensitive identity."""

        return cls(name=name.lower(), attributes=attributes if attributes is not None else {})

    def attribute_value(self, name: str) -> object | None:
        values = self.attributes.get(name)
        if not values:
            return None
        return values[0]

    def attribute_values(self, name: str) -> AttributeValues | None:
        return self.attributes.get(name)
