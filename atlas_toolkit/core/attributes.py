from __future__ import annotations

"""Extension attribute contract shared by sheets and sprites.

A sheet or sprite type declares which extra XML attributes it understands by
returning them, with their default values, from ``additional_attributes()``.
The parser copies matching values out of the element and hands the result to
``handle_attributes()``. Attributes that were not declared are never copied.
"""

from typing import Dict, Mapping, Protocol, runtime_checkable

__all__ = ["AttributeExtension", "resolve_additional_attributes"]


@runtime_checkable
class AttributeExtension(Protocol):
    """Protocol for resources that accept extension attributes."""

    def additional_attributes(self) -> Dict[str, str]:
        """Return a fresh mapping of attribute name to default value."""
        ...

    def handle_attributes(self, attributes: Dict[str, str]) -> None:
        """Apply the resolved extension attributes to the resource."""
        ...


def resolve_additional_attributes(resource: AttributeExtension,
                                  attributes: Mapping[str, str]) -> Dict[str, str]:
    """Overlay the element's *attributes* on the resource's declared defaults.

    Names are matched exactly (case-sensitive). Only declared names are
    looked up; everything else on the element is left alone.
    """
    resolved = dict(resource.additional_attributes())
    for key in resolved:
        value = attributes.get(key)
        if value is not None:
            resolved[key] = value
    return resolved
