"""Registry of furniture panel templates."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .kitchen_cabinet import KitchenCabinetTemplate
from .storage_unit import StorageUnitTemplate
from .wardrobe import WardrobeTemplate

if TYPE_CHECKING:
    from woodquote.contracts.protocols import PanelTemplate


class TemplateNotFoundError(Exception):
    """Raised when no template is registered for a unit type."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Template not found: {name}")


_TEMPLATES: dict[str, PanelTemplate] = {}
_ALIASES: dict[str, str] = {"bookshelf": "storage_unit"}


def register_template(template: PanelTemplate) -> None:
    """Register a template under its ``unit_type``, replacing any existing one."""
    _TEMPLATES[template.unit_type] = template


def get_template(unit_type: str) -> PanelTemplate:
    """Look up the template for a unit type.

    Raises:
        TemplateNotFoundError: If no template is registered for the type.
    """
    name = unit_type.strip().lower()
    name = _ALIASES.get(name, name)
    try:
        return _TEMPLATES[name]
    except KeyError:
        raise TemplateNotFoundError(unit_type) from None


def available_templates() -> list[tuple[str, str]]:
    """List (unit type, description) pairs of all registered templates."""
    return [(name, t.description) for name, t in sorted(_TEMPLATES.items())]


for _template in (WardrobeTemplate(), StorageUnitTemplate(), KitchenCabinetTemplate()):
    register_template(_template)
