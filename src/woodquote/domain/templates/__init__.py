"""Furniture panel templates.

Templates turn a parametric UnitSpec into the panels and hardware the
estimation core consumes. New unit types are added by registering another
PanelTemplate; the nesting and pricing core is unaffected.
"""

from .base import TemplateOutput, UnitSpec
from .kitchen_cabinet import KitchenCabinetTemplate
from .registry import (
    TemplateNotFoundError,
    available_templates,
    get_template,
    register_template,
)
from .storage_unit import StorageUnitTemplate
from .wardrobe import WardrobeTemplate, WardrobeType

__all__ = [
    "KitchenCabinetTemplate",
    "StorageUnitTemplate",
    "TemplateNotFoundError",
    "TemplateOutput",
    "UnitSpec",
    "WardrobeTemplate",
    "WardrobeType",
    "available_templates",
    "get_template",
    "register_template",
]
