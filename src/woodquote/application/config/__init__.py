"""Configuration schema and loading for estimates.

Public API:
    - EstimateConfiguration: Root configuration model
    - load_config: Load configuration from a JSON file
    - load_config_from_dict: Load configuration from a dictionary
    - ConfigError: Exception for configuration errors
    - config_to_*: Convert configuration into domain objects

Example:
    >>> from pathlib import Path
    >>> from woodquote.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     config = load_config(Path("wardrobe.json"))
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from woodquote.application.config.adapter import (
    config_to_hardware,
    config_to_panels,
    config_to_price_lookup,
    config_to_sheet,
    config_to_template_output,
    config_to_topology,
    config_to_unit_spec,
)
from woodquote.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
)
from woodquote.application.config.schemas import (
    SUPPORTED_VERSIONS,
    EstimateConfiguration,
    FinishConfigSchema,
    HardwareConfigSchema,
    NestingConfigSchema,
    PanelConfigSchema,
    PriceSettingConfigSchema,
    PricingConfigSchema,
    ProductConfigSchema,
    SheetConfigSchema,
    UnitConfigSchema,
)

__all__ = [
    "ConfigError",
    "EstimateConfiguration",
    "FinishConfigSchema",
    "HardwareConfigSchema",
    "NestingConfigSchema",
    "PanelConfigSchema",
    "PriceSettingConfigSchema",
    "PricingConfigSchema",
    "ProductConfigSchema",
    "SUPPORTED_VERSIONS",
    "SheetConfigSchema",
    "UnitConfigSchema",
    "config_to_hardware",
    "config_to_panels",
    "config_to_price_lookup",
    "config_to_sheet",
    "config_to_template_output",
    "config_to_topology",
    "config_to_unit_spec",
    "load_config",
    "load_config_from_dict",
]
