"""
cellicon Config - Carrier Configuration Schema
==============================================

Carrier-dependent knobs for the icon pipeline, loadable from a mapping, a JSON
file or a YAML file:

    config = CellIconConfig.from_yaml("carrier.yaml")
    mapping = map_icon_sets(config.mappings)
    customization = CarrierNameCustomization(config.carrier_name, operator_lookup)

Example YAML:

    mappings:
      show_4g_for_lte: true
    carrier_name:
      show_customize_name: true
      carrier_name_list: ["46000:CMCC", "46001:CU"]
    satellite_enabled: false
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator


class MobileMappingsConfig(BaseModel):
    """Preferences that shape the default network-type icon mapping."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    show_at_least_3g: bool = Field(False, description="Never show a 2G badge")
    show_4g_for_lte: bool = Field(False, description="Label LTE as 4G")
    hide_lte_plus: bool = Field(False, description="Show LTE instead of LTE+ for CA")
    hspa_data_distinguishable: bool = Field(True, description="Show H/H+ instead of 3G")


class CarrierNameConfig(BaseModel):
    """Resources used by carrier-name customization."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    show_customize_name: bool = False
    roaming_customization_enabled: bool = False
    carrier_name_list: List[str] = Field(
        default_factory=list, description="Entries of the form 'MCCMNC:Carrier'"
    )
    connector: str = "-"
    separator: str = " | "
    origin_carrier_names: List[str] = Field(default_factory=list)
    locale_carrier_names: List[str] = Field(default_factory=list)
    rat_unknown: str = ""
    rat_2g: str = "2G"
    rat_3g: str = "3G"
    rat_4g: str = "4G"
    data_connection_5g: str = "5G"
    data_connection_5g_a: str = "5G-A"
    display_5g_a: bool = False

    @model_validator(mode="after")
    def _check_locale_tables(self) -> "CarrierNameConfig":
        if len(self.origin_carrier_names) != len(self.locale_carrier_names):
            raise ValueError(
                "origin_carrier_names and locale_carrier_names must have the same length"
            )
        if not self.separator:
            raise ValueError("separator must not be empty")
        return self

    def carrier_map(self) -> Dict[str, str]:
        """Parse ``carrier_name_list`` into MCCMNC -> carrier name."""
        carriers = {}
        for entry in self.carrier_name_list:
            parts = entry.strip().split(":")
            if len(parts) != 2:
                logging.error(f"invalid key value config {entry}")
                continue
            carriers[parts[0]] = parts[1]
        return carriers


class CellIconConfig(BaseModel):
    """Top-level configuration for one device build."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    mappings: MobileMappingsConfig = Field(default_factory=MobileMappingsConfig)
    carrier_name: CarrierNameConfig = Field(default_factory=CarrierNameConfig)
    satellite_enabled: bool = Field(True, description="Carrier-enabled satellite support")
    table_log_size: int = Field(100, gt=0, description="Rows kept per connection log")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CellIconConfig":
        return cls.model_validate(data or {})

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "CellIconConfig":
        with open(path) as f:
            return cls.from_dict(json.load(f))

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "CellIconConfig":
        with open(path) as f:
            return cls.from_dict(yaml.safe_load(f))


__all__ = ["MobileMappingsConfig", "CarrierNameConfig", "CellIconConfig"]
