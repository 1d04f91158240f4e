"""
Tests for configuration loading and the icon mappings derived from it.
"""

import json

import pytest
from pydantic import ValidationError

from cellicon import (
    CellIconConfig,
    DisplayOverrideType,
    MobileIconPolicies,
    MobileMappingsConfig,
    NetworkType,
    get_default_icon,
    map_icon_sets,
    to_display_icon_key,
    to_icon_key,
)
from cellicon.config import CarrierNameConfig
from cellicon.mappings import E, FOUR_G, FOUR_G_PLUS, H, H_PLUS, LTE, LTE_PLUS, THREE_G, WFC, G


class TestConfig:
    @pytest.mark.unit
    def test_defaults(self):
        config = CellIconConfig()

        assert config.satellite_enabled is True
        assert config.table_log_size == 100
        assert config.mappings == MobileMappingsConfig()

    @pytest.mark.unit
    def test_from_yaml(self, tmp_path):
        """Test that a YAML file is parsed into nested models."""
        path = tmp_path / "carrier.yaml"
        path.write_text(
            "mappings:\n"
            "  show_4g_for_lte: true\n"
            "carrier_name:\n"
            "  show_customize_name: true\n"
            "  carrier_name_list: ['46000:CMCC']\n"
            "satellite_enabled: false\n"
        )

        config = CellIconConfig.from_yaml(path)

        assert config.mappings.show_4g_for_lte is True
        assert config.carrier_name.carrier_map() == {"46000": "CMCC"}
        assert config.satellite_enabled is False

    @pytest.mark.unit
    def test_empty_yaml_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert CellIconConfig.from_yaml(path) == CellIconConfig()

    @pytest.mark.unit
    def test_from_json(self, tmp_path):
        path = tmp_path / "carrier.json"
        path.write_text(json.dumps({"table_log_size": 10}))

        assert CellIconConfig.from_json(path).table_log_size == 10

    @pytest.mark.unit
    def test_unknown_keys_are_rejected(self):
        with pytest.raises(ValidationError):
            CellIconConfig.from_dict({"mappings": {"show_5g_for_lte": True}})

    @pytest.mark.unit
    def test_table_log_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            CellIconConfig.from_dict({"table_log_size": 0})

    @pytest.mark.unit
    def test_locale_tables_must_match(self):
        """Test that origin and locale name tables must pair up."""
        with pytest.raises(ValidationError):
            CarrierNameConfig(origin_carrier_names=["a", "b"], locale_carrier_names=["A"])

    @pytest.mark.unit
    def test_separator_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            CarrierNameConfig(separator="")

    @pytest.mark.unit
    def test_config_is_frozen(self):
        config = MobileMappingsConfig()
        with pytest.raises(ValidationError):
            config.show_4g_for_lte = True


class TestMappings:
    @pytest.mark.unit
    def test_icon_keys(self):
        assert to_icon_key(NetworkType.LTE) == "13"
        assert to_display_icon_key(DisplayOverrideType.LTE_CA) == "13_CA"
        assert to_display_icon_key(DisplayOverrideType.LTE_ADVANCED_PRO) == "13_CA_Plus"
        assert to_display_icon_key(DisplayOverrideType.NR_NSA) == "20"
        assert to_display_icon_key(DisplayOverrideType.NR_ADVANCED) == "20_Plus"
        assert to_display_icon_key(DisplayOverrideType.NONE) == "unsupported"

    @pytest.mark.unit
    def test_default_mapping(self):
        mapping = map_icon_sets(MobileMappingsConfig())

        assert mapping["13"] == LTE
        assert mapping["13_CA"] == LTE_PLUS
        assert mapping["2"] == E
        assert mapping["8"] == H
        assert mapping["15"] == H_PLUS
        assert mapping["18"] == WFC
        assert get_default_icon(MobileMappingsConfig()) == G

    @pytest.mark.unit
    def test_show_4g_for_lte(self):
        mapping = map_icon_sets(MobileMappingsConfig(show_4g_for_lte=True))

        assert mapping["13"] == FOUR_G
        assert mapping["13_CA"] == FOUR_G_PLUS

    @pytest.mark.unit
    def test_hide_lte_plus(self):
        mapping = map_icon_sets(MobileMappingsConfig(hide_lte_plus=True))

        assert mapping["13_CA"] == LTE

    @pytest.mark.unit
    def test_show_at_least_3g(self):
        config = MobileMappingsConfig(show_at_least_3g=True, hspa_data_distinguishable=False)
        mapping = map_icon_sets(config)

        assert mapping["2"] == THREE_G
        assert mapping["15"] == THREE_G
        assert get_default_icon(config) == THREE_G

    @pytest.mark.unit
    def test_policies_from_config(self):
        """Test that policies take their default mapping from the config."""
        config = CellIconConfig.from_dict({"mappings": {"show_4g_for_lte": True}})

        policies = MobileIconPolicies.from_config(config)
        snapshot = policies.snapshot()

        assert snapshot["default_mobile_icon_mapping"]["13"] == FOUR_G
        assert snapshot["default_mobile_icon_group"] == G
        assert snapshot["is_single_carrier"] is True
