"""
cellicon Rules - Precedence Resolution
======================================

Pure decision functions used by the derivation graph. Each one picks the
winning value for one category (name, roaming, level, icon group, icon
variant) from the competing inputs, with an explicit fallback for every
branch. The order of the checks inside each function is the precedence.
"""

from typing import Mapping, Optional

from .carrier_overrides import CarrierIdOverrides
from .mappings import to_icon_key
from .models import (
    CarrierMergedNetworkType,
    CellularIcon,
    DataConnectionState,
    DefaultIcon,
    DefaultNetworkName,
    DefaultNetworkType,
    DisplayOverrideType,
    ImsRegistrationTech,
    IntentDerivedName,
    MobileIconCustomizationMode,
    MobileIconGroup,
    NetworkNameModel,
    NetworkType,
    NetworkTypeIconModel,
    OverriddenIcon,
    OverrideNetworkType,
    ResolvedNetworkType,
    SatelliteIcon,
    SignalIconModel,
    UnknownNetworkType,
    satellite_icon_for_level,
)

# ============================================================================
# NAMES AND ROAMING
# ============================================================================


def resolve_network_name(
    operator_alpha_short: Optional[str], network_name: NetworkNameModel
) -> NetworkNameModel:
    """The operator short name replaces the default placeholder only."""
    if isinstance(network_name, DefaultNetworkName) and operator_alpha_short is not None:
        return IntentDerivedName(operator_alpha_short)
    return network_name


def resolve_carrier_name(
    operator_alpha_short: Optional[str], carrier_name: NetworkNameModel
) -> str:
    if isinstance(carrier_name, DefaultNetworkName) and operator_alpha_short is not None:
        return operator_alpha_short
    return carrier_name.name


def resolve_roaming(
    carrier_network_change_active: bool,
    is_gsm: bool,
    gsm_roaming: bool,
    cdma_roaming: bool,
) -> bool:
    # Never roaming while the carrier network change animation is showing
    if carrier_network_change_active:
        return False
    if is_gsm:
        return gsm_roaming
    return cdma_roaming


# ============================================================================
# SIGNAL LEVEL
# ============================================================================


def is_lte_camped(customization: MobileIconCustomizationMode) -> bool:
    return (
        customization.data_network_type in NetworkType.LTE_TYPES
        or customization.voice_network_type in NetworkType.LTE_TYPES
    )


def resolve_level(
    is_gsm: bool,
    primary_level: int,
    cdma_level: int,
    always_use_cdma_level: bool,
    customization: MobileIconCustomizationMode,
    number_of_levels: int,
) -> int:
    """
    Pick the level source, then clamp it into ``[0, number_of_levels]``.

    RSRP-for-LTE policy first, then GSM (which never uses the CDMA level),
    then the global CDMA preference, then the primary level.
    """
    if customization.always_use_rsrp_level_for_lte:
        if is_lte_camped(customization):
            level = customization.lte_rsrp_level
        else:
            level = primary_level
    elif is_gsm:
        level = primary_level
    elif always_use_cdma_level:
        level = cdma_level
    else:
        level = primary_level
    return min(max(level, 0), max(number_of_levels, 0))


def resolve_shown_level(level: int, is_in_service: bool, inflate: bool) -> int:
    if not is_in_service:
        return 0
    return level + 1 if inflate else level


def resolve_show_exclamation_mark(
    is_data_enabled: bool,
    is_data_connected: bool,
    is_connection_failed: bool,
    is_in_service: bool,
    hide_no_internet_state: bool,
) -> bool:
    if hide_no_internet_state:
        return False
    return (
        not is_data_enabled
        or (is_data_connected and is_connection_failed)
        or not is_in_service
    )


def is_data_connected(state: DataConnectionState) -> bool:
    return state == DataConnectionState.CONNECTED


# ============================================================================
# IMS / CROSS-SIM
# ============================================================================

_CROSS_SIM_TECHS = (ImsRegistrationTech.CROSS_SIM, ImsRegistrationTech.IWLAN)


def resolve_customized_icon(
    is_default_data_sub: bool,
    ims_registration_tech: int,
    dds_icon: Optional[SignalIconModel],
    cross_sim_display_signal_level: bool,
    ciwlan_available: bool,
) -> Optional[SignalIconModel]:
    """Companion DDS icon when calls ride on another SIM or Wi-Fi, else None."""
    if (
        not is_default_data_sub
        and cross_sim_display_signal_level
        and ciwlan_available
        and ims_registration_tech in _CROSS_SIM_TECHS
    ):
        return dds_icon
    return None


def resolve_vowifi_available(
    ims_registration_tech: int, voice_capable: bool, show_vowifi_icon: bool
) -> bool:
    return (
        voice_capable
        and ims_registration_tech == ImsRegistrationTech.IWLAN
        and show_vowifi_icon
    )


# ============================================================================
# NETWORK TYPE ICON
# ============================================================================


def nsa_lookup_key(
    resolved_network_type: ResolvedNetworkType, customization: MobileIconCustomizationMode
) -> str:
    """NSA overrides are keyed by the anchor technology, not by the override itself."""
    if resolved_network_type.network_type in DisplayOverrideType.NSA_TYPES:
        if customization.origin_network_type == NetworkType.UNKNOWN:
            return to_icon_key(customization.voice_network_type)
        return to_icon_key(customization.origin_network_type)
    return resolved_network_type.lookup_key


def get_mobile_icon_group(
    resolved_network_type: ResolvedNetworkType,
    customization: MobileIconCustomizationMode,
    mapping: Mapping[str, MobileIconGroup],
) -> Optional[MobileIconGroup]:
    five_g = customization.five_g_service_state
    if five_g.is_nr_icon_type_valid:
        return five_g.icon_group
    if isinstance(resolved_network_type, DefaultNetworkType):
        return mapping.get(resolved_network_type.lookup_key)
    if isinstance(resolved_network_type, OverrideNetworkType):
        return mapping.get(nsa_lookup_key(resolved_network_type, customization))
    if isinstance(resolved_network_type, UnknownNetworkType):
        return mapping.get(to_icon_key(customization.voice_network_type))
    raise TypeError(f"Unknown resolved network type {resolved_network_type!r}")


def resolve_default_network_type(
    resolved_network_type: ResolvedNetworkType,
    mapping: Mapping[str, MobileIconGroup],
    default_group: MobileIconGroup,
    customization: MobileIconCustomizationMode,
) -> MobileIconGroup:
    """Icon group before carrier-id overrides; unmapped keys use ``default_group``."""
    if isinstance(resolved_network_type, CarrierMergedNetworkType):
        return resolved_network_type.icon_group_override
    group = get_mobile_icon_group(resolved_network_type, customization, mapping)
    return group if group is not None else default_group


def resolve_network_type_icon(
    icon_group: MobileIconGroup,
    carrier_id: int,
    overrides: CarrierIdOverrides,
) -> NetworkTypeIconModel:
    if overrides.entry_exists(carrier_id):
        icon_override = overrides.lookup(carrier_id, icon_group.name)
        if icon_override is not None and icon_override > 0:
            return OverriddenIcon(icon_group, icon_override)
    return DefaultIcon(icon_group)


# ============================================================================
# SIGNAL ICON
# ============================================================================


def satellite_icon(shown_level: int) -> SatelliteIcon:
    icon = satellite_icon_for_level(shown_level)
    if icon is None:
        icon = satellite_icon_for_level(0)
    return SatelliteIcon(shown_level, icon)


def select_cellular_icon(
    cellular_icon: CellularIcon, customized_icon: Optional[SignalIconModel]
) -> CellularIcon:
    """Cross-SIM substitution applies only to a cellular companion icon."""
    if isinstance(customized_icon, CellularIcon):
        return customized_icon
    if customized_icon is None or isinstance(customized_icon, SatelliteIcon):
        return cellular_icon
    raise TypeError(f"Unknown signal icon {customized_icon!r}")


__all__ = [
    "resolve_network_name",
    "resolve_carrier_name",
    "resolve_roaming",
    "is_lte_camped",
    "resolve_level",
    "resolve_shown_level",
    "resolve_show_exclamation_mark",
    "is_data_connected",
    "resolve_customized_icon",
    "resolve_vowifi_available",
    "nsa_lookup_key",
    "get_mobile_icon_group",
    "resolve_default_network_type",
    "resolve_network_type_icon",
    "satellite_icon",
    "select_cellular_icon",
]
