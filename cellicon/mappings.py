"""
Network-type icon mappings.

Lookup keys are strings derived from the radio technology (``"13"`` for LTE)
or from a display override (``"13_CA"`` for LTE carrier aggregation). The
default mapping sends each key to the icon group shown for it; which groups
are used depends on a handful of carrier preferences.
"""

from typing import Dict

from .config import MobileMappingsConfig
from .models import FIVE_G_BASIC, FIVE_G_UWB, DisplayOverrideType, MobileIconGroup, NetworkType

# ============================================================================
# ICON GROUPS
# ============================================================================

THREE_G = MobileIconGroup("3G", 1001, "3G")
WFC = MobileIconGroup("WFC", 0, "")
UNKNOWN = MobileIconGroup("Unknown", 0, "")
E = MobileIconGroup("E", 1002, "EDGE")
ONE_X = MobileIconGroup("1X", 1003, "1X")
G = MobileIconGroup("G", 1004, "GPRS")
H = MobileIconGroup("H", 1005, "HSPA")
H_PLUS = MobileIconGroup("H+", 1006, "HSPA+")
FOUR_G = MobileIconGroup("4G", 1007, "4G")
FOUR_G_PLUS = MobileIconGroup("4G+", 1008, "4G+")
LTE = MobileIconGroup("LTE", 1009, "LTE")
LTE_PLUS = MobileIconGroup("LTE+", 1010, "LTE+")
NR_5G = FIVE_G_BASIC
NR_5G_PLUS = FIVE_G_UWB


def to_icon_key(network_type: int) -> str:
    """Lookup key for a radio technology."""
    return str(network_type)


def to_display_icon_key(override_type: int) -> str:
    """Lookup key for a display override type."""
    if override_type == DisplayOverrideType.LTE_CA:
        return to_icon_key(NetworkType.LTE) + "_CA"
    if override_type == DisplayOverrideType.LTE_ADVANCED_PRO:
        return to_icon_key(NetworkType.LTE) + "_CA_Plus"
    if override_type == DisplayOverrideType.NR_NSA:
        return to_icon_key(NetworkType.NR)
    if override_type in (DisplayOverrideType.NR_NSA_MMWAVE, DisplayOverrideType.NR_ADVANCED):
        return to_icon_key(NetworkType.NR) + "_Plus"
    return "unsupported"


def map_icon_sets(config: MobileMappingsConfig) -> Dict[str, MobileIconGroup]:
    """Build the default lookup-key to icon-group mapping for a carrier config."""
    mapping = {
        to_icon_key(NetworkType.EVDO_0): THREE_G,
        to_icon_key(NetworkType.EVDO_A): THREE_G,
        to_icon_key(NetworkType.EVDO_B): THREE_G,
        to_icon_key(NetworkType.EHRPD): THREE_G,
        to_icon_key(NetworkType.UMTS): THREE_G,
        to_icon_key(NetworkType.TD_SCDMA): THREE_G,
        to_icon_key(NetworkType.UNKNOWN): UNKNOWN,
        to_icon_key(NetworkType.EDGE): THREE_G if config.show_at_least_3g else E,
        to_icon_key(NetworkType.CDMA): THREE_G if config.show_at_least_3g else ONE_X,
        to_icon_key(NetworkType.ONE_X_RTT): THREE_G if config.show_at_least_3g else ONE_X,
        to_icon_key(NetworkType.GPRS): THREE_G if config.show_at_least_3g else G,
        to_icon_key(NetworkType.GSM): THREE_G if config.show_at_least_3g else G,
        to_icon_key(NetworkType.IDEN): THREE_G if config.show_at_least_3g else G,
    }

    hspa = (H, H_PLUS) if config.hspa_data_distinguishable else (THREE_G, THREE_G)
    mapping[to_icon_key(NetworkType.HSDPA)] = hspa[0]
    mapping[to_icon_key(NetworkType.HSUPA)] = hspa[0]
    mapping[to_icon_key(NetworkType.HSPA)] = hspa[0]
    mapping[to_icon_key(NetworkType.HSPAP)] = hspa[1]

    if config.show_4g_for_lte:
        mapping[to_icon_key(NetworkType.LTE)] = FOUR_G
        lte_plus = FOUR_G if config.hide_lte_plus else FOUR_G_PLUS
    else:
        mapping[to_icon_key(NetworkType.LTE)] = LTE
        lte_plus = LTE if config.hide_lte_plus else LTE_PLUS
    mapping[to_display_icon_key(DisplayOverrideType.LTE_CA)] = lte_plus
    mapping[to_display_icon_key(DisplayOverrideType.LTE_ADVANCED_PRO)] = lte_plus
    mapping[to_icon_key(NetworkType.LTE_CA)] = lte_plus

    mapping[to_icon_key(NetworkType.IWLAN)] = WFC
    mapping[to_icon_key(NetworkType.NR)] = NR_5G
    mapping[to_display_icon_key(DisplayOverrideType.NR_NSA_MMWAVE)] = NR_5G_PLUS
    mapping[to_display_icon_key(DisplayOverrideType.NR_ADVANCED)] = NR_5G_PLUS
    return mapping


def get_default_icon(config: MobileMappingsConfig) -> MobileIconGroup:
    """Icon group used when a lookup key has no mapping."""
    if not config.show_at_least_3g:
        return G
    return THREE_G
