"""
cellicon Models - Telephony Values and Icon Variants
====================================================

Immutable value types flowing through the derivation graph. Closed variant
families (network names, resolved network types, network-type icons, signal
icons) share a base class; consumers dispatch with ``isinstance`` and raise
``TypeError`` for anything outside the family.

Diffable models expose ``table_columns()`` so the table log records one column
per field.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


# ============================================================================
# TELEPHONY CONSTANTS
# ============================================================================


class NetworkType:
    """Radio access technology codes as reported by the modem."""

    UNKNOWN = 0
    GPRS = 1
    EDGE = 2
    UMTS = 3
    CDMA = 4
    EVDO_0 = 5
    EVDO_A = 6
    ONE_X_RTT = 7
    HSDPA = 8
    HSUPA = 9
    HSPA = 10
    IDEN = 11
    EVDO_B = 12
    LTE = 13
    EHRPD = 14
    HSPAP = 15
    GSM = 16
    TD_SCDMA = 17
    IWLAN = 18
    LTE_CA = 19
    NR = 20

    CLASS_2G = frozenset({GPRS, EDGE, CDMA, ONE_X_RTT, IDEN, GSM})
    CLASS_3G = frozenset(
        {UMTS, EVDO_0, EVDO_A, HSDPA, HSUPA, HSPA, EVDO_B, EHRPD, HSPAP, TD_SCDMA}
    )
    CLASS_4G = frozenset({LTE, LTE_CA, IWLAN})
    LTE_TYPES = frozenset({LTE, LTE_CA})


class DisplayOverrideType:
    """Display override types layered on top of the radio technology."""

    NONE = 0
    LTE_CA = 1
    LTE_ADVANCED_PRO = 2
    NR_NSA = 3
    NR_NSA_MMWAVE = 4
    NR_ADVANCED = 5

    NSA_TYPES = frozenset({NR_NSA, NR_NSA_MMWAVE})


class ImsRegistrationTech:
    NONE = -1
    LTE = 0
    IWLAN = 1
    CROSS_SIM = 2
    NR = 3


class NrIconType:
    INVALID = -1
    TYPE_NONE = 0
    TYPE_5G_BASIC = 1
    TYPE_5G_UWB = 2


class DataConnectionState(Enum):
    CONNECTED = "connected"
    CONNECTING = "connecting"
    DISCONNECTED = "disconnected"
    DISCONNECTING = "disconnecting"
    SUSPENDED = "suspended"
    HANDOVER_IN_PROGRESS = "handover_in_progress"
    UNKNOWN = "unknown"
    INVALID = "invalid"


@dataclass(frozen=True)
class DataActivityModel:
    has_activity_in: bool = False
    has_activity_out: bool = False

    def table_columns(self) -> Dict[str, Any]:
        return {"in": self.has_activity_in, "out": self.has_activity_out}


# ============================================================================
# ICON GROUPS
# ============================================================================


@dataclass(frozen=True)
class MobileIconGroup:
    """A network-type icon group: the badge shown next to the signal bars."""

    name: str
    data_type: int = 0
    description: str = ""


# ============================================================================
# NETWORK NAMES
# ============================================================================


@dataclass(frozen=True)
class NetworkNameModel:
    name: str

    def table_columns(self) -> Dict[str, Any]:
        return {"type": type(self).__name__, "name": self.name}


@dataclass(frozen=True)
class DefaultNetworkName(NetworkNameModel):
    """Placeholder name configured for the device, used until a real one arrives."""


@dataclass(frozen=True)
class SubscriptionDerivedName(NetworkNameModel):
    """Name taken from the subscription record."""


@dataclass(frozen=True)
class IntentDerivedName(NetworkNameModel):
    """Name derived from the service-provider broadcast or the operator name."""


# ============================================================================
# RESOLVED NETWORK TYPES
# ============================================================================


@dataclass(frozen=True)
class ResolvedNetworkType:
    """What the connection is camped on, after display overrides are resolved."""

    @property
    def lookup_key(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class UnknownNetworkType(ResolvedNetworkType):
    @property
    def lookup_key(self) -> str:
        return "unknown"


@dataclass(frozen=True)
class DefaultNetworkType(ResolvedNetworkType):
    key: str
    network_type: int = NetworkType.UNKNOWN

    @property
    def lookup_key(self) -> str:
        return self.key


@dataclass(frozen=True)
class OverrideNetworkType(ResolvedNetworkType):
    key: str
    network_type: int = DisplayOverrideType.NONE

    @property
    def lookup_key(self) -> str:
        return self.key


@dataclass(frozen=True)
class CarrierMergedNetworkType(ResolvedNetworkType):
    icon_group_override: MobileIconGroup = field(
        default_factory=lambda: MobileIconGroup("CWF")
    )

    @property
    def lookup_key(self) -> str:
        return "cwf"


# ============================================================================
# 5G SERVICE STATE
# ============================================================================

FIVE_G_BASIC = MobileIconGroup("5G", data_type=2001, description="5G")
FIVE_G_UWB = MobileIconGroup("5G_PLUS", data_type=2002, description="5G+")


@dataclass(frozen=True)
class FiveGServiceState:
    nr_icon_type: int = NrIconType.INVALID
    is_6rx: bool = False

    @property
    def is_nr_icon_type_valid(self) -> bool:
        return self.nr_icon_type not in (NrIconType.INVALID, NrIconType.TYPE_NONE)

    @property
    def icon_group(self) -> Optional[MobileIconGroup]:
        if self.nr_icon_type == NrIconType.TYPE_5G_BASIC:
            return FIVE_G_BASIC
        if self.nr_icon_type == NrIconType.TYPE_5G_UWB:
            return FIVE_G_UWB
        return None


# ============================================================================
# CUSTOMIZATION SNAPSHOT
# ============================================================================


@dataclass(frozen=True)
class MobileIconCustomizationMode:
    """
    Immutable aggregate of the inputs the customization rules look at.

    A new snapshot is built whenever any constituent changes.
    """

    data_network_type: int = NetworkType.UNKNOWN
    voice_network_type: int = NetworkType.UNKNOWN
    origin_network_type: int = NetworkType.UNKNOWN
    five_g_service_state: FiveGServiceState = field(default_factory=FiveGServiceState)
    always_use_rsrp_level_for_lte: bool = False
    lte_rsrp_level: int = 0
    is_rat_customization: bool = False
    always_show_network_type_icon: bool = False
    dds_rat_icon_enhancement_enabled: bool = False
    non_dds_rat_icon_enhancement_enabled: bool = False
    mobile_data_enabled: bool = False
    data_roaming_enabled: bool = False
    is_default_data_sub: bool = False
    is_roaming: bool = False
    voice_capable: bool = False
    video_capable: bool = False
    ims_registered: bool = False


# ============================================================================
# NETWORK TYPE ICON
# ============================================================================


@dataclass(frozen=True)
class NetworkTypeIconModel:
    icon_group: MobileIconGroup

    @property
    def icon_id(self) -> int:
        raise NotImplementedError

    @property
    def content_description(self) -> str:
        return self.icon_group.description

    def table_columns(self) -> Dict[str, Any]:
        return {"networkTypeIcon": self.icon_group.name, "iconId": self.icon_id}


@dataclass(frozen=True)
class DefaultIcon(NetworkTypeIconModel):
    """The icon group's own asset."""

    @property
    def icon_id(self) -> int:
        return self.icon_group.data_type


@dataclass(frozen=True)
class OverriddenIcon(NetworkTypeIconModel):
    """A carrier-specific asset replacing the icon group's own."""

    icon_override: int = 0

    @property
    def icon_id(self) -> int:
        return self.icon_override


# ============================================================================
# SIGNAL ICON
# ============================================================================

SATELLITE_ICONS = (
    "ic_satellite_connected_0",
    "ic_satellite_connected_1",
    "ic_satellite_connected_2",
)


def satellite_icon_for_level(level: int) -> Optional[str]:
    """Satellite asset for a signal strength, or None outside the known range."""
    if level == 0:
        return SATELLITE_ICONS[0]
    if level in (1, 2):
        return SATELLITE_ICONS[1]
    if level in (3, 4):
        return SATELLITE_ICONS[2]
    return None


@dataclass(frozen=True)
class SignalIconModel:
    level: int

    def table_columns(self) -> Dict[str, Any]:
        raise NotImplementedError


@dataclass(frozen=True)
class CellularIcon(SignalIconModel):
    number_of_levels: int = 4
    show_exclamation_mark: bool = False
    carrier_network_change: bool = False

    def table_columns(self) -> Dict[str, Any]:
        return {
            "type": "c",
            "level": self.level,
            "numLevels": self.number_of_levels,
            "showExclamation": self.show_exclamation_mark,
            "carrierNetworkChange": self.carrier_network_change,
        }


@dataclass(frozen=True)
class SatelliteIcon(SignalIconModel):
    icon: str = SATELLITE_ICONS[0]

    def table_columns(self) -> Dict[str, Any]:
        return {"type": "s", "level": self.level, "icon": self.icon}


__all__ = [
    "NetworkType",
    "DisplayOverrideType",
    "ImsRegistrationTech",
    "NrIconType",
    "DataConnectionState",
    "DataActivityModel",
    "MobileIconGroup",
    "NetworkNameModel",
    "DefaultNetworkName",
    "SubscriptionDerivedName",
    "IntentDerivedName",
    "ResolvedNetworkType",
    "UnknownNetworkType",
    "DefaultNetworkType",
    "OverrideNetworkType",
    "CarrierMergedNetworkType",
    "FiveGServiceState",
    "FIVE_G_BASIC",
    "FIVE_G_UWB",
    "MobileIconCustomizationMode",
    "NetworkTypeIconModel",
    "DefaultIcon",
    "OverriddenIcon",
    "SATELLITE_ICONS",
    "satellite_icon_for_level",
    "SignalIconModel",
    "CellularIcon",
    "SatelliteIcon",
]
