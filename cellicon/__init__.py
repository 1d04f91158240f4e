"""
cellicon - Reactive Cellular Status Icon Derivation

Derives the status-bar state of a cellular connection (signal level icon,
network-type badge, carrier text, roaming) from independently updating
telephony signals, using a small synchronous signal engine with
combine-latest, map, distinct, switch-latest and while-subscribed sharing.
"""

from .carrier_name import CarrierNameCustomization
from .carrier_overrides import CarrierIdOverrides, MappingCarrierIdOverrides
from .config import CarrierNameConfig, CellIconConfig, MobileMappingsConfig
from .dispatcher import Dispatcher
from .interactor import MobileIconInteractor
from .mappings import get_default_icon, map_icon_sets, to_display_icon_key, to_icon_key
from .models import (
    CarrierMergedNetworkType,
    CellularIcon,
    DataActivityModel,
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
    NrIconType,
    OverriddenIcon,
    OverrideNetworkType,
    ResolvedNetworkType,
    SatelliteIcon,
    SignalIconModel,
    SubscriptionDerivedName,
    UnknownNetworkType,
)
from .operators import (
    CombinedSignal,
    DistinctSignal,
    MappedSignal,
    SharedSignal,
    SwitchLatestSignal,
    combine_latest,
)
from .repository import MobileConnectionRepository, MobileIconPolicies
from .signal import (
    NULL_EVENT,
    ConstantSignal,
    MutableSignal,
    ReadOnlySignal,
    ReadOnlySignalError,
    Signal,
    SignalError,
    constant,
)
from .table_log import DiffLoggedSignal, TableChange, TableLogBuffer

__all__ = [
    # Signal engine
    "Signal",
    "MutableSignal",
    "ReadOnlySignal",
    "ConstantSignal",
    "constant",
    "Dispatcher",
    "MappedSignal",
    "CombinedSignal",
    "DistinctSignal",
    "SwitchLatestSignal",
    "SharedSignal",
    "combine_latest",
    # Diff logging
    "TableLogBuffer",
    "TableChange",
    "DiffLoggedSignal",
    # Derivation graph
    "MobileIconInteractor",
    "MobileConnectionRepository",
    "MobileIconPolicies",
    # Collaborators
    "CarrierNameCustomization",
    "CarrierIdOverrides",
    "MappingCarrierIdOverrides",
    "map_icon_sets",
    "get_default_icon",
    "to_icon_key",
    "to_display_icon_key",
    # Config
    "CellIconConfig",
    "CarrierNameConfig",
    "MobileMappingsConfig",
    # Models
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
    "MobileIconCustomizationMode",
    "NetworkTypeIconModel",
    "DefaultIcon",
    "OverriddenIcon",
    "SignalIconModel",
    "CellularIcon",
    "SatelliteIcon",
    # Exceptions
    "SignalError",
    "ReadOnlySignalError",
    # Sentinel
    "NULL_EVENT",
]
