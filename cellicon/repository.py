"""
cellicon Repository - Inputs of the Derivation Graph
====================================================

Two bundles of writable signals stand in for the collaborators that feed the
icon pipeline:

- MobileConnectionRepository: per-connection telephony state
- MobileIconPolicies: device-wide policies shared by every connection

A platform binding writes into these signals; the interactor only reads them.
All signals of a bundle share one Dispatcher. The interactor requires the
policies and its connection to use the same Dispatcher.
"""

from typing import Any, Dict, Optional

from .config import CellIconConfig, MobileMappingsConfig
from .dispatcher import Dispatcher
from .mappings import get_default_icon, map_icon_sets
from .models import (
    DataActivityModel,
    DataConnectionState,
    DefaultNetworkName,
    ImsRegistrationTech,
    MobileIconCustomizationMode,
    NetworkType,
    NrIconType,
    UnknownNetworkType,
)
from .signal import MutableSignal
from .table_log import TableLogBuffer

UNKNOWN_CARRIER_ID = -1
INVALID_SUBSCRIPTION_ID = -1
DEFAULT_NETWORK_NAME = "default"


class _SignalBundle:
    """Creates named MutableSignals on a shared dispatcher."""

    def __init__(self, dispatcher: Optional[Dispatcher], name: str):
        self.dispatcher = dispatcher if dispatcher is not None else Dispatcher(name)

    def _signal(self, name: str, initial: Any) -> MutableSignal:
        return MutableSignal(initial, name=name, dispatcher=self.dispatcher)

    def update(self, **values: Any) -> None:
        """
        Write several signals in keyword order.

        Each write propagates fully before the next one starts. Keys are
        attribute names, e.g. ``update(primary_level=3, is_gsm=True)``.
        """
        signals = []
        for attribute, value in values.items():
            signal = getattr(self, attribute, None)
            if not isinstance(signal, MutableSignal):
                raise AttributeError(f"{type(self).__name__} has no input signal '{attribute}'")
            signals.append((signal, value))

        def apply_all():
            for signal, value in signals:
                signal.set(value)

        self.dispatcher.submit(apply_all)


class MobileConnectionRepository(_SignalBundle):
    """Telephony state of one subscription."""

    def __init__(
        self,
        sub_id: int,
        dispatcher: Optional[Dispatcher] = None,
        table_log_buffer: Optional[TableLogBuffer] = None,
        table_log_size: int = 100,
    ):
        super().__init__(dispatcher, f"connection[{sub_id}]")
        self.sub_id = sub_id
        self.table_log_buffer = table_log_buffer or TableLogBuffer(
            f"MobileIconLog[{sub_id}]", max_size=table_log_size
        )
        signal = self._signal

        self.data_activity_direction = signal("activity", DataActivityModel())
        self.data_enabled = signal("dataEnabled", True)
        self.carrier_network_change_active = signal("carrierNetworkChangeActive", False)
        self.carrier_id = signal("carrierId", UNKNOWN_CARRIER_ID)
        self.operator_alpha_short = signal("operatorAlphaShort", None)
        self.network_name = signal("networkName", DefaultNetworkName(DEFAULT_NETWORK_NAME))
        self.carrier_name = signal("carrierName", DefaultNetworkName(DEFAULT_NETWORK_NAME))
        self.is_gsm = signal("isGsm", False)
        self.is_roaming = signal("isRoaming", False)
        self.cdma_roaming = signal("cdmaRoaming", False)
        self.data_roaming_enabled = signal("dataRoamingEnabled", False)
        self.primary_level = signal("primaryLevel", 0)
        self.cdma_level = signal("cdmaLevel", 0)
        self.lte_rsrp_level = signal("lteRsrpLevel", 0)
        self.number_of_levels = signal("numberOfLevels", 4)
        self.data_connection_state = signal(
            "dataConnectionState", DataConnectionState.DISCONNECTED
        )
        self.is_in_service = signal("isInService", False)
        self.is_emergency_only = signal("isEmergencyOnly", False)
        self.is_connection_failed = signal("isConnectionFailed", False)
        self.resolved_network_type = signal("resolvedNetworkType", UnknownNetworkType())
        self.voice_network_type = signal("voiceNetworkType", NetworkType.UNKNOWN)
        self.data_network_type = signal("dataNetworkType", NetworkType.UNKNOWN)
        self.origin_network_type = signal("originNetworkType", NetworkType.UNKNOWN)
        self.nr_icon_type = signal("nrIconType", NrIconType.INVALID)
        self.is_6rx = signal("is6Rx", False)
        self.voice_capable = signal("voiceCapable", False)
        self.video_capable = signal("videoCapable", False)
        self.ims_registered = signal("imsRegistered", False)
        self.ims_registration_tech = signal("imsRegistrationTech", ImsRegistrationTech.NONE)
        self.ciwlan_available = signal("ciwlanAvailable", False)
        self.is_non_terrestrial = signal("isNonTerrestrial", False)
        self.inflate_signal_strength = signal("inflateSignalStrength", False)
        self.is_allowed_during_airplane_mode = signal("isAllowedDuringAirplaneMode", False)
        self.has_prioritized_network_capabilities = signal(
            "hasPrioritizedNetworkCapabilities", False
        )

    @classmethod
    def from_config(
        cls,
        sub_id: int,
        config: CellIconConfig,
        dispatcher: Optional[Dispatcher] = None,
    ) -> "MobileConnectionRepository":
        return cls(sub_id, dispatcher=dispatcher, table_log_size=config.table_log_size)

    def __repr__(self) -> str:
        return f"MobileConnectionRepository(sub_id={self.sub_id})"


class MobileIconPolicies(_SignalBundle):
    """Device-wide inputs shared by every connection's interactor."""

    def __init__(
        self,
        dispatcher: Optional[Dispatcher] = None,
        mappings: Optional[MobileMappingsConfig] = None,
    ):
        super().__init__(dispatcher, "policies")
        mappings = mappings or MobileMappingsConfig()
        signal = self._signal

        self.default_subscription_has_data_enabled = signal(
            "defaultSubscriptionHasDataEnabled", True
        )
        self.always_show_data_rat_icon = signal("alwaysShowDataRatIcon", False)
        self.always_use_cdma_level = signal("alwaysUseCdmaLevel", False)
        self.is_single_carrier = signal("isSingleCarrier", True)
        self.mobile_is_default = signal("mobileIsDefault", False)
        self.default_mobile_icon_mapping = signal(
            "defaultMobileIconMapping", map_icon_sets(mappings)
        )
        self.default_mobile_icon_group = signal(
            "defaultMobileIconGroup", get_default_icon(mappings)
        )
        self.is_default_connection_failed = signal("isDefaultConnectionFailed", False)
        self.is_force_hidden = signal("isForceHidden", False)
        self.always_use_rsrp_level_for_lte = signal("alwaysUseRsrpLevelForLte", False)
        self.hide_no_internet_state = signal("hideNoInternetState", False)
        self.network_type_icon_customization = signal(
            "networkTypeIconCustomization", MobileIconCustomizationMode()
        )
        self.show_volte_icon = signal("showVolteIcon", False)
        self.show_vowifi_icon = signal("showVowifiIcon", False)
        self.default_data_sub_id = signal("defaultDataSubId", INVALID_SUBSCRIPTION_ID)
        self.dds_icon = signal("ddsIcon", None)
        self.cross_sim_display_signal_level = signal("crossSimDisplaySignalLevel", False)

    @classmethod
    def from_config(
        cls, config: CellIconConfig, dispatcher: Optional[Dispatcher] = None
    ) -> "MobileIconPolicies":
        return cls(dispatcher=dispatcher, mappings=config.mappings)

    def snapshot(self) -> Dict[str, Any]:
        """Current value of every policy, keyed by attribute name."""
        return {
            attribute: signal.value
            for attribute, signal in vars(self).items()
            if isinstance(signal, MutableSignal)
        }

    def __repr__(self) -> str:
        return "MobileIconPolicies()"


__all__ = [
    "MobileConnectionRepository",
    "MobileIconPolicies",
    "UNKNOWN_CARRIER_ID",
    "INVALID_SUBSCRIPTION_ID",
    "DEFAULT_NETWORK_NAME",
]
