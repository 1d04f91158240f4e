"""
cellicon Interactor - Derivation Graph for One Connection
=========================================================

MobileIconInteractor wires a connection's raw telephony signals and the
device-wide policies into the signals a status-bar icon is drawn from:
signal level icon, network-type icon, carrier text, roaming and friends.

Every output is shared while subscribed: nothing is computed until a consumer
subscribes, and the whole upstream chain is released when the last consumer
unsubscribes. Reading ``.value`` on an idle output returns its last known
value (or its initial value).

Example:
    connection = MobileConnectionRepository(sub_id=1, dispatcher=dispatcher)
    policies = MobileIconPolicies(dispatcher=dispatcher)
    interactor = MobileIconInteractor(connection, policies)

    unsubscribe = interactor.signal_level_icon.subscribe(render, call_immediately=True)
    connection.update(is_in_service=True, primary_level=3)
"""

from typing import Optional

from . import rules
from .carrier_name import CarrierNameCustomization, OperatorLookup
from .carrier_overrides import CarrierIdOverrides, MappingCarrierIdOverrides
from .config import CellIconConfig
from .models import (
    CellularIcon,
    DefaultIcon,
    FiveGServiceState,
    IntentDerivedName,
    MobileIconCustomizationMode,
)
from .operators import combine_latest
from .repository import MobileConnectionRepository, MobileIconPolicies
from .signal import Signal, constant


class MobileIconInteractor:
    """Interactor for a single mobile connection (one subscription id)."""

    def __init__(
        self,
        connection: MobileConnectionRepository,
        policies: MobileIconPolicies,
        carrier_name_customization: Optional[CarrierNameCustomization] = None,
        carrier_id_overrides: Optional[CarrierIdOverrides] = None,
        satellite_enabled: bool = True,
    ):
        if connection.dispatcher is not policies.dispatcher:
            raise ValueError(
                f"{connection!r} and {policies!r} must share one Dispatcher; "
                "otherwise policy writes interleave with connection updates"
            )
        self._connection = connection
        self._policies = policies
        self._carrier_name_customization = (
            carrier_name_customization or CarrierNameCustomization()
        )
        self._carrier_id_overrides = carrier_id_overrides or MappingCarrierIdOverrides()
        self.sub_id = connection.sub_id
        self.table_log_buffer = connection.table_log_buffer

        self._build_pass_throughs(satellite_enabled)
        self._build_names()
        self._build_customization()
        self._build_network_type_icon()
        self._build_signal_icon()

    @classmethod
    def from_config(
        cls,
        connection: MobileConnectionRepository,
        policies: MobileIconPolicies,
        config: CellIconConfig,
        operator_lookup: Optional[OperatorLookup] = None,
        carrier_id_overrides: Optional[CarrierIdOverrides] = None,
    ) -> "MobileIconInteractor":
        """Build an interactor whose carrier text and satellite support follow ``config``."""
        if operator_lookup is None:
            customization = CarrierNameCustomization(config.carrier_name)
        else:
            customization = CarrierNameCustomization(config.carrier_name, operator_lookup)
        return cls(
            connection,
            policies,
            carrier_name_customization=customization,
            carrier_id_overrides=carrier_id_overrides,
            satellite_enabled=config.satellite_enabled,
        )

    # ========================================================================
    # PASS-THROUGH INPUTS
    # ========================================================================

    def _build_pass_throughs(self, satellite_enabled: bool) -> None:
        connection = self._connection
        policies = self._policies

        self.activity = connection.data_activity_direction.as_read_only()
        self.is_data_enabled = connection.data_enabled.as_read_only()
        self.carrier_network_change_active = (
            connection.carrier_network_change_active.as_read_only()
        )
        self.is_in_service = connection.is_in_service.as_read_only()
        self.is_emergency_only = connection.is_emergency_only.as_read_only()
        self.is_connection_failed = connection.is_connection_failed.as_read_only()
        self.is_allowed_during_airplane_mode = (
            connection.is_allowed_during_airplane_mode.as_read_only()
        )
        self.show_slice_attribution = (
            connection.has_prioritized_network_capabilities.as_read_only()
        )

        self.mobile_is_default = policies.mobile_is_default.as_read_only()
        self.default_subscription_has_data_enabled = (
            policies.default_subscription_has_data_enabled.as_read_only()
        )
        self.is_default_connection_failed = policies.is_default_connection_failed.as_read_only()
        self.always_show_data_rat_icon = policies.always_show_data_rat_icon.as_read_only()
        self.is_single_carrier = policies.is_single_carrier.as_read_only()
        self.is_force_hidden = policies.is_force_hidden.as_read_only()
        self.always_use_rsrp_level_for_lte = (
            policies.always_use_rsrp_level_for_lte.as_read_only()
        )
        self.hide_no_internet_state = policies.hide_no_internet_state.as_read_only()
        self.show_volte_icon = policies.show_volte_icon.as_read_only()
        self.show_vowifi_icon = policies.show_vowifi_icon.as_read_only()

        if satellite_enabled:
            self.is_non_terrestrial: Signal[bool] = connection.is_non_terrestrial.as_read_only()
        else:
            self.is_non_terrestrial = constant(
                False, name="isNonTerrestrial", dispatcher=connection.dispatcher
            )

        self.is_data_connected: Signal[bool] = connection.data_connection_state.map(
            rules.is_data_connected, name="isDataConnected"
        ).share(False)

    # ========================================================================
    # NAMES AND ROAMING
    # ========================================================================

    def _build_names(self) -> None:
        connection = self._connection
        customization = self._carrier_name_customization
        sub_id = self.sub_id

        self.network_name = combine_latest(
            connection.operator_alpha_short,
            connection.network_name,
            rules.resolve_network_name,
            name="networkName",
        ).share(connection.network_name.value)

        self.carrier_name: Signal[str] = combine_latest(
            connection.operator_alpha_short,
            connection.carrier_name,
            rules.resolve_carrier_name,
            name="carrierName",
        ).share(connection.carrier_name.value.name)

        def customize_carrier_name(
            carrier_name, nr_icon_type, data_network_type, voice_network_type, is_in_service
        ):
            return customization.get_customize_carrier_name(
                sub_id,
                carrier_name,
                True,
                nr_icon_type,
                data_network_type,
                voice_network_type,
                is_in_service,
            )

        self.customized_carrier_name: Signal[str] = combine_latest(
            self.carrier_name,
            connection.nr_icon_type,
            connection.data_network_type,
            connection.voice_network_type,
            connection.is_in_service,
            customize_carrier_name,
            name="customizedCarrierName",
        ).share(connection.carrier_name.value.name)

        self.customized_network_name = self.network_name.map(
            lambda network_name: IntentDerivedName(
                customization.get_customize_carrier_name(sub_id, network_name.name, False)
            ),
            name="customizedNetworkName",
        ).share(connection.network_name.value)

        self.is_roaming: Signal[bool] = combine_latest(
            connection.carrier_network_change_active,
            connection.is_gsm,
            connection.is_roaming,
            connection.cdma_roaming,
            rules.resolve_roaming,
            name="isRoaming",
        ).share(False)

    # ========================================================================
    # CUSTOMIZATION SNAPSHOTS
    # ========================================================================

    def _build_customization(self) -> None:
        connection = self._connection
        policies = self._policies
        sub_id = self.sub_id
        initial_is_dds = sub_id == policies.default_data_sub_id.value

        self._signal_strength_customization = combine_latest(
            policies.always_use_rsrp_level_for_lte,
            connection.lte_rsrp_level,
            connection.voice_network_type,
            connection.data_network_type,
            lambda always_use_rsrp, rsrp_level, voice_type, data_type: MobileIconCustomizationMode(
                always_use_rsrp_level_for_lte=always_use_rsrp,
                lte_rsrp_level=rsrp_level,
                voice_network_type=voice_type,
                data_network_type=data_type,
            ),
            name="signalStrengthCustomization",
        ).share(MobileIconCustomizationMode())

        self.is_default_data_sub: Signal[bool] = (
            policies.default_data_sub_id.map(lambda dds: dds == sub_id, name="isDefaultDataSub")
            .distinct_until_changed()
            .log_diffs(
                self.table_log_buffer,
                column_name="isDefaultDataSub",
                initial_value=initial_is_dds,
            )
            .share(initial_is_dds)
        )

        self.network_type_icon_customization = combine_latest(
            policies.network_type_icon_customization,
            self.is_data_enabled,
            connection.data_roaming_enabled,
            self.is_roaming,
            self.is_default_data_sub,
            lambda state, data_enabled, data_roaming, roaming, is_dds: MobileIconCustomizationMode(
                is_rat_customization=state.is_rat_customization,
                always_show_network_type_icon=state.always_show_network_type_icon,
                dds_rat_icon_enhancement_enabled=state.dds_rat_icon_enhancement_enabled,
                non_dds_rat_icon_enhancement_enabled=state.non_dds_rat_icon_enhancement_enabled,
                mobile_data_enabled=data_enabled,
                data_roaming_enabled=data_roaming,
                is_default_data_sub=is_dds,
                is_roaming=roaming,
            ),
            name="networkTypeIconCustomization",
        ).share(MobileIconCustomizationMode())

        def build_mobile_icon_customization(
            signal_strength, nr_icon_type, is_6rx, network_type_icon, origin_network_type
        ):
            return MobileIconCustomizationMode(
                data_network_type=signal_strength.data_network_type,
                voice_network_type=signal_strength.voice_network_type,
                five_g_service_state=FiveGServiceState(nr_icon_type, is_6rx),
                is_rat_customization=network_type_icon.is_rat_customization,
                always_show_network_type_icon=network_type_icon.always_show_network_type_icon,
                dds_rat_icon_enhancement_enabled=network_type_icon.dds_rat_icon_enhancement_enabled,
                non_dds_rat_icon_enhancement_enabled=(
                    network_type_icon.non_dds_rat_icon_enhancement_enabled
                ),
                mobile_data_enabled=network_type_icon.mobile_data_enabled,
                data_roaming_enabled=network_type_icon.data_roaming_enabled,
                is_default_data_sub=network_type_icon.is_default_data_sub,
                is_roaming=network_type_icon.is_roaming,
                origin_network_type=origin_network_type,
            )

        self._mobile_icon_customization = combine_latest(
            self._signal_strength_customization,
            connection.nr_icon_type,
            connection.is_6rx,
            self.network_type_icon_customization,
            connection.origin_network_type,
            build_mobile_icon_customization,
            name="mobileIconCustomization",
        ).share(MobileIconCustomizationMode())

        self.ims_info = combine_latest(
            connection.voice_network_type,
            connection.origin_network_type,
            connection.voice_capable,
            connection.video_capable,
            connection.ims_registered,
            lambda voice_type, origin_type, voice, video, registered: MobileIconCustomizationMode(
                voice_network_type=voice_type,
                origin_network_type=origin_type,
                voice_capable=voice,
                video_capable=video,
                ims_registered=registered,
            ),
            name="imsInfo",
        ).share(MobileIconCustomizationMode())

        self.customized_icon = (
            combine_latest(
                self.is_default_data_sub,
                connection.ims_registration_tech,
                policies.dds_icon,
                policies.cross_sim_display_signal_level,
                connection.ciwlan_available,
                rules.resolve_customized_icon,
                name="customizedIcon",
            )
            .distinct_until_changed()
            .share(None)
        )

        self.vowifi_available: Signal[bool] = combine_latest(
            connection.ims_registration_tech,
            connection.voice_capable,
            policies.show_vowifi_icon,
            rules.resolve_vowifi_available,
            name="voWifiAvailable",
        ).share(False)

    # ========================================================================
    # NETWORK TYPE ICON
    # ========================================================================

    def _build_network_type_icon(self) -> None:
        connection = self._connection
        policies = self._policies
        overrides = self._carrier_id_overrides
        default_group = policies.default_mobile_icon_group.value

        # What the network type icon would be before carrier-id overrides
        self._default_network_type = combine_latest(
            connection.resolved_network_type,
            policies.default_mobile_icon_mapping,
            policies.default_mobile_icon_group,
            self._mobile_icon_customization,
            rules.resolve_default_network_type,
            name="defaultNetworkType",
        ).share(default_group)

        initial = DefaultIcon(default_group)
        self.network_type_icon_group = (
            combine_latest(
                self._default_network_type,
                connection.carrier_id,
                lambda group, carrier_id: rules.resolve_network_type_icon(
                    group, carrier_id, overrides
                ),
                name="networkTypeIconGroup",
            )
            .distinct_until_changed()
            .log_diffs(self.table_log_buffer, initial_value=initial)
            .share(initial)
        )

    # ========================================================================
    # SIGNAL LEVEL ICON
    # ========================================================================

    def _build_signal_icon(self) -> None:
        connection = self._connection
        policies = self._policies

        self._level: Signal[int] = combine_latest(
            connection.is_gsm,
            connection.primary_level,
            connection.cdma_level,
            policies.always_use_cdma_level,
            self._signal_strength_customization,
            connection.number_of_levels,
            rules.resolve_level,
            name="level",
        ).share(0)

        self.show_exclamation_mark: Signal[bool] = combine_latest(
            self.is_data_enabled,
            self.is_data_connected,
            self.is_connection_failed,
            self.is_in_service,
            self.hide_no_internet_state,
            rules.resolve_show_exclamation_mark,
            name="showExclamationMark",
        ).share(True)

        self.shown_level: Signal[int] = combine_latest(
            self._level,
            self.is_in_service,
            connection.inflate_signal_strength,
            rules.resolve_shown_level,
            name="shownLevel",
        ).share(0)

        cellular_icon = combine_latest(
            self.shown_level,
            connection.number_of_levels,
            self.show_exclamation_mark,
            self.carrier_network_change_active,
            CellularIcon,
            name="cellularIcon",
        )

        self._satellite_icon = self.shown_level.map(
            rules.satellite_icon, name="satelliteIcon"
        ).share()

        self._customized_cellular_icon = combine_latest(
            cellular_icon,
            self.customized_icon,
            rules.select_cellular_icon,
            name="customizedCellularIcon",
        )

        initial = CellularIcon(
            self.shown_level.value,
            connection.number_of_levels.value,
            self.show_exclamation_mark.value,
            self.carrier_network_change_active.value,
        )
        # Satellite mode is checked first and wins over cross-SIM substitution
        self.signal_level_icon = (
            self.is_non_terrestrial.switch_latest(
                lambda ntn: self._satellite_icon if ntn else self._customized_cellular_icon,
                name="signalLevelIcon",
            )
            .distinct_until_changed()
            .log_diffs(self.table_log_buffer, column_prefix="icon", initial_value=initial)
            .share(initial)
        )

    def __repr__(self) -> str:
        return f"MobileIconInteractor(sub_id={self.sub_id})"


__all__ = ["MobileIconInteractor"]
