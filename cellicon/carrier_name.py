"""
Carrier-name customization.

Turns the carrier text reported for a subscription into the text shown to the
user: localized carrier names, an optional network-class suffix ("CMCC 4G"),
and a combined "home-visited" name when roaming between known carriers.
"""

from typing import Callable, Optional, Tuple

from .config import CarrierNameConfig
from .models import NetworkType, NrIconType

# sub_id -> (sim operator MCCMNC, network operator MCCMNC)
OperatorLookup = Callable[[int], Tuple[str, str]]


def _no_operators(sub_id: int) -> Tuple[str, str]:
    return "", ""


class CarrierNameCustomization:
    """
    Carrier text rules for one device configuration.

    ``operator_lookup`` is the telephony collaborator that reports which
    operators the SIM and the serving network belong to; it is only consulted
    when roaming customization is enabled.
    """

    def __init__(
        self,
        config: Optional[CarrierNameConfig] = None,
        operator_lookup: OperatorLookup = _no_operators,
    ):
        self._config = config or CarrierNameConfig()
        self._operator_lookup = operator_lookup
        self._carrier_map = (
            self._config.carrier_map() if self._config.roaming_customization_enabled else {}
        )

    @property
    def show_customize_name(self) -> bool:
        return self._config.show_customize_name

    @property
    def is_roaming_customization_enabled(self) -> bool:
        return self._config.roaming_customization_enabled

    def is_roaming(self, sub_id: int) -> bool:
        """Roaming means the SIM and the network map to different known carriers."""
        sim_name, network_name = self._operator_names(sub_id)
        return bool(sim_name) and bool(network_name) and sim_name != network_name

    def get_roaming_carrier_name(self, sub_id: int) -> str:
        sim_name, network_name = self._operator_names(sub_id)
        return f"{sim_name}{self._config.connector}{network_name}"

    def _operator_names(self, sub_id: int) -> Tuple[str, str]:
        sim_operator, network_operator = self._operator_lookup(sub_id)
        return (
            self._carrier_map.get(sim_operator, ""),
            self._carrier_map.get(network_operator, ""),
        )

    def get_customize_carrier_name(
        self,
        sub_id: int,
        origin_carrier_name: str,
        show_network_type: bool,
        nr_icon_type: int = NrIconType.INVALID,
        data_network_type: int = NetworkType.UNKNOWN,
        voice_network_type: int = NetworkType.UNKNOWN,
        is_in_service: bool = False,
    ) -> str:
        if not self._config.show_customize_name:
            return origin_carrier_name
        if self.is_roaming_customization_enabled and self.is_roaming(sub_id):
            return self.get_roaming_carrier_name(sub_id)
        network_class = None
        if show_network_type:
            network_class = self.get_network_name(
                data_network_type, voice_network_type, is_in_service, nr_icon_type
            )
        return self._customize(origin_carrier_name, network_class)

    def _customize(self, origin_carrier_name: str, network_class: Optional[str]) -> str:
        if not origin_carrier_name:
            return ""
        separator = self._config.separator
        names = origin_carrier_name.split(separator, 1)
        parts = []
        for j, name in enumerate(names):
            name = self._localize(name)
            names[j] = name
            if not name:
                continue
            if network_class:
                name = f"{name} {network_class}"
                names[j] = name
            if j > 0 and name == names[j - 1]:
                continue
            # An empty first part leaves no leading separator
            if parts:
                parts.append(separator)
            parts.append(name)
        return "".join(parts)

    def _localize(self, name: str) -> str:
        origin_names = self._config.origin_carrier_names
        for i, origin in enumerate(origin_names):
            if origin.lower() == name.lower():
                return self._config.locale_carrier_names[i]
        return name

    def get_network_name(
        self,
        data_network_type: int,
        voice_network_type: int,
        is_in_service: bool,
        nr_icon_type: int,
    ) -> str:
        """Network class label ("4G", "5G", ...) for the current registration."""
        network_type = NetworkType.UNKNOWN
        if is_in_service:
            network_type = data_network_type
            if network_type == NetworkType.UNKNOWN:
                network_type = voice_network_type
        five_g = self._five_g_network_class(data_network_type, network_type, nr_icon_type)
        if five_g is not None:
            return five_g
        return self._network_type_to_string(network_type)

    def _five_g_network_class(
        self, data_network_type: int, network_type: int, nr_icon_type: int
    ) -> Optional[str]:
        nr_icon_valid = nr_icon_type not in (NrIconType.INVALID, NrIconType.TYPE_NONE)
        if network_type == NetworkType.NR or (
            nr_icon_valid and data_network_type in NetworkType.LTE_TYPES
        ):
            if nr_icon_type == NrIconType.TYPE_5G_UWB and self._config.display_5g_a:
                return self._config.data_connection_5g_a
            return self._config.data_connection_5g
        return None

    def _network_type_to_string(self, network_type: int) -> str:
        if network_type in NetworkType.CLASS_2G:
            return self._config.rat_2g
        if network_type in NetworkType.CLASS_3G:
            return self._config.rat_3g
        if network_type in NetworkType.CLASS_4G:
            return self._config.rat_4g
        return self._config.rat_unknown


__all__ = ["CarrierNameCustomization", "OperatorLookup"]
