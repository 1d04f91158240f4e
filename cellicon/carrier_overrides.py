"""
Carrier-id icon overrides.

Some carriers ship their own artwork for specific network-type badges. The
override table is keyed by carrier id, then by icon group name, and yields an
asset id. Asset ids that are not positive mean "no override".
"""

from typing import Mapping, Optional, Protocol


class CarrierIdOverrides(Protocol):
    def entry_exists(self, carrier_id: int) -> bool:
        """True if the carrier has any override at all."""
        ...

    def lookup(self, carrier_id: int, icon_key: str) -> Optional[int]:
        """Override asset id for the carrier and icon group name, if any."""
        ...


class MappingCarrierIdOverrides:
    """Override table backed by a nested mapping."""

    def __init__(self, table: Optional[Mapping[int, Mapping[str, int]]] = None):
        self._table = {carrier: dict(icons) for carrier, icons in (table or {}).items()}

    def entry_exists(self, carrier_id: int) -> bool:
        return carrier_id in self._table

    def lookup(self, carrier_id: int, icon_key: str) -> Optional[int]:
        return self._table.get(carrier_id, {}).get(icon_key)

    def __repr__(self) -> str:
        return f"MappingCarrierIdOverrides(carriers={sorted(self._table)})"


__all__ = ["CarrierIdOverrides", "MappingCarrierIdOverrides"]
