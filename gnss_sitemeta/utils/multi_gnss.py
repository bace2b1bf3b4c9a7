"""
Satellite system handling.

Provides the GNSS constellations a receiver can track and the parsing of
the "Satellite System" notation used in sitelogs, e.g. ``GPS+GLO+GAL``.

Usage:
    from gnss_sitemeta.utils.multi_gnss import parse_satellite_systems

    systems = parse_satellite_systems("GPS+GLONASS+BDS")
    format_satellite_systems(systems)  # "GPS+GLO+BDS"
"""

from __future__ import annotations

from enum import Enum


# =============================================================================
# GNSS Constellation Definitions
# =============================================================================

class SatelliteSystem(str, Enum):
    """GNSS satellite systems, valued by their sitelog designator."""

    GPS = "GPS"      # US Global Positioning System
    GLO = "GLO"      # Russian GLONASS
    GAL = "GAL"      # European Galileo
    QZSS = "QZSS"    # Japanese QZSS
    BDS = "BDS"      # Chinese BeiDou
    IRNSS = "IRNSS"  # Indian IRNSS/NavIC
    SBAS = "SBAS"    # SBAS (WAAS, EGNOS, MSAS, GAGAN)
    MIXED = "MIXED"  # Multi-constellation

    @property
    def abbreviation(self) -> str:
        """Single character system identifier used in RINEX."""
        return _RINEX_ABBREVIATIONS[self]


_RINEX_ABBREVIATIONS = {
    SatelliteSystem.GPS: "G",
    SatelliteSystem.GLO: "R",
    SatelliteSystem.GAL: "E",
    SatelliteSystem.QZSS: "J",
    SatelliteSystem.BDS: "C",
    SatelliteSystem.IRNSS: "I",
    SatelliteSystem.SBAS: "S",
    SatelliteSystem.MIXED: "M",
}

# Long or alternative names seen in sitelogs
SYSTEM_ALIASES = {
    "GLONASS": "GLO",
    "GALILEO": "GAL",
    "BEIDOU": "BDS",
    "NAVIC": "IRNSS",
}


def parse_satellite_systems(value: str) -> list[SatelliteSystem]:
    """Parse a '+' separated list of satellite systems.

    Aliases are normalized before validation, '/' is accepted as separator.

    Args:
        value: e.g. "GPS+GLO+GAL+BDS+SBAS"

    Returns:
        Systems in the given order

    Raises:
        ValueError: If a token is not a known satellite system
    """
    systems = []
    for token in value.replace("/", "+").split("+"):
        name = token.strip().upper()
        name = SYSTEM_ALIASES.get(name, name)
        try:
            systems.append(SatelliteSystem(name))
        except ValueError:
            raise ValueError(f"invalid satellite system: {token.strip()!r}") from None
    return systems


def format_satellite_systems(systems: list[SatelliteSystem]) -> str:
    """Render systems in sitelog manner, e.g. GPS+GLO."""
    return "+".join(s.value for s in systems)
