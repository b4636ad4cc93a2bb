"""Timezone resolution for TZID values found in ICS calendars.

Calendars exported by Outlook/Exchange and friends rarely use IANA zone
identifiers. Resolution therefore walks a short ladder:

1. the name is loaded directly as an IANA identifier;
2. the name is looked up verbatim in ``TimezoneResolver.WINDOWS_TZ_MAP``;
3. every ``<whitespace><digit>`` run is stripped from the name and the
   table is queried again (reported as a compatibility mapping);
4. UTC is returned and the name is reported as unmapped.

Resolution never fails; the outcome only exists so callers can emit
diagnostics.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import ClassVar, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .lite_exceptions import (
    LiteTimezoneCompatibilityError,
    LiteTimezoneError,
    LiteUnmappedTimezoneError,
)

logger = logging.getLogger(__name__)

UTC_ZONE_NAME = "UTC"

# Trailing disambiguators such as "Mexico Standard Time 2"
_COMPATIBILITY_SUFFIX_RE = re.compile(r"\s[0-9]")


class ResolutionOutcome(str, Enum):
    """How a timezone name was resolved."""

    EXACT = "exact"
    COMPATIBILITY = "compatibility"
    UNMAPPED = "unmapped"


@dataclass(frozen=True)
class TimezoneResolution:
    """Result of resolving a timezone name.

    Attributes:
        zone: Usable zone (UTC when the name could not be mapped)
        outcome: Classification used for diagnostics
        original_name: Name as it appeared in the calendar
        matched_name: Table key that produced the zone, if any
    """

    zone: ZoneInfo
    outcome: ResolutionOutcome
    original_name: str
    matched_name: Optional[str] = None

    def as_error(self) -> Optional[LiteTimezoneError]:
        """Return the diagnostic for this resolution, or None when exact."""
        if self.outcome == ResolutionOutcome.COMPATIBILITY:
            return LiteTimezoneCompatibilityError(self.original_name, self.matched_name or "")
        if self.outcome == ResolutionOutcome.UNMAPPED:
            return LiteUnmappedTimezoneError(self.original_name)
        return None


def _load_zone(name: str) -> Optional[ZoneInfo]:
    """Load an IANA zone, returning None instead of raising."""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return None


class TimezoneResolver:
    """Maps IANA, Windows and legacy zone display names to ZoneInfo objects."""

    # Windows timezone display names to IANA identifier mapping, followed by
    # non-standard spellings seen in the wild
    # https://docs.microsoft.com/en-us/windows-hardware/manufacture/desktop/default-time-zones
    WINDOWS_TZ_MAP: ClassVar[Mapping[str, str]] = MappingProxyType({
        "Egypt Standard Time": "Africa/Cairo",
        "Morocco Standard Time": "Africa/Casablanca",
        "South Africa Standard Time": "Africa/Johannesburg",
        "W. Central Africa Standard Time": "Africa/Lagos",
        "E. Africa Standard Time": "Africa/Nairobi",
        "Libya Standard Time": "Africa/Tripoli",
        "Namibia Standard Time": "Africa/Windhoek",
        "Aleutian Standard Time": "America/Adak",
        "Alaskan Standard Time": "America/Anchorage",
        "Tocantins Standard Time": "America/Araguaina",
        "Paraguay Standard Time": "America/Asuncion",
        "Bahia Standard Time": "America/Bahia",
        "SA Pacific Standard Time": "America/Bogota",
        "Argentina Standard Time": "America/Buenos_Aires",
        "Eastern Standard Time (Mexico)": "America/Cancun",
        "Venezuela Standard Time": "America/Caracas",
        "SA Eastern Standard Time": "America/Cayenne",
        "Central Standard Time": "America/Chicago",
        "Mountain Standard Time (Mexico)": "America/Chihuahua",
        "Central Brazilian Standard Time": "America/Cuiaba",
        "Mountain Standard Time": "America/Denver",
        "Greenland Standard Time": "America/Godthab",
        "Turks And Caicos Standard Time": "America/Grand_Turk",
        "Central America Standard Time": "America/Guatemala",
        "Atlantic Standard Time": "America/Halifax",
        "Cuba Standard Time": "America/Havana",
        "US Eastern Standard Time": "America/Indianapolis",
        "SA Western Standard Time": "America/La_Paz",
        "Pacific Standard Time": "America/Los_Angeles",
        "Central Standard Time (Mexico)": "America/Mexico_City",
        "Saint Pierre Standard Time": "America/Miquelon",
        "Montevideo Standard Time": "America/Montevideo",
        "Eastern Standard Time": "America/New_York",
        "US Mountain Standard Time": "America/Phoenix",
        "Haiti Standard Time": "America/Port-au-Prince",
        "Magallanes Standard Time": "America/Punta_Arenas",
        "Canada Central Standard Time": "America/Regina",
        "Pacific SA Standard Time": "America/Santiago",
        "E. South America Standard Time": "America/Sao_Paulo",
        "Newfoundland Standard Time": "America/St_Johns",
        "Pacific Standard Time (Mexico)": "America/Tijuana",
        "Central Asia Standard Time": "Asia/Almaty",
        "Jordan Standard Time": "Asia/Amman",
        "Arabic Standard Time": "Asia/Baghdad",
        "Azerbaijan Standard Time": "Asia/Baku",
        "SE Asia Standard Time": "Asia/Bangkok",
        "Altai Standard Time": "Asia/Barnaul",
        "Middle East Standard Time": "Asia/Beirut",
        "India Standard Time": "Asia/Calcutta",
        "Transbaikal Standard Time": "Asia/Chita",
        "Sri Lanka Standard Time": "Asia/Colombo",
        "Syria Standard Time": "Asia/Damascus",
        "Bangladesh Standard Time": "Asia/Dhaka",
        "Arabian Standard Time": "Asia/Dubai",
        "West Bank Standard Time": "Asia/Hebron",
        "W. Mongolia Standard Time": "Asia/Hovd",
        "North Asia East Standard Time": "Asia/Irkutsk",
        "Israel Standard Time": "Asia/Jerusalem",
        "Afghanistan Standard Time": "Asia/Kabul",
        "Russia Time Zone 11": "Asia/Kamchatka",
        "Pakistan Standard Time": "Asia/Karachi",
        "Nepal Standard Time": "Asia/Katmandu",
        "North Asia Standard Time": "Asia/Krasnoyarsk",
        "Magadan Standard Time": "Asia/Magadan",
        "N. Central Asia Standard Time": "Asia/Novosibirsk",
        "Omsk Standard Time": "Asia/Omsk",
        "North Korea Standard Time": "Asia/Pyongyang",
        "Myanmar Standard Time": "Asia/Rangoon",
        "Arab Standard Time": "Asia/Riyadh",
        "Sakhalin Standard Time": "Asia/Sakhalin",
        "Korea Standard Time": "Asia/Seoul",
        "China Standard Time": "Asia/Shanghai",
        "Singapore Standard Time": "Asia/Singapore",
        "Russia Time Zone 10": "Asia/Srednekolymsk",
        "Taipei Standard Time": "Asia/Taipei",
        "West Asia Standard Time": "Asia/Tashkent",
        "Georgian Standard Time": "Asia/Tbilisi",
        "Iran Standard Time": "Asia/Tehran",
        "Tokyo Standard Time": "Asia/Tokyo",
        "Tomsk Standard Time": "Asia/Tomsk",
        "Ulaanbaatar Standard Time": "Asia/Ulaanbaatar",
        "Vladivostok Standard Time": "Asia/Vladivostok",
        "Yakutsk Standard Time": "Asia/Yakutsk",
        "Ekaterinburg Standard Time": "Asia/Yekaterinburg",
        "Caucasus Standard Time": "Asia/Yerevan",
        "Azores Standard Time": "Atlantic/Azores",
        "Cape Verde Standard Time": "Atlantic/Cape_Verde",
        "Greenwich Standard Time": "Atlantic/Reykjavik",
        "Cen. Australia Standard Time": "Australia/Adelaide",
        "E. Australia Standard Time": "Australia/Brisbane",
        "AUS Central Standard Time": "Australia/Darwin",
        "Aus Central W. Standard Time": "Australia/Eucla",
        "Tasmania Standard Time": "Australia/Hobart",
        "Lord Howe Standard Time": "Australia/Lord_Howe",
        "W. Australia Standard Time": "Australia/Perth",
        "AUS Eastern Standard Time": "Australia/Sydney",
        "UTC": "Etc/GMT",
        "UTC-11": "Etc/GMT+11",
        "Dateline Standard Time": "Etc/GMT+12",
        "UTC-02": "Etc/GMT+2",
        "UTC-08": "Etc/GMT+8",
        "UTC-09": "Etc/GMT+9",
        "UTC+12": "Etc/GMT-12",
        "UTC+13": "Etc/GMT-13",
        "Astrakhan Standard Time": "Europe/Astrakhan",
        "W. Europe Standard Time": "Europe/Berlin",
        "GTB Standard Time": "Europe/Bucharest",
        "Central Europe Standard Time": "Europe/Budapest",
        "E. Europe Standard Time": "Europe/Chisinau",
        "Turkey Standard Time": "Europe/Istanbul",
        "Kaliningrad Standard Time": "Europe/Kaliningrad",
        "FLE Standard Time": "Europe/Kiev",
        "GMT Standard Time": "Europe/London",
        "Belarus Standard Time": "Europe/Minsk",
        "Russian Standard Time": "Europe/Moscow",
        "Romance Standard Time": "Europe/Paris",
        "Russia Time Zone 3": "Europe/Samara",
        "Saratov Standard Time": "Europe/Saratov",
        "Central European Standard Time": "Europe/Warsaw",
        "Mauritius Standard Time": "Indian/Mauritius",
        "Samoa Standard Time": "Pacific/Apia",
        "New Zealand Standard Time": "Pacific/Auckland",
        "Bougainville Standard Time": "Pacific/Bougainville",
        "Chatham Islands Standard Time": "Pacific/Chatham",
        "Easter Island Standard Time": "Pacific/Easter",
        "Fiji Standard Time": "Pacific/Fiji",
        "Central Pacific Standard Time": "Pacific/Guadalcanal",
        "Hawaiian Standard Time": "Pacific/Honolulu",
        "Line Islands Standard Time": "Pacific/Kiritimati",
        "Marquesas Standard Time": "Pacific/Marquesas",
        "Norfolk Standard Time": "Pacific/Norfolk",
        "West Pacific Standard Time": "Pacific/Port_Moresby",
        "Tonga Standard Time": "Pacific/Tongatapu",
        # Additional non-standard timezones
        "Mexico Standard Time 2": "America/Chihuahua",
        "E. South America Standard Time 1": "America/Sao_Paulo",
        "U.S. Mountain Standard Time": "America/Phoenix",
        "U.S. Eastern Standard Time": "America/Indianapolis",
        "S.A. Pacific Standard Time": "America/Bogota",
        "S.A. Western Standard Time": "America/La_Paz",
        "Pacific S.A. Standard Time": "America/Santiago",
        "Newfoundland and Labrador Standard Time": "America/St_Johns",
        "S.A. Eastern Standard Time": "America/Cayenne",
        "Mid-Atlantic Standard Time": "Atlantic/South_Georgia",
        "Transitional Islamic State of Afghanistan Standard Time": "Asia/Kabul",
        "S.E. Asia Standard Time": "Asia/Bangkok",
        "A.U.S. Central Standard Time": "Australia/Darwin",
        "A.U.S. Eastern Standard Time": "Australia/Sydney",
        "Fiji Islands Standard Time": "Pacific/Fiji",
        "Azerbaijan Standard Time ": "America/Buenos_Aires",
        "Armenian Standard Time": "Asia/Yerevan",
        "Kamchatka Standard Time": "Asia/Kamchatka",
    })

    def resolve(self, name: str) -> TimezoneResolution:
        """Resolve a timezone name to a usable zone.

        Args:
            name: TZID value (e.g. "Europe/Madrid", "Pacific Standard Time")

        Returns:
            TimezoneResolution; the zone is UTC when nothing matched
        """
        zone = _load_zone(name)
        if zone is not None:
            return TimezoneResolution(zone, ResolutionOutcome.EXACT, name, name)

        canonical = self.WINDOWS_TZ_MAP.get(name)
        if canonical is not None:
            zone = _load_zone(canonical)
            if zone is not None:
                return TimezoneResolution(zone, ResolutionOutcome.EXACT, name, name)
            logger.warning("Timezone %r maps to %r which cannot be loaded", name, canonical)
        else:
            trimmed = _COMPATIBILITY_SUFFIX_RE.sub("", name)
            canonical = self.WINDOWS_TZ_MAP.get(trimmed)
            if canonical is not None:
                zone = _load_zone(canonical)
                if zone is not None:
                    logger.debug("Timezone %r resolved via compatibility name %r", name, trimmed)
                    return TimezoneResolution(
                        zone, ResolutionOutcome.COMPATIBILITY, name, trimmed
                    )

        logger.debug("Timezone %r is unmapped, falling back to UTC", name)
        return TimezoneResolution(ZoneInfo(UTC_ZONE_NAME), ResolutionOutcome.UNMAPPED, name)

    def windows_tz_to_iana(self, windows_tz: str) -> Optional[str]:
        """Look up a Windows/legacy display name in the table only."""
        return self.WINDOWS_TZ_MAP.get(windows_tz)


# Singleton instance for global use; holds no mutable state
_resolver = TimezoneResolver()


def resolve_timezone(name: str) -> TimezoneResolution:
    """Resolve a timezone name (convenience function).

    Args:
        name: TZID value

    Returns:
        TimezoneResolution
    """
    return _resolver.resolve(name)


def windows_tz_to_iana(windows_tz: str) -> Optional[str]:
    """Convert Windows timezone name to IANA timezone identifier.

    Args:
        windows_tz: Windows timezone name (e.g., "Mountain Standard Time")

    Returns:
        IANA timezone identifier (e.g., "America/Denver") or None if not found
    """
    return _resolver.windows_tz_to_iana(windows_tz)
