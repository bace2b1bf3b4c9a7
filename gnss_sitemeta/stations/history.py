"""
Equipment history cleaning.

Makes the receiver and antenna histories of a site usable for station
information: every device gets an installation date, every device but the
last gets a removal date, and consecutive devices never overlap or touch.
Missing dates are derived from the neighbours, equal boundaries are
separated by a small time shift.

Sitelogs are edited by hand, so overlapping entries are common. They are
an error unless cleaning is forced, in which case the earlier device is
cut back to just before its successor.

Usage:
    from gnss_sitemeta.stations.history import HistoryCleaner

    cleaner = HistoryCleaner()
    cleaner.clean(site, force=True)
"""

from __future__ import annotations

from datetime import timedelta
from typing import Sequence

from gnss_sitemeta.core.config import CleanerConfig
from gnss_sitemeta.core.exceptions import ChronologicalError, IncompleteHistoryError
from gnss_sitemeta.stations.models import Antenna, Receiver, Site, SiteWarning
from gnss_sitemeta.utils.logging import get_logger

logger = get_logger(__name__)

RECEIVER_BLOCK = 3
ANTENNA_BLOCK = 4


class HistoryCleaner:
    """Validate and repair the dates of receiver and antenna histories.

    Only the installation and removal dates (and, for known misspellings,
    the equipment type names) are changed. Cleaning an already clean
    history changes nothing.
    """

    def __init__(self, config: CleanerConfig | None = None):
        self.config = config or CleanerConfig()
        self.time_shift = timedelta(seconds=self.config.time_shift_seconds)

    def clean(self, site: Site, force: bool | None = None) -> list[SiteWarning]:
        """Clean receivers and antennas of a site.

        Args:
            site: Decoded site, modified in place
            force: Resolve overlapping dates instead of failing;
                   the configured default if None

        Returns:
            Warnings of this run, also appended to site.warnings

        Raises:
            ChronologicalError: Overlapping devices without force
            IncompleteHistoryError: A missing date that cannot be derived
        """
        warnings = self.clean_receivers(site.receivers, force)
        warnings += self.clean_antennas(site.antennas, force)
        site.warnings.extend(warnings)
        return warnings

    def clean_receivers(
        self, receivers: Sequence[Receiver], force: bool | None = None
    ) -> list[SiteWarning]:
        warnings: list[SiteWarning] = []
        corrections = self.config.receiver_type_corrections

        for n, recv in enumerate(receivers, start=1):
            corrected = corrections.get(recv.receiver_type)
            if corrected:
                warnings.append(SiteWarning(
                    f"receiver {n} REC TYPE corrected to {corrected!r}", block=RECEIVER_BLOCK
                ))
                recv.receiver_type = corrected

        warnings += self._clean_dates(receivers, "receiver", RECEIVER_BLOCK, force)
        return warnings

    def clean_antennas(
        self, antennas: Sequence[Antenna], force: bool | None = None
    ) -> list[SiteWarning]:
        warnings: list[SiteWarning] = []
        for n, ant in enumerate(antennas, start=1):
            warnings += self._normalize_antenna_type(ant, n)

        warnings += self._clean_dates(antennas, "antenna", ANTENNA_BLOCK, force)
        return warnings

    def _normalize_antenna_type(self, ant: Antenna, n: int) -> list[SiteWarning]:
        """Bring the antenna type into the 20 character "TYPE            RADM" form.

        The radome is taken from the type when the radome field is empty.
        A type whose radome differs from the radome field keeps both and
        yields a warning.
        """
        width = 20
        if len(ant.antenna_type) == width:
            return []

        parts = ant.antenna_type.split()
        if len(parts) == 2 and len(parts[1]) == 4:
            ant.antenna_type = f"{parts[0]:<15} {parts[1]:>4}"
            if not ant.radome_type:
                ant.radome_type = parts[1]
            elif ant.radome_type != parts[1]:
                return [SiteWarning(
                    f"antenna {n} Antenna Radome Type {ant.radome_type!r} "
                    f"differs from Antenna Type {ant.antenna_type!r}",
                    block=ANTENNA_BLOCK,
                )]
        elif len(parts) == 1 and ant.radome_type:
            ant.antenna_type = f"{parts[0]:<15} {ant.radome_type:>4}"
        return []

    def _clean_dates(
        self,
        devices: Sequence[Receiver | Antenna],
        item: str,
        block: int,
        force: bool | None,
    ) -> list[SiteWarning]:
        """Fill missing dates and separate consecutive devices.

        Devices are visited in list order; each is compared with its
        predecessor, whose removal date may still be moved back.
        """
        if force is None:
            force = self.config.force
        shift = self.time_shift
        warnings: list[SiteWarning] = []

        for i, curr in enumerate(devices):
            n = i + 1
            prev = devices[i - 1] if i > 0 else None
            nxt = devices[i + 1] if i + 1 < len(devices) else None

            if curr.date_installed is None:
                warnings.append(SiteWarning(
                    f"{item} {n} with empty 'Date Installed'", block=block
                ))
                if prev is None or prev.date_removed is None:
                    raise IncompleteHistoryError(item, i, "Date Installed")
                curr.date_installed = prev.date_removed + shift

            if curr.date_removed is None and nxt is not None:
                warnings.append(SiteWarning(
                    f"{item} {n} with empty 'Date Removed'", block=block
                ))
                if nxt.date_installed is None:
                    raise IncompleteHistoryError(item, i, "Date Removed")
                curr.date_removed = nxt.date_installed - shift

            if prev is None:
                continue

            if prev.date_removed > curr.date_installed:
                if not force:
                    raise ChronologicalError(item, i - 1, i)
                warnings.append(SiteWarning(
                    f"{item} {n - 1} adjust 'Date Removed'", block=block
                ))
                prev.date_removed = curr.date_installed - shift
            elif prev.date_removed == curr.date_installed:
                # boundaries must be unique
                prev.date_removed -= shift

        if warnings:
            logger.debug("history_cleaned", item=item, devices=len(devices), warnings=len(warnings))
        return warnings


def clean_site(site: Site, force: bool = False, config: CleanerConfig | None = None) -> list[SiteWarning]:
    """
    Convenience function to clean the equipment history of a site.

    Args:
        site: Decoded site, modified in place
        force: Resolve overlapping dates instead of failing
        config: Cleaner settings, defaults if None

    Returns:
        Warnings of this run
    """
    return HistoryCleaner(config).clean(site, force)
