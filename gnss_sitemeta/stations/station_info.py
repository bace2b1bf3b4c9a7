"""
Station information intervals.

Merges the cleaned receiver and antenna histories of a site into the
sequence of time spans in which one receiver/antenna combination was in
effect, as written to station information files (e.g. Bernese STA).

A new interval starts whenever either device changes. Changes to an
equivalent device (same type, serial number and firmware/radome) do not
start a new interval.

Usage:
    from gnss_sitemeta.stations.station_info import station_intervals

    for interval in station_intervals(site):
        print(interval.start, interval.end, interval.receiver.receiver_type)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from gnss_sitemeta.core.config import ReconcileConfig
from gnss_sitemeta.core.exceptions import InternalError
from gnss_sitemeta.stations.models import Antenna, Receiver, Site, TimeRange
from gnss_sitemeta.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class StationInterval:
    """Receiver and antenna in effect for a time range."""

    name: str  # 9-char or 4-char station name
    description: str  # usually the city or town
    domes_number: str
    flag: str
    start: datetime
    end: datetime | None  # None while still in effect
    receiver: Receiver
    antenna: Antenna
    remark: str = ""

    @property
    def four_character_id(self) -> str:
        """The (old) short 4-char station name."""
        if len(self.name) >= 4:
            return self.name[:4]
        return ""

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(self.start, self.end)

    @property
    def is_open(self) -> bool:
        return self.end is None


class IntervalReconciler:
    """Build station information intervals from cleaned device histories."""

    def __init__(self, config: ReconcileConfig | None = None):
        self.config = config or ReconcileConfig()

    def station_intervals(self, site: Site) -> list[StationInterval]:
        """
        Walk receivers and antennas and cut an interval at every change.

        Receivers form the outer loop. For each receiver the antennas
        overlapping it are visited; whichever device is removed first ends
        the current interval. Open removal dates compare as the far future
        sentinel but are reported as None.

        Args:
            site: Site with cleaned receiver and antenna histories

        Returns:
            Intervals ordered by start

        Raises:
            InternalError: If an interval would start without a date
        """
        intervals = self._walk(site)
        logger.debug("station_intervals", station=site.station_id, intervals=len(intervals))
        return intervals

    def _walk(self, site: Site) -> list[StationInterval]:
        receivers = site.receivers
        antennas = site.antennas
        far_future = self.config.far_future
        ignore_firmware = self.config.ignore_receiver_firmware

        intervals: list[StationInterval] = []
        if not receivers or not antennas:
            return intervals

        def emit(recv: Receiver, ant: Antenna, start: datetime, end: datetime | None) -> None:
            intervals.append(StationInterval(
                name=site.station_id,
                description=site.location.city,
                domes_number=site.domes_number,
                flag=self.config.status_flag,
                start=start,
                end=end,
                receiver=recv,
                antenna=ant,
            ))

        start = None  # start of the next interval
        for ir, recv in enumerate(receivers):
            next_recv = receivers[ir + 1] if ir + 1 < len(receivers) else None
            if start is None:
                start = recv.date_installed

            recv_end = recv.time_range.effective_end(far_future)

            for ia, ant in enumerate(antennas):
                ant_end = ant.time_range.effective_end(far_future)

                # already replaced
                if start is not None and ant_end < start:
                    continue

                # installed after this receiver was removed
                if ant.date_installed is not None and recv_end < ant.date_installed:
                    break

                if start is None:
                    raise InternalError(
                        f"{site.station_id}: empty start date at receiver {ir + 1}, antenna {ia + 1}"
                    )

                if recv_end > ant_end:
                    # next change by antenna
                    next_ant = antennas[ia + 1] if ia + 1 < len(antennas) else None
                    if next_ant is None or not ant.equivalent(next_ant):
                        emit(recv, ant, start, ant.date_removed)
                        if next_ant is None:
                            return intervals
                        start = next_ant.date_installed
                else:
                    # next change by receiver
                    if next_recv is None or not recv.equivalent(next_recv, ignore_firmware):
                        emit(recv, ant, start, recv.date_removed)
                        if next_recv is None:
                            return intervals
                        start = next_recv.date_installed

        return intervals


def station_intervals(site: Site, config: ReconcileConfig | None = None) -> list[StationInterval]:
    """
    Convenience function to compute the station information of a site.

    Args:
        site: Site with cleaned receiver and antenna histories
        config: Reconciliation settings, defaults if None

    Returns:
        Intervals ordered by start
    """
    return IntervalReconciler(config).station_intervals(site)
