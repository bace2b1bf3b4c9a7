"""
SINEX block stream decoder.

Reads a SINEX file forward, block by block and record by record. The
header line and the FILE/REFERENCE block are read on construction; all
other blocks are left to the caller, who decides which to decode and how
to react to a record that fails.

Usage:
    from gnss_sitemeta.sinex import SinexBlock, ReceiverRecord, open_sinex

    with open_sinex("IGS0OPSSNX_20202090000_01D_01D_SOL.SNX") as dec:
        if dec.go_to_block(SinexBlock.SITE_RECEIVER):
            for rec in dec.records(ReceiverRecord):
                print(rec.site_code, rec.receiver_type)

References:
    SINEX Format: https://www.iers.org/IERS/EN/Organization/AnalysisCoordinator/SinexFormat/sinex.html
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, TypeVar

from gnss_sitemeta.core.exceptions import FormatError, MandatoryBlockNotFoundError
from gnss_sitemeta.sinex.columns import ColumnDecoder
from gnss_sitemeta.sinex.records import (
    FILE_REFERENCE_KEYS,
    AntennaRecord,
    FileReference,
    ReceiverRecord,
    SiteIdRecord,
    SinexBlock,
    SinexHeader,
)
from gnss_sitemeta.stations.models import Site
from gnss_sitemeta.utils.logging import get_logger

logger = get_logger(__name__)

R = TypeVar("R")


class BlockStreamDecoder:
    """Forward-only reader of SINEX blocks and data lines.

    Attributes:
        header: The decoded %=SNX header line
        file_reference: FILE/REFERENCE contents, None if the file has none
            and was opened leniently
        block: Name of the current block, empty outside of blocks
        line: The current line
        line_number: 1-based number of the current line
    """

    def __init__(self, lines: Iterable[str], require_file_reference: bool = True):
        """Read the header and the leading FILE/REFERENCE block.

        Args:
            lines: Line source, e.g. an open file
            require_file_reference: Fail if FILE/REFERENCE is not the first
                block. Discontinuity files do not have one.

        Raises:
            FormatError: If the header line is missing or malformed
            MandatoryBlockNotFoundError: If FILE/REFERENCE is required but
                not the first block
        """
        self._lines = iter(lines)
        self._pending = False  # positioned on a block begin not yet reported
        self.block = ""
        self.line = ""
        self.line_number = 0

        self.header = self._read_header()
        self.file_reference = self._read_file_reference(require_file_reference)

    def _read_line(self) -> bool:
        """Read the next line; track block begin and end markers."""
        try:
            line = next(self._lines)
        except StopIteration:
            return False

        self.line = line.rstrip("\r\n")
        self.line_number += 1
        self._pending = False

        if self.line.startswith("+"):
            self.block = self.line[1:].strip()
        elif self.line.startswith("-"):
            self.block = ""
        return True

    def _read_header(self) -> SinexHeader:
        if not self._read_line():
            raise FormatError("header", "", "empty input", line=1)
        if not self.line.startswith("%"):
            raise FormatError(
                "header", self.line[:5], "does not start with '%'", line=self.line_number
            )
        return SinexHeader.decode(ColumnDecoder(self.line, self.line_number))

    def _read_file_reference(self, required: bool) -> FileReference | None:
        expected = SinexBlock.FILE_REFERENCE.value
        if not self.advance_block():
            if required:
                raise MandatoryBlockNotFoundError(expected, line=self.line_number)
            return None

        if self.block != expected:
            if required:
                raise MandatoryBlockNotFoundError(
                    expected, found=self.block, line=self.line_number
                )
            # stay on this block for the caller
            self._pending = True
            return None

        ref = FileReference()
        while self.advance_record():
            key = self.line[1:19].strip()
            attr = FILE_REFERENCE_KEYS.get(key)
            if attr is None:
                raise FormatError(
                    f"{expected} field", key, "invalid key",
                    line=self.line_number, block=expected,
                )
            setattr(ref, attr, self.line[20:].strip())
        return ref

    def advance_block(self) -> bool:
        """Move to the begin of the next block.

        Lines of the current block that were not read are skipped.

        Returns:
            False at the end of the input
        """
        if self._pending:
            self._pending = False
            return True

        while self._read_line():
            if self.line.startswith("+"):
                logger.debug("sinex_block", block=self.block, line=self.line_number)
                return True
        return False

    def advance_record(self) -> bool:
        """Move to the next data line of the current block.

        Comment and blank lines are skipped.

        Returns:
            False at the block end, at a line starting with another
            reserved character, or at the end of the input
        """
        while self._read_line():
            line = self.line
            if not line.strip() or line.startswith("*"):
                continue
            if line.startswith("+"):
                # block without end marker; keep the new block for advance_block
                self._pending = True
                return False
            if line[0] in "-%":
                return False
            return True
        return False

    def decode(self, record_cls: type[R]) -> R:
        """Decode the current line with the record's column decoder.

        Raises:
            FormatError: Naming the field and raw text that failed
        """
        return record_cls.decode(ColumnDecoder(self.line, self.line_number))

    def blocks(self) -> Iterator[str]:
        """Yield the names of the remaining blocks."""
        while self.advance_block():
            yield self.block

    def block_lines(self) -> Iterator[str]:
        """Yield the remaining data lines of the current block."""
        while self.advance_record():
            yield self.line

    def records(self, record_cls: type[R]) -> Iterator[R]:
        """Yield the remaining records of the current block, decoded."""
        while self.advance_record():
            yield self.decode(record_cls)

    def go_to_block(self, name: str) -> bool:
        """Skip forward to the named block.

        Returns:
            False if the block does not follow in the input
        """
        while self.advance_block():
            if self.block == name:
                return True
        return False


@contextmanager
def open_sinex(path: str | Path, require_file_reference: bool = True) -> Iterator[BlockStreamDecoder]:
    """Open a SINEX file and yield a decoder positioned after FILE/REFERENCE.

    Args:
        path: SINEX file
        require_file_reference: See BlockStreamDecoder
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"SINEX file not found: {path}")

    with open(path, "r", encoding="ascii", errors="replace") as f:
        yield BlockStreamDecoder(f, require_file_reference)


def read_site_equipment(decoder: BlockStreamDecoder) -> dict[str, Site]:
    """Collect site equipment histories from the SITE blocks.

    SITE/ID creates the sites; receivers and antennas of SITE/RECEIVER and
    SITE/ANTENNA are appended in file order. Records of sites without a
    SITE/ID entry create a bare site.

    Args:
        decoder: Decoder positioned before the SITE blocks

    Returns:
        Sites keyed by the four character site code
    """
    sites: dict[str, Site] = {}

    def site_for(code: str) -> Site:
        if code not in sites:
            site = Site()
            site.identification.four_character_id = code
            sites[code] = site
        return sites[code]

    for block in decoder.blocks():
        if block == SinexBlock.SITE_ID:
            for rec in decoder.records(SiteIdRecord):
                site = site_for(rec.code)
                site.identification.iers_domes_number = rec.domes_number
                site.identification.site_name = rec.description
                site.location.city = rec.description
                site.location.position.elevation = rec.height
        elif block == SinexBlock.SITE_RECEIVER:
            for rec in decoder.records(ReceiverRecord):
                site_for(rec.site_code).receivers.append(rec.to_receiver())
        elif block == SinexBlock.SITE_ANTENNA:
            for rec in decoder.records(AntennaRecord):
                site_for(rec.site_code).antennas.append(rec.to_antenna())

    return sites
