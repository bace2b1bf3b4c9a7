"""
Custom exceptions for gnss-sitemeta.

Provides a hierarchy of exceptions for different error conditions.
"""

from __future__ import annotations


class SiteMetaError(Exception):
    """Base exception for all gnss-sitemeta errors."""

    pass


class ConfigurationError(SiteMetaError):
    """Configuration-related errors."""

    pass


class FormatError(SiteMetaError):
    """A field or line could not be decoded.

    Carries the source line number and field name so the problem can be
    located in hand-edited input.
    """

    def __init__(
        self,
        field: str,
        raw: str,
        cause: str | Exception = "",
        line: int | None = None,
        block: str | int | None = None,
    ):
        self.field = field
        self.raw = raw
        self.cause = cause
        self.line = line
        self.block = block

        where = f"line {line}: " if line is not None else ""
        if block is not None and block != "":
            where += f"block {block}: "
        message = f"{where}could not parse {field} {raw!r}"
        if cause:
            message += f": {cause}"
        super().__init__(message)


class MandatoryBlockNotFoundError(FormatError):
    """A block that must open the file is missing."""

    def __init__(self, block: str, found: str = "", line: int | None = None):
        self.expected_block = block
        self.found_block = found
        cause = f"expected {block!r} as first block"
        if found:
            cause += f", found {found!r}"
        super().__init__("block", found, cause, line=line)


class DuplicateBlockError(FormatError):
    """The same numbered sub-block appears twice within one logical block."""

    def __init__(self, sub_block: str, line: int | None = None, item: str = ""):
        self.sub_block = sub_block
        self.item = item
        super().__init__(
            "sub-block", sub_block, f"{item or 'block'} exists twice", line=line
        )


class UnknownFieldError(FormatError):
    """A key that is not part of the block's field table."""

    def __init__(self, field: str, line: int | None = None, block: str | int | None = None):
        super().__init__(field, "", "unknown key", line=line, block=block)


class ChronologicalError(SiteMetaError):
    """Two consecutive devices overlap in time."""

    def __init__(self, item: str, index_prev: int, index_curr: int):
        self.item = item
        self.index_prev = index_prev
        self.index_curr = index_curr
        super().__init__(
            f"{item} {index_prev + 1} and {index_curr + 1} are not chronological"
        )


class IncompleteHistoryError(SiteMetaError):
    """A missing boundary date that cannot be derived from the neighbours."""

    def __init__(self, item: str, index: int, field: str):
        self.item = item
        self.index = index
        self.field = field
        super().__init__(f"empty {field!r} of {item} {index + 1} could not be corrected")


class InternalError(SiteMetaError):
    """Broken invariant; should not happen with cleaned input."""

    pass
