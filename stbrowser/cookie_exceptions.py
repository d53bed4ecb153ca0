"""Table model of the per-site cookie exceptions held by a cookie jar."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Protocol

from PIL import ImageFont

FONT_POINT_SIZE = 10

ALLOW_TEXT = "Allow"
BLOCK_TEXT = "Block"
ALLOW_FOR_SESSION_TEXT = "Allow For Session"
HEADERS = ("Website", "Status")


class Orientation(enum.Enum):
    """Direction of a header."""

    HORIZONTAL = 1
    VERTICAL = 2


class Role(enum.Enum):
    """Kinds of data a view may ask the model for."""

    DISPLAY = 0
    EDIT = 2
    FONT = 6
    SIZE_HINT = 13


@dataclass(frozen=True)
class Font:
    """The font a view should use for a cell."""

    point_size: int = FONT_POINT_SIZE


class CookieJar(Protocol):
    allowed_cookies: list[str]
    blocked_cookies: list[str]
    allow_for_session_cookies: list[str]


def _text_size(text: str) -> tuple[int, int]:
    font = ImageFont.load_default()
    left, top, right, bottom = font.getbbox("Ag")
    line_height = max(1, bottom - top)
    height = line_height + line_height // 3
    width = int(round(font.getlength(text)))
    return width, height


class CookieExceptionsModel:
    """Rows of allowed, then blocked, then session-only domains.

    Column 0 holds the domain, column 1 its status.
    """

    def __init__(self, cookie_jar: CookieJar | None) -> None:
        self.cookie_jar = cookie_jar
        if cookie_jar is None:
            self.allowed_cookies: list[str] = []
            self.blocked_cookies: list[str] = []
            self.session_cookies: list[str] = []
        else:
            self.allowed_cookies = list(cookie_jar.allowed_cookies)
            self.blocked_cookies = list(cookie_jar.blocked_cookies)
            self.session_cookies = list(cookie_jar.allow_for_session_cookies)

    def _sections(self) -> list[tuple[list[str], str]]:
        return [
            (self.allowed_cookies, ALLOW_TEXT),
            (self.blocked_cookies, BLOCK_TEXT),
            (self.session_cookies, ALLOW_FOR_SESSION_TEXT),
        ]

    def header_data(
        self,
        section: int,
        orientation: Orientation,
        role: Role = Role.DISPLAY,
    ) -> Any:
        """Header text, or its size hint as (width, height)."""
        if role is Role.SIZE_HINT:
            text = self.header_data(section, orientation, Role.DISPLAY)
            return _text_size("" if text is None else str(text))
        if role is Role.DISPLAY:
            if orientation is Orientation.HORIZONTAL and 0 <= section < len(HEADERS):
                return HEADERS[section]
            return section + 1
        return None

    def _display_data(self, row: int, column: int) -> str | None:
        for domains, status in self._sections():
            if row < len(domains):
                if column == 0:
                    return domains[row]
                if column == 1:
                    return status
                return None
            row -= len(domains)
        return None

    def data(self, row: int, column: int, role: Role = Role.DISPLAY) -> Any:
        """The value of a cell for a role; None where there is none."""
        if row < 0 or row >= self.row_count():
            return None
        if role in (Role.DISPLAY, Role.EDIT):
            return self._display_data(row, column)
        if role is Role.FONT:
            return Font()
        return None

    def column_count(self, parent_valid: bool = False) -> int:
        """Two columns at the top level, none below."""
        return 0 if parent_valid else 2

    def row_count(self, parent_valid: bool = False) -> int:
        """Number of exception rows."""
        if parent_valid or self.cookie_jar is None:
            return 0
        return sum(len(domains) for domains, _ in self._sections())

    def remove_rows(self, row: int, count: int, parent_valid: bool = False) -> bool:
        """Remove ``count`` rows starting at ``row`` and update the jar.

        Returns False when there is nothing the model can remove from.
        """
        if parent_valid or self.cookie_jar is None:
            return False
        if count < 0 or row < 0 or row + count > self.row_count():
            raise IndexError(
                f"cannot remove {count} rows at {row} of {self.row_count()}"
            )
        removed = range(row, row + count)
        offset = 0
        for domains, _ in self._sections():
            kept = [
                domain
                for index, domain in enumerate(domains, start=offset)
                if index not in removed
            ]
            offset += len(domains)
            domains[:] = kept
        self.cookie_jar.allowed_cookies = list(self.allowed_cookies)
        self.cookie_jar.blocked_cookies = list(self.blocked_cookies)
        self.cookie_jar.allow_for_session_cookies = list(self.session_cookies)
        return True