"""Abstract base class for pluggable resume templates."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from jobpilot.utils.dates import parse_profile_date

if TYPE_CHECKING:
    from pylatex import Document

    from jobpilot.models.profile import Profile

__all__ = ["ResumeTemplate"]

# Characters that have special meaning in LaTeX.
_LATEX_SPECIAL = re.compile(r"([&%$#_{}~^\\])")

# Characters that break an \href target; hyperref reads the escaped forms.
_URL_SPECIAL = re.compile(r"([\\{}%#])")

_MONTH_ABBR = [
    "",
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
]


class ResumeTemplate(ABC):
    """Interface that every resume template must implement."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable template name shown in the UI."""

    @abstractmethod
    def build(self, profile: Profile) -> Document:
        """Construct a PyLaTeX ``Document`` from *profile*."""

    def render(self, profile: Profile) -> str:
        """Return the complete LaTeX source for *profile*."""
        return self.build(profile).dumps()

    # ------------------------------------------------------------------
    # Shared helpers available to all templates
    # ------------------------------------------------------------------

    @staticmethod
    def escape_latex(text: str) -> str:
        r"""Escape LaTeX special characters in *text*.

        Each of ``& % $ # _ { } ~ ^ \`` is prefixed with a single backslash.
        """
        return _LATEX_SPECIAL.sub(r"\\\1", text)

    @staticmethod
    def escape_url(url: str) -> str:
        r"""Escape *url* for use as an ``\href`` target.

        Only ``\ { } % #`` are prefixed with a backslash; the rest of the URL
        is kept as typed so the link still resolves.
        """
        return _URL_SPECIAL.sub(r"\\\1", url)

    @staticmethod
    def format_date(value: str | None) -> str:
        """Return *value* as ``Jan 2023``, or ``""`` if it cannot be parsed."""
        parsed = parse_profile_date(value)
        if parsed is None:
            return ""
        return f"{_MONTH_ABBR[parsed.month]} {parsed.year}"

    @classmethod
    def format_date_range(
        cls,
        start: str | None,
        end: str | None = None,
        is_current: bool = False,
    ) -> str:
        """Return a formatted date range like ``Aug 2018 -- May 2021``.

        A current entry ends in ``Present``; an entry without an end date
        shows its start alone. If the start (or a given end) cannot be
        parsed the whole range is empty.
        """
        start_str = cls.format_date(start)
        if not start_str:
            return ""
        if is_current:
            return f"{start_str} -- Present"
        if end:
            end_str = cls.format_date(end)
            if not end_str:
                return ""
            return f"{start_str} -- {end_str}"
        return start_str

