from __future__ import annotations

import logging
import math
import re
from numbers import Real
from typing import Optional, Union

from .const_util import CONST

logger = logging.getLogger(__name__)


class Conversion:
    """Utility functions for converting raw performance marks."""

    time_pattern = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*:\s*(\d+(?:\.\d+)?)\s*$")
    non_numeric_pattern = re.compile(r"[^0-9.]")

    @staticmethod
    def parse_performance(value: Union[str, Real, None]) -> Optional[float]:
        """Normalize a raw result into a comparable number.

        Timed marks ("1:02.50", "11.32s") become seconds and field marks
        become a plain magnitude. Missing, unparsable, non-finite and
        non-finish marks (DNF/DNS) all come back as ``None``; this never raises.
        """
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, Real):
            return value if math.isfinite(value) else None

        text = str(value).strip()
        if not text:
            return None

        lowered = text.lower()
        if any(mark in lowered for mark in CONST.NON_FINISH_MARKS):
            return None

        if ":" in text:
            match = Conversion.time_pattern.match(text)
            if not match:
                logger.debug("Unparsable timed mark %r", text)
                return None
            minutes, seconds = match.groups()
            return float(minutes) * 60 + float(seconds)

        cleaned = Conversion.non_numeric_pattern.sub("", text)
        try:
            number = float(cleaned)
        except ValueError:
            logger.debug("Unparsable mark %r", text)
            return None
        return number

    @staticmethod
    def seconds_to_time(total_seconds: float) -> str:
        """Format seconds as ``m:ss.hh`` (``62.5`` -> ``"1:02.50"``)."""
        hundredths = int(round(total_seconds * 100))
        minutes, remainder = divmod(hundredths, 6000)
        seconds, fraction = divmod(remainder, 100)
        return f"{minutes}:{seconds:02d}.{fraction:02d}"

    @staticmethod
    def format_mark(value: float) -> str:
        # whole number?
        if math.isfinite(value) and float(value).is_integer():
            return str(int(value))
        return str(value)
