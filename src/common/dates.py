"""Publication date formatting."""

import logging
import re
from datetime import datetime, timezone, timedelta
from typing import Optional

from dateutil.parser import parse as parse_date

logger = logging.getLogger(__name__)

# Common timezone abbreviations seen in article bylines
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "MST": timezone(timedelta(hours=-7)),
    "MDT": timezone(timedelta(hours=-6)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "BST": timezone(timedelta(hours=1)),
}

_ORDINAL_RE = re.compile(r"(\d+)(st|nd|rd|th)")
_DIGIT_RE = re.compile(r"\d")


def get_formatted_date(date_string: Optional[str]) -> str:
    """Format free-form date text as MM/DD/YYYY (UTC).

    Ordinal suffixes ("March 3rd") are stripped before parsing. Anything that
    cannot be parsed yields an empty string, as does text without any digits
    ("Monday"). Missing month or day default to January and the 1st.
    """
    if not date_string or not _DIGIT_RE.search(date_string):
        return ""

    sanitized = _ORDINAL_RE.sub(r"\1", date_string, count=1)
    try:
        parsed = parse_date(sanitized, default=datetime(datetime.now().year, 1, 1), tzinfos=TZINFOS)
    except (ValueError, OverflowError) as e:
        logger.debug("Could not parse publication date %r: %s", date_string, e)
        return ""

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)

    return f"{parsed.month:02d}/{parsed.day:02d}/{parsed.year:04d}"
