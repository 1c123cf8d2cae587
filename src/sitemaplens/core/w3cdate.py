# SitemapLens — W3C datetime parsing with precision tracking
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import IntEnum


class Precision(IntEnum):
	"""How much of a <lastmod> value was actually written in the document."""

	YEAR = 1
	MONTH = 2
	DAY = 3
	MINUTE = 4
	SECOND = 5
	FRACTION = 6


# https://www.w3.org/TR/NOTE-datetime
_W3C_RE = re.compile(
	r"""
	^(?P<year>\d{4})
	(?:-(?P<month>\d{2})
		(?:-(?P<day>\d{2})
			(?:T(?P<hour>\d{2}):(?P<minute>\d{2})
				(?::(?P<second>\d{2})(?:\.(?P<fraction>\d+))?)?
				(?P<tz>Z|[+-]\d{2}:\d{2})
			)?
		)?
	)?$
	""",
	re.VERBOSE,
)


@dataclass(frozen=True)
class W3CDateTime:
	value: datetime
	precision: Precision

	def isoformat(self) -> str:
		"""Render back at the precision it was parsed with."""
		v = self.value
		if self.precision == Precision.YEAR:
			return f"{v.year:04d}"
		if self.precision == Precision.MONTH:
			return f"{v.year:04d}-{v.month:02d}"
		if self.precision == Precision.DAY:
			return v.strftime("%Y-%m-%d")
		if self.precision == Precision.MINUTE:
			return v.isoformat(timespec="minutes")
		if self.precision == Precision.SECOND:
			return v.isoformat(timespec="seconds")
		return v.isoformat()


def _parse_tz(tz: str) -> timezone:
	if tz == "Z":
		return timezone.utc
	sign = -1 if tz[0] == "-" else 1
	hours, minutes = int(tz[1:3]), int(tz[4:6])
	if hours > 23 or minutes > 59:
		raise ValueError(f"invalid timezone offset: {tz!r}")
	return timezone(sign * timedelta(hours=hours, minutes=minutes))


def parse_w3c_datetime(text: str) -> W3CDateTime:
	"""Parse a W3C datetime, keeping track of its precision.

	Date-only forms are anchored at midnight UTC. A time component must carry a
	timezone designator. Raises ValueError for anything outside the profile.
	"""
	m = _W3C_RE.match((text or "").strip())
	if not m:
		raise ValueError(f"invalid W3C datetime: {text!r}")
	g = m.groupdict()
	year = int(g["year"])
	month = int(g["month"] or 1)
	day = int(g["day"] or 1)
	if g["hour"] is None:
		precision = Precision.DAY if g["day"] else Precision.MONTH if g["month"] else Precision.YEAR
		return W3CDateTime(datetime(year, month, day, tzinfo=timezone.utc), precision)

	tz = _parse_tz(g["tz"])
	second = int(g["second"] or 0)
	microsecond = 0
	if g["fraction"]:
		# datetime keeps microseconds only
		microsecond = int(g["fraction"][:6].ljust(6, "0"))
		precision = Precision.FRACTION
	elif g["second"] is not None:
		precision = Precision.SECOND
	else:
		precision = Precision.MINUTE
	value = datetime(year, month, day, int(g["hour"]), int(g["minute"]), second, microsecond, tzinfo=tz)
	return W3CDateTime(value, precision)


__all__ = ["Precision", "W3CDateTime", "parse_w3c_datetime"]
