"""Time parsing and formatting utilities."""

from __future__ import annotations

from datetime import UTC, datetime, tzinfo
from email.utils import parsedate_to_datetime

from zoneinfo import ZoneInfo

from gps_trips.models import DEFAULT_TZ


def tzinfo_from_name(tz_name: str) -> tzinfo:
    """Create tzinfo from an IANA timezone name.

    Args:
        tz_name: Timezone name like "UTC" or "Asia/Manila".

    Returns:
        tzinfo instance.

    Raises:
        ValueError: If timezone name is invalid on this system.
    """

    if tz_name.strip().upper() == "UTC":
        return UTC
    try:
        return ZoneInfo(tz_name)
    except Exception as exc:  # ZoneInfo raises KeyError / ZoneInfoNotFoundError (platform dependent)
        raise ValueError(f"无效时区：{tz_name!r}。例如可用：UTC、Asia/Manila") from exc


# Tried in order after ISO-8601 and RFC 2822; slash dates are month-first
# unless the first number cannot be a month, dot dates are day-first.
_FALLBACK_FORMATS: tuple[str, ...] = (
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M:%S.%f",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y",
    "%d.%m.%Y %H:%M:%S",
    "%d.%m.%Y %H:%M",
    "%d.%m.%Y",
    "%Y.%m.%d %H:%M:%S",
    "%Y.%m.%d %H:%M",
)


def _parse_fallback(s: str) -> datetime | None:
    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    return None


def parse_timestamp(text: str, tz_name: str = DEFAULT_TZ) -> datetime:
    """Parse a device timestamp to an aware datetime in UTC.

    Supported formats:
      - ISO-8601: "2024-05-01T10:00:00Z", "2024-05-01 10:00:00+08:00", "2024-05-01"
      - Unix seconds prefixed with "@": "@1714557600"
      - RFC 2822: "Wed, 01 May 2024 10:00:00 +0000"
      - Slash and dot dates: "2024/05/01 10:00:00", "05/01/2024 10:00", "01.05.2024 10:00:00"

    If the text carries no offset, it is interpreted in tz_name. The result is
    always converted to UTC, so subtraction and ordering see real elapsed time
    even across daylight-saving changes.

    Args:
        text: Timestamp string.
        tz_name: IANA timezone name for naive strings.

    Returns:
        Timezone-aware datetime with tzinfo UTC.

    Raises:
        ValueError: If cannot parse.
    """

    s = text.strip()
    if not s:
        raise ValueError("时间为空")

    if s.startswith("@"):
        try:
            return datetime.fromtimestamp(float(s[1:]), tz=UTC)
        except (OverflowError, OSError, ValueError) as exc:
            raise ValueError(f"无法解析时间：{text!r}") from exc

    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        try:
            dt = parsedate_to_datetime(s)
        except (TypeError, ValueError) as exc:
            dt = _parse_fallback(s)
            if dt is None:
                raise ValueError(f"无法解析时间：{text!r}。建议格式：2024-05-01T10:00:00Z") from exc

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tzinfo_from_name(tz_name))
    return dt.astimezone(UTC)


def format_time(dt: datetime, tz_name: str = DEFAULT_TZ) -> str:
    """Render an instant as ISO-8601 with explicit offset, second precision.

    Example: "2024-05-01T10:00:00+00:00".
    """

    return dt.astimezone(tzinfo_from_name(tz_name)).isoformat(timespec="seconds")
