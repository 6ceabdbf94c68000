"""Module entry point: python -m gps_trips ..."""

from __future__ import annotations

from gps_trips.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
