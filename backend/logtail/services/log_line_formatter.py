"""
Service for turning system log rows into access-log style lines
"""
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Optional

from logtail.core.config import Settings, get_settings
from logtail.core.logging_config import LoggingConfig
from logtail.core.renderer import RenderResult, render
from logtail.utils.datetime_utils import from_unix_timestamp, parse_unix_timestamp

logger = LoggingConfig.get_logger(__name__)


def _column(row: Any, name: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


class LogLineFormatter:
    """
    Formats ``sys_log`` rows as ``<ip> [<timestamp>] <message>`` lines.

    Until the first line has been printed, a row with an unparseable
    timestamp or an unrenderable message is replaced by the skipped-line
    marker. Once a line went through, every following row is printed with
    whatever could be rendered.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.verbose = False

    def render_message(self, row: Any) -> RenderResult:
        """Render the details template of a row with its log data"""
        return render(_column(row, "details") or "", _column(row, "log_data") or "")

    def format_row(self, row: Any) -> str:
        """
        Format one row

        Args:
            row: SysLog instance or mapping with details, tstamp, IP and log_data

        Returns:
            The log line, or the skipped-line marker
        """
        LoggingConfig.set_context(uid=_column(row, "uid"))
        try:
            return self._format_row(row)
        finally:
            LoggingConfig.clear_context()

    def _row_moment(self, row: Any) -> Optional[datetime]:
        timestamp = parse_unix_timestamp(_column(row, "tstamp"))
        if timestamp is None:
            return None
        try:
            return from_unix_timestamp(timestamp, self.settings.display_timezone)
        except (OverflowError, ValueError, OSError):
            return None

    def _format_row(self, row: Any) -> str:
        moment = self._row_moment(row)
        if moment is None and not self.verbose:
            logger.debug("Skipping row with invalid timestamp")
            return self.settings.skipped_line_marker

        result = self.render_message(row)
        if not result.ok and not self.verbose:
            logger.debug(
                "Skipping row with unrenderable message",
                extra={"error_kind": result.error.kind.value, "error": result.error.message},
            )
            return self.settings.skipped_line_marker

        self.verbose = True

        if moment is None:
            moment = from_unix_timestamp(0, self.settings.display_timezone)
        ip_address = _column(row, "IP") or self.settings.empty_ip_placeholder

        return "%s [%s] %s" % (
            ip_address,
            moment.strftime(self.settings.line_datetime_format),
            result.text,
        )
