"""
Response Formatter Module
=========================

Output formatting for p0f query responses.

- describe(): one-line "<os> <flavor> (fuzzy|generic)" summary
- SimpleResponseOutput: the describe() line, for scripting
- DetailedResponseOutput: every field of the response, human readable
- JSONResponseOutput: machine-readable JSON

Colors come from colorama and are only applied when enabled.
"""

import json
from datetime import datetime, timezone
from typing import Optional

from colorama import Fore, Style

from ..core.protocol import Response, Status, describe


# =============================================================================
# COLOR CODING UTILITIES
# =============================================================================

COLORS = {
    'green': Fore.GREEN,
    'yellow': Fore.YELLOW,
    'red': Fore.RED,
    'cyan': Fore.CYAN,
    'bold': Style.BRIGHT,
    'dim': Style.DIM,
}

# Meaning of the bad_sw field, per the p0f README
BAD_SW_DESCRIPTIONS = {
    0: "none",
    1: "OS mismatch",
    2: "OS version mismatch",
}


def colorize(text: str, color: str, enabled: bool = True) -> str:
    """
    Apply a colorama color to text.

    Args:
        text: Text to colorize
        color: Key of COLORS
        enabled: When False the text is returned unchanged

    Returns:
        Colorized text, or the original text
    """
    code = COLORS.get(color.lower(), '')
    if not enabled or not code:
        return text
    return f"{code}{text}{Style.RESET_ALL}"


def _format_timestamp(value: int) -> str:
    if not value:
        return "never"
    return datetime.fromtimestamp(value, tz=timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')


def _format_uptime(response: Response) -> str:
    if not response.uptime_minutes:
        return "unknown"
    days, minutes = divmod(response.uptime_minutes, 24 * 60)
    hours, minutes = divmod(minutes, 60)
    text = f"{days}d {hours}h {minutes}m"
    if response.up_mod_days:
        text += f" (wraps every {response.up_mod_days} days)"
    return text


# =============================================================================
# OUTPUT FORMAT CLASSES
# =============================================================================

class SimpleResponseOutput:
    """Minimal output format for scripting and integration."""

    def __init__(self, colors: bool = False):
        self.colors = colors

    def format(self, response: Response) -> str:
        if response.status == Status.NO_MATCH:
            return "No match found"
        return f"Response: {colorize(describe(response), 'green', self.colors)}"


class DetailedResponseOutput:
    """Human-readable output listing every field."""

    def __init__(self, colors: bool = False):
        self.colors = colors

    def format(self, response: Response) -> str:
        """
        Format a response as a detail block.

        Args:
            response: Response returned by P0fClient.query_ip

        Returns:
            Detailed formatted string
        """
        if response.status == Status.NO_MATCH:
            return colorize("No match found", 'yellow', self.colors)

        quality = response.match_quality
        lines = [
            colorize("=" * 50, 'cyan', self.colors),
            colorize("p0f Fingerprint", 'bold', self.colors),
            colorize("=" * 50, 'cyan', self.colors),
            f"OS: {colorize(describe(response), 'green', self.colors)}",
            f"Match quality: {quality.name.lower() if quality else 'unknown'}",
            f"HTTP software: {' '.join(filter(None, [response.http_name, response.http_flavor])) or 'unknown'}",
            f"Link type: {response.link_type or 'unknown'}",
            f"Language: {response.language or 'unknown'}",
            f"Distance: {response.distance if response.distance >= 0 else 'unknown'}",
            f"Uptime: {_format_uptime(response)}",
            f"First seen: {_format_timestamp(response.first_seen)}",
            f"Last seen: {_format_timestamp(response.last_seen)}",
            f"Total connections: {response.total_count}",
            f"Last NAT detection: {_format_timestamp(response.last_nat)}",
            f"Last OS change: {_format_timestamp(response.last_chg)}",
        ]

        bad_sw = BAD_SW_DESCRIPTIONS.get(response.bad_sw, str(response.bad_sw))
        if response.bad_sw:
            bad_sw = colorize(bad_sw, 'red', self.colors)
        lines.append(f"Software mismatch: {bad_sw}")

        return '\n'.join(lines)


class JSONResponseOutput:
    """Machine-readable JSON output format."""

    def format(self, response: Response) -> str:
        return json.dumps(response.to_dict(), indent=2)


# =============================================================================
# FORMATTER FACTORY
# =============================================================================

FORMATTERS = {
    'simple': SimpleResponseOutput,
    'detailed': DetailedResponseOutput,
    'json': lambda colors: JSONResponseOutput(),
}


def get_formatter(format_type: Optional[str] = 'simple', colors: bool = False):
    """
    Get the output formatter for a format name.

    Unknown names fall back to 'simple'.
    """
    formatter_factory = FORMATTERS.get(format_type or 'simple', SimpleResponseOutput)
    return formatter_factory(colors)


__all__ = [
    'colorize',
    'describe',
    'SimpleResponseOutput',
    'DetailedResponseOutput',
    'JSONResponseOutput',
    'get_formatter',
]
