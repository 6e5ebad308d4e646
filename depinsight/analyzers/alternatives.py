"""Suggest lighter alternatives for known heavy dependencies."""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from depinsight.models.reports import SuggestionEntry

DEFAULT_ALTERNATIVES: Mapping[str, str] = MappingProxyType({
    # Dates
    "moment": "date-fns",
    "luxon": "dayjs",
    "moment-timezone": "timezone-mock",
    # Utilities
    "lodash": "lodash-es",
    "ramda": "ramda-adjunct",
    "string.js": "string",
    "sprintf-js": "tiny-sprintf",
    "numeral": "vanilla JS",
    "mathjs": "decimal.js",
    # HTTP
    "axios": "fetch",
    "superagent": "undici",
    "socket.io": "ws",
    # DOM
    "jquery": "vanilla JS",
    "zepto": "vanilla JS",
    # Charts and graphics
    "chart.js": "chartist",
    "d3": "chart.js",
    "highcharts": "chart.js",
    "plotly.js": "chartist",
    "fabric": "konva",
    "sharp": "image-size",
    "animejs": "gsap",
    # Validation
    "validator": "is.js",
    "joi": "yup",
    # State and routing
    "redux": "valtio",
    "mobx": "effector",
    "react-router": "wouter",
    # UI widgets and CSS
    "fullcalendar": "flatpickr",
    "dropzone": "fine-uploader",
    "bootstrap": "bulma",
    "tailwindcss": "tachyons",
})


class AlternativeMatcher:
    """Matches installed package names against a substitution table.

    The table is copied into a read-only mapping at construction time.
    """

    def __init__(self, table: Mapping[str, str] = DEFAULT_ALTERNATIVES) -> None:
        self.table: Mapping[str, str] = MappingProxyType(dict(table))

    def match(self, names: Iterable[str]) -> list[SuggestionEntry] | None:
        """Suggestions for every name present in the table.

        Args:
            names: Direct dependency names, in manifest/tree order.

        Returns:
            Suggestions in input order, or None when nothing matched.
        """
        suggestions = [
            SuggestionEntry(installed_name=name, suggested_name=self.table[name])
            for name in names
            if name in self.table
        ]
        return suggestions or None
