import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterator

from bs4 import BeautifulSoup

from parsnip.units import METRIC, UNIT_SYSTEMS, Measurement, convert

logger = logging.getLogger(__name__)

GREEN = "\033[92m"
CYAN = "\033[96m"
YELLOW = "\033[93m"
MAGENTA = "\033[95m"
RESET = "\033[0m"
BOLD = "\033[1m"

# <Temperature value={180} />, <Weight value="500">, <Volume  value={ 2.5 }/>
TAG_PATTERN = re.compile(
    r"<\s*(?P<kind>Temperature|Weight|Volume|Length)\s+value\s*=\s*"
    r"(?:\{\s*(?P<braced>[^{}]*?)\s*\}|\"\s*(?P<quoted>[^\"]*?)\s*\"|'\s*(?P<single>[^']*?)\s*')"
    r"\s*/?\s*>"
)


@dataclass(frozen=True)
class MeasurementTag:
    """A measurement placeholder found in recipe markup."""

    kind: str
    raw_value: str
    start: int
    end: int
    source: str

    @property
    def value(self) -> float:
        """
        The canonical metric value written in the tag.
        Raises:
            ValueError: If the tag does not hold a number.
        """
        return float(self.raw_value)


def find_measurements(markup: str) -> Iterator[MeasurementTag]:
    """
    Yields every measurement tag in the markup, in document order.
    Args:
        markup (str): Recipe text written with <Temperature/Weight/Volume/Length value={...} /> tags.
    Returns:
        Iterator[MeasurementTag]: One entry per tag, with its position in the markup.
    """
    for match in TAG_PATTERN.finditer(markup):
        raw = next(
            group
            for group in (match.group("braced"), match.group("quoted"), match.group("single"))
            if group is not None
        )
        yield MeasurementTag(
            kind=match.group("kind"),
            raw_value=raw,
            start=match.start(),
            end=match.end(),
            source=match.group(0),
        )


def _substitute(markup: str, system: str, to_text: Callable[[Measurement], str]) -> str:
    pieces = []
    cursor = 0
    for tag in find_measurements(markup):
        pieces.append(markup[cursor : tag.start])
        try:
            measurement = convert(tag.kind, tag.value, system)
        except ValueError:
            logger.warning("Leaving measurement tag with a non-numeric value: %s", tag.source)
            pieces.append(tag.source)
        else:
            pieces.append(to_text(measurement))
        cursor = tag.end
    pieces.append(markup[cursor:])
    return "".join(pieces)


def render_text(markup: str, system: str = METRIC) -> str:
    """Replaces each measurement tag with its display text, e.g. "500 g" or "356°F"."""
    return _substitute(markup, system, lambda measurement: measurement.text)


def measurement_span(measurement: Measurement) -> str:
    soup = BeautifulSoup("", "lxml")
    span = soup.new_tag(
        "span",
        attrs={"aria-label": measurement.label, "title": measurement.label},
    )
    span.string = measurement.text
    return str(span)


def render_html(markup: str, system: str = METRIC) -> str:
    """
    Replaces each measurement tag with a <span> showing the display text and
    carrying the spelled-out quantity in aria-label and title, so screen
    readers say "356 degrees Fahrenheit" rather than "356 degree sign F".
    """
    return _substitute(markup, system, measurement_span)


RENDERERS = {
    "text": render_text,
    "html": render_html,
}


if __name__ == "__main__":
    print(BOLD + CYAN + "\n=== Parsnip Measurement Renderer ===\n" + RESET)

    system = ""
    while system not in UNIT_SYSTEMS:
        system = input(YELLOW + "Unit system (metric/imperial): " + RESET).strip().lower()

    print(CYAN + "\n------------------------------------------------------------" + RESET)
    print(BOLD + "Paste recipe lines with measurement tags to render them." + RESET)
    print("(Type 'exit' or 'quit' to stop)")
    print(CYAN + "------------------------------------------------------------\n" + RESET)

    while True:
        line = input(GREEN + "Markup: " + RESET)

        if line.lower() in ("exit", "quit"):
            print(CYAN + "\nGoodbye!\n" + RESET)
            break

        print(BOLD + MAGENTA + "Rendered:" + RESET)
        print(f"{render_text(line, system)}\n")
