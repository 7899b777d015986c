import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

METRIC = "metric"
IMPERIAL = "imperial"
UNIT_SYSTEMS = [METRIC, IMPERIAL]

CELSIUS = "celsius"
FAHRENHEIT = "fahrenheit"

GRAMS_PER_OUNCE = 28.3495
OUNCES_PER_POUND = 16
ML_PER_FLUID_OUNCE = 29.5735
ML_PER_TEASPOON = 4.92892
CM_PER_INCH = 2.54

# Numbers this large are written in exponent notation, never digit by digit.
EXPONENT_THRESHOLD = 1e21

# (minimum fl oz, fl oz per unit, unit), checked top to bottom.
FLUID_OUNCE_STEPS = [
    (128, 128, "gal"),
    (32, 32, "qt"),
    (16, 16, "pt"),
    (8, 8, "cup"),
    (2, 1, "fl oz"),
]

UNIT_WORDS = {
    "°C": "degrees Celsius",
    "°F": "degrees Fahrenheit",
    "g": "grams",
    "kg": "kilograms",
    "oz": "ounces",
    "lb": "pounds",
    "ml": "milliliters",
    "L": "liters",
    "tsp": "teaspoons",
    "fl oz": "fluid ounces",
    "cup": "cups",
    "pt": "pints",
    "qt": "quarts",
    "gal": "gallons",
    "cm": "centimeters",
    "in": "inches",
}


class UnknownMeasurementError(ValueError):
    """Raised when a measurement kind has no matching conversion."""


@dataclass(frozen=True)
class Measurement:
    """
    A converted measurement ready for display.
    Attributes:
        value (float): The magnitude in the chosen display unit, before formatting.
        unit (str): The unit abbreviation or symbol ("kg", "fl oz", "°F", ...).
        text (str): What the reader sees, e.g. "1.5 kg" or "356°F".
        label (str): The same quantity with the unit spelled out, for aria-label/title.
    """

    value: float
    unit: str
    text: str
    label: str

    def to_dict(self) -> dict[str, float | str]:
        return {
            "value": self.value,
            "unit": self.unit,
            "text": self.text,
            "label": self.label,
        }


def round_half_up(value: float) -> float:
    """
    Rounds to the nearest integer with halves going toward positive infinity,
    so 2.5 -> 3 and -2.5 -> -2. Non-finite values are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    whole = math.floor(value)
    return whole + 1 if value - whole >= 0.5 else whole


def format_number(value: float) -> str:
    """
    Whole-number text. Magnitudes from 1e21 up use exponent notation
    ("1e+30"), like the browser's number-to-string.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if abs(value) >= EXPONENT_THRESHOLD:
        return repr(float(value))
    return str(int(value))


def format_one_decimal(value: float) -> str:
    """
    Formats with exactly one decimal place, rounding half away from zero on the
    exact binary value of the float (1.25 -> "1.3", 1.05 -> "1.1", 0.15 -> "0.1").
    """
    if not math.isfinite(value) or abs(value) >= EXPONENT_THRESHOLD:
        return format_number(value)
    if value == 0:
        value = 0.0
    return str(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def format_magnitude(value: float) -> str:
    """
    Shared display rule for weight and volume: magnitudes of 10 and above are
    shown as whole numbers, anything smaller keeps one decimal place.
    """
    if not math.isfinite(value):
        return format_number(value)
    if abs(value) >= 10:
        return format_number(round_half_up(value))
    return format_one_decimal(value)


def _measurement(value: float, unit: str, number: str, separator: str = " ") -> Measurement:
    return Measurement(
        value=value,
        unit=unit,
        text=f"{number}{separator}{unit}",
        label=f"{number} {UNIT_WORDS[unit]}",
    )


def convert_temperature(celsius: float, unit: str = CELSIUS) -> Measurement:
    """
    Converts a Celsius value for display.
    Args:
        celsius (float): Temperature in degrees Celsius.
        unit (str): "fahrenheit" to convert, anything else keeps Celsius.
    Returns:
        Measurement: Rounded to a whole degree, e.g. value 356, text "356°F",
        label "356 degrees Fahrenheit".
    """
    if unit == FAHRENHEIT:
        converted = celsius * 9 / 5 + 32
        symbol = "°F"
    else:
        converted = celsius
        symbol = "°C"

    rounded = round_half_up(converted)
    return _measurement(rounded, symbol, format_number(rounded), separator="")


def convert_weight(grams: float, system: str = METRIC) -> Measurement:
    """
    Converts grams to kg/g (metric) or lb/oz (imperial).
    Args:
        grams (float): Weight in grams.
        system (str): "imperial" for ounces and pounds, anything else is metric.
    Returns:
        Measurement: e.g. 1000 g metric -> "1.0 kg", 453.592 g imperial -> "1.0 lb".
    """
    if system == IMPERIAL:
        ounces = grams / GRAMS_PER_OUNCE
        if ounces >= OUNCES_PER_POUND:
            value, unit = ounces / OUNCES_PER_POUND, "lb"
        else:
            value, unit = ounces, "oz"
    else:
        if grams >= 1000:
            value, unit = grams / 1000, "kg"
        else:
            value, unit = grams, "g"

    return _measurement(value, unit, format_magnitude(value))


def convert_volume(milliliters: float, system: str = METRIC) -> Measurement:
    """
    Converts milliliters to L/ml (metric) or the largest fitting US customary
    unit (imperial): gallons, quarts, pints, cups, fluid ounces, then teaspoons
    for anything under 2 fl oz.
    """
    if system == IMPERIAL:
        fluid_ounces = milliliters / ML_PER_FLUID_OUNCE
        for threshold, per_unit, unit in FLUID_OUNCE_STEPS:
            if fluid_ounces >= threshold:
                value = fluid_ounces / per_unit
                break
        else:
            value, unit = milliliters / ML_PER_TEASPOON, "tsp"
    else:
        if milliliters >= 1000:
            value, unit = milliliters / 1000, "L"
        else:
            value, unit = milliliters, "ml"

    return _measurement(value, unit, format_magnitude(value))


def convert_length(centimeters: float, system: str = METRIC) -> Measurement:
    """Converts centimeters to inches for imperial; always one decimal place."""
    if system == IMPERIAL:
        value, unit = centimeters / CM_PER_INCH, "in"
    else:
        value, unit = centimeters, "cm"

    return _measurement(value, unit, format_one_decimal(value))


def temperature_unit_for(system: str) -> str:
    return FAHRENHEIT if system == IMPERIAL else CELSIUS


CONVERTERS = {
    "temperature": lambda value, system: convert_temperature(
        value, temperature_unit_for(system)
    ),
    "weight": convert_weight,
    "volume": convert_volume,
    "length": convert_length,
}


def convert(kind: str, value: float, system: str = METRIC) -> Measurement:
    """
    Converts a canonical metric value of the given kind for the given unit system.
    Args:
        kind (str): "temperature", "weight", "volume" or "length" (any case).
        value (float): The value in Celsius, grams, milliliters or centimeters.
        system (str): "metric" or "imperial". Temperature follows the system,
            imperial meaning Fahrenheit.
    Returns:
        Measurement: The display result.
    Raises:
        UnknownMeasurementError: If kind is not one of the four families.
    """
    converter = CONVERTERS.get(str(kind).strip().lower())
    if converter is None:
        raise UnknownMeasurementError(
            f"Unknown measurement kind: {kind}. "
            f"Supported: {', '.join(CONVERTERS)}"
        )
    return converter(value, system)
