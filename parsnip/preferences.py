import json
import logging
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, StrictStr, ValidationError

from parsnip.units import METRIC, temperature_unit_for

logger = logging.getLogger(__name__)

LANGUAGES = [
    {"code": "en", "label": "English"},
    {"code": "es", "label": "Spanish"},
    {"code": "fr", "label": "French"},
]

REGIONS = [
    {"code": "US", "label": "United States", "flag": "🇺🇸"},
    {"code": "UK", "label": "United Kingdom", "flag": "🇬🇧"},
    {"code": "EU", "label": "European Union", "flag": "🇪🇺"},
    {"code": "CA", "label": "Canada", "flag": "🇨🇦"},
    {"code": "AU", "label": "Australia", "flag": "🇦🇺"},
]

UnitSystem = Literal["metric", "imperial"]
LanguageCode = Literal["en", "es", "fr"]
RegionCode = Literal["US", "UK", "EU", "CA", "AU"]


class InvalidPreferenceError(ValueError):
    """Raised when a preference is unknown or set to a value outside its allowed choices."""


def get_language_label(code: str) -> str:
    for language in LANGUAGES:
        if language["code"] == code:
            return language["label"]
    return code


def get_region_meta(code: str) -> dict[str, str]:
    for region in REGIONS:
        if region["code"] == code:
            return {"label": region["label"], "flag": region["flag"]}
    return {"label": code, "flag": ""}


class Preferences(BaseModel):
    """A reader's display preferences."""

    system: UnitSystem = Field(METRIC, description="Unit system for measurements")
    language: LanguageCode = Field("en", description="Language recipes are written in")
    region: RegionCode = Field("US", description="Region used for ingredient naming")
    context: StrictStr = Field("", description="Free-text context sent with every recipe")

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @property
    def temperature_unit(self) -> str:
        return temperature_unit_for(self.system)

    def combined_context(self, extra: str | None = None) -> str:
        """
        Joins the saved context with a per-request one. Each part is trimmed and
        blank parts are dropped, so two empty contexts give an empty string.
        """
        parts = [(part or "").strip() for part in (self.context, extra)]
        return "\n".join(part for part in parts if part)

    def to_dict(self) -> dict[str, str]:
        return self.model_dump()

    def describe(self) -> dict[str, str]:
        """Preferences plus the labels a front end needs to show them."""
        region = get_region_meta(self.region)
        return {
            **self.to_dict(),
            "temperature_unit": self.temperature_unit,
            "language_label": get_language_label(self.language),
            "region_label": region["label"],
            "region_flag": region["flag"],
        }


def _describe_errors(error: ValidationError) -> str:
    messages = []
    for detail in error.errors():
        name = ".".join(str(part) for part in detail["loc"]) or "preferences"
        if detail["type"] == "extra_forbidden":
            messages.append(f"Unknown preference: {name}")
        else:
            messages.append(f"Invalid {name}: {detail['input']!r}. {detail['msg']}")
    return "; ".join(messages)


class PreferencesStore:
    """
    Keeps a single user's Preferences in a JSON file.
    Reading never fails: a missing or corrupt file gives the defaults, and any
    stored value that is no longer allowed falls back to its default.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> Preferences:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return Preferences()
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read preferences from %s: %s", self.path, e)
            return Preferences()

        if not isinstance(data, dict):
            logger.warning("Ignoring preferences in %s: expected a JSON object", self.path)
            return Preferences()

        try:
            return Preferences.model_validate(data)
        except ValidationError as e:
            logger.warning("Ignoring stored preferences: %s", _describe_errors(e))
            rejected = {detail["loc"][0] for detail in e.errors() if detail["loc"]}

        kept = {
            name: value
            for name, value in data.items()
            if name in Preferences.model_fields and name not in rejected
        }
        return Preferences.model_validate(kept)

    def save(self, preferences: Preferences) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(preferences.to_dict(), f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)

    def update(self, **changes) -> Preferences:
        """
        Applies changes on top of the stored preferences and saves the result.
        Raises:
            InvalidPreferenceError: If a name is unknown or a value is not allowed.
                Nothing is written in that case.
        """
        try:
            preferences = Preferences.model_validate({**self.load().to_dict(), **changes})
        except ValidationError as e:
            raise InvalidPreferenceError(_describe_errors(e)) from e

        self.save(preferences)
        logger.info("Saved preferences to %s", self.path)
        return preferences
