"""Display helpers: Polish date formats, status colors and meal categories."""

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Literal

from calorie_tracker.dates import parse_api_date, to_api_format
from calorie_tracker.domain.meals import MealCategory
from calorie_tracker.domain.progress import ProgressStatus

DateFormat = Literal["YYYY-MM-DD", "full", "short", "time"]

_WEEKDAYS = (
    "poniedziałek",
    "wtorek",
    "środa",
    "czwartek",
    "piątek",
    "sobota",
    "niedziela",
)
_WEEKDAYS_SHORT = ("pon.", "wt.", "śr.", "czw.", "pt.", "sob.", "niedz.")
_MONTHS_GENITIVE = (
    "stycznia",
    "lutego",
    "marca",
    "kwietnia",
    "maja",
    "czerwca",
    "lipca",
    "sierpnia",
    "września",
    "października",
    "listopada",
    "grudnia",
)
_MONTHS_SHORT = (
    "sty",
    "lut",
    "mar",
    "kwi",
    "maj",
    "cze",
    "lip",
    "sie",
    "wrz",
    "paź",
    "lis",
    "gru",
)


def format_date(
    value: date | datetime | str, fmt: DateFormat, tz: tzinfo | None = None
) -> str:
    """Format a day or timestamp for display.

    ``"full"`` gives ``poniedziałek, 30 października 2025``, ``"short"``
    gives ``pon., 30 paź`` and ``"time"`` gives ``08:30``. Aware timestamps
    are converted to ``tz`` first when it is provided.
    """
    moment = _coerce(value)
    if tz is not None and isinstance(moment, datetime) and moment.tzinfo:
        moment = moment.astimezone(tz)
    if fmt == "YYYY-MM-DD":
        return to_api_format(moment)
    if fmt == "full":
        return (
            f"{_WEEKDAYS[moment.weekday()]}, {moment.day} "
            f"{_MONTHS_GENITIVE[moment.month - 1]} {moment.year}"
        )
    if fmt == "short":
        return (
            f"{_WEEKDAYS_SHORT[moment.weekday()]}, {moment.day} "
            f"{_MONTHS_SHORT[moment.month - 1]}"
        )
    if fmt == "time":
        if not isinstance(moment, datetime):
            return "00:00"
        return moment.strftime("%H:%M")
    return moment.isoformat()


def _coerce(value: date | datetime | str) -> date | datetime:
    if not isinstance(value, str):
        return value
    if len(value) == len("YYYY-MM-DD"):
        return parse_api_date(value)
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class StatusColor:
    """Tailwind classes used to render a progress status."""

    bg: str
    text: str
    border: str


STATUS_COLOR_MAP: dict[ProgressStatus, StatusColor] = {
    "under": StatusColor(
        bg="bg-sky-400", text="text-gray-700", border="border-gray-300"
    ),
    "on_track": StatusColor(
        bg="bg-green-500", text="text-green-700", border="border-green-400"
    ),
    "over": StatusColor(
        bg="bg-orange-500", text="text-orange-700", border="border-orange-400"
    ),
}


def status_color(status: ProgressStatus) -> StatusColor:
    return STATUS_COLOR_MAP[status]


def status_bg_class(status: ProgressStatus) -> str:
    return STATUS_COLOR_MAP[status].bg


def status_text_class(status: ProgressStatus) -> str:
    return STATUS_COLOR_MAP[status].text


def status_border_class(status: ProgressStatus) -> str:
    return STATUS_COLOR_MAP[status].border


@dataclass(frozen=True)
class CategoryConfig:
    """Label, icon and badge classes for a meal category."""

    label: str
    icon: str
    color: str


CATEGORY_CONFIG: dict[MealCategory, CategoryConfig] = {
    MealCategory.BREAKFAST: CategoryConfig(
        label="Śniadanie", icon="🍳", color="bg-yellow-100 text-yellow-800"
    ),
    MealCategory.LUNCH: CategoryConfig(
        label="Obiad", icon="🍽️", color="bg-blue-100 text-blue-800"
    ),
    MealCategory.DINNER: CategoryConfig(
        label="Kolacja", icon="🍲", color="bg-purple-100 text-purple-800"
    ),
    MealCategory.SNACK: CategoryConfig(
        label="Przekąska", icon="🍪", color="bg-pink-100 text-pink-800"
    ),
    MealCategory.OTHER: CategoryConfig(
        label="Inne", icon="🍴", color="bg-gray-100 text-gray-800"
    ),
}


def category_config(category: MealCategory | str | None) -> CategoryConfig:
    """Return display config for a category; missing categories render as other."""
    if category is None:
        return CATEGORY_CONFIG[MealCategory.OTHER]
    return CATEGORY_CONFIG[MealCategory(category)]


def category_label(category: MealCategory | str | None) -> str:
    return category_config(category).label
