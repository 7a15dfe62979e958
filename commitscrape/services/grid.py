from bs4 import BeautifulSoup
from bs4 import Tag
from pydantic import BaseModel
from pydantic import ConfigDict

DAYS_PER_COLUMN = 7
CALENDAR_SELECTOR = "div.js-calendar-graph"
CELL_SELECTOR = "div.js-calendar-graph svg rect[data-date]"

# Older calendar markup carries no data-level, only a fill colour.
FILL_LEVELS: dict[str, int] = {
    "var(--color-calendar-graph-day-bg)": 0,
    "var(--color-calendar-graph-day-l1-bg)": 1,
    "var(--color-calendar-graph-day-l2-bg)": 2,
    "var(--color-calendar-graph-day-l3-bg)": 3,
    "var(--color-calendar-graph-day-l4-bg)": 4,
    "#ebedf0": 0,
    "#9be9a8": 1,
    "#40c463": 2,
    "#30a14e": 3,
    "#216e39": 4,
}


class MarkupParseError(Exception):
    """Raised when fetched calendar markup breaks the expected structure."""


class ActivityCell(BaseModel):
    """One day of the contribution calendar."""

    model_config = ConfigDict(frozen=True)

    level: int
    count: int
    date: str


def _parse_int(raw_value: str, attribute: str, date: str) -> int:
    try:
        return int(raw_value.strip())
    except ValueError as exc:
        raise MarkupParseError(
            f"cell {date!r} has a non-integer {attribute}: {raw_value!r}"
        ) from exc


def resolve_level(node: Tag, date: str) -> int:
    """Read the activity level from `data-level`, else from the `fill` palette."""

    raw_level = node.get("data-level")
    if raw_level is not None:
        return _parse_int(str(raw_level), "data-level", date)

    raw_fill = node.get("fill")
    if raw_fill is not None:
        fill = str(raw_fill).strip().lower()
        if fill not in FILL_LEVELS:
            raise MarkupParseError(f"cell {date!r} has an unknown fill: {raw_fill!r}")
        return FILL_LEVELS[fill]

    return 0


def extract_cells(markup: str) -> list[ActivityCell]:
    """Read every day cell of the calendar widget in document order."""

    soup = BeautifulSoup(markup, "html.parser")
    if soup.select_one(CALENDAR_SELECTOR) is None:
        raise MarkupParseError("calendar widget not found in markup")

    cells: list[ActivityCell] = []
    for node in soup.select(CELL_SELECTOR):
        date = str(node.get("data-date", "")).strip()
        level = resolve_level(node, date)

        raw_count = node.get("data-count")
        count = 0 if raw_count is None else _parse_int(str(raw_count), "data-count", date)
        if count < 0:
            raise MarkupParseError(f"cell {date!r} has a negative count: {count}")

        cells.append(ActivityCell(level=level, count=count, date=date))

    return cells


def group_columns(cells: list[ActivityCell]) -> list[list[ActivityCell]]:
    """Group cells into weekly columns, column index = position // 7."""

    grouped: dict[int, list[ActivityCell]] = {}
    for position, cell in enumerate(cells):
        grouped.setdefault(position // DAYS_PER_COLUMN, []).append(cell)

    return [grouped[index] for index in sorted(grouped)]


def extract_columns(markup: str) -> list[list[ActivityCell]]:
    return group_columns(extract_cells(markup))
