"""Rendering of activity cells into the embeddable calendar fragment.

A fragment is a single ``div.commitscrape`` holding an inline stylesheet
followed by one ``div.commitscrape-col`` per week. Trimming works on that
structure, so the container classes below are part of the public contract.
"""

from html import escape

from bs4 import BeautifulSoup

from commitscrape.services.grid import ActivityCell

MONTHS: dict[str, str] = {
    "01": "Jan",
    "02": "Feb",
    "03": "Mar",
    "04": "Apr",
    "05": "May",
    "06": "Jun",
    "07": "Jul",
    "08": "Aug",
    "09": "Sep",
    "10": "Oct",
    "11": "Nov",
    "12": "Dec",
}

MAX_COLUMNS = 52
# 52 full weeks plus the partial current one.
TOTAL_COLUMN_SLOTS = 53

FRAGMENT_CLASS = "commitscrape"
COLUMN_CLASS = "commitscrape-col"
COLUMN_OPEN = f'<div class="{COLUMN_CLASS}">'
COLUMN_SEPARATOR = "</div>" + COLUMN_OPEN

STYLE_HEADER = f"""
<div aria-hidden="true" class="{FRAGMENT_CLASS}">
<style>
.commitscrape-col:last-child .commitscrape-block{{margin-right:0 !important;}}
.commitscrape-0{{background-color:#161b22;}}
.commitscrape-1{{background-color:#0a373e;}}
.commitscrape-2{{background-color:#105f6b;}}
.commitscrape-3{{background-color:#09798a;}}
.commitscrape-4{{background-color:#05afca;}}
.commitscrape-col{{display:inline-grid;}}
.commitscrape-block{{border-radius: 3px;}}
</style>
"""

BLOCK_STYLE = "width:10px;height:10px;margin-bottom:3px;margin-right:3px;"


def format_date(raw_date: str) -> str:
    """Turn `YYYY-MM-DD` into `Mon DD YYYY`.

    Purely positional: missing segments or an unknown month leave blanks
    in the label instead of raising.
    """

    year = month = day = ""
    for position, segment in enumerate(raw_date.split("-")):
        if position == 0:
            year = segment
        elif position == 1:
            month = MONTHS.get(segment, "")
        elif position == 2:
            day = segment

    return f"{month} {day} {year}"


def contribution_phrase(count: int | str) -> str:
    try:
        number = int(count)
    except (TypeError, ValueError):
        return f"{count} contributions"

    if number == 0:
        return "No contributions"
    if number == 1:
        return "1 contribution"
    return f"{number} contributions"


def render_cell(level: int | str, count: int | str, date: str) -> str:
    """Render one day as a 10x10 block.

    Levels outside 0..4 still render, they just have no colour rule.
    """

    label = f"{contribution_phrase(count)} on {format_date(date)}"
    return (
        f'<div class="commitscrape-block commitscrape-{escape(str(level))}"'
        f' style="{BLOCK_STYLE}"'
        f' data-count="{escape(str(count))}"'
        f' data-date="{escape(date)}"'
        f' aria-label="{escape(label)}"></div>'
    )


def assemble_fragment(rendered_columns: list[str]) -> str:
    """Wrap rendered columns in the styled outer container.

    No columns means no calendar, so the result is empty.
    """

    if not rendered_columns:
        return ""

    return STYLE_HEADER + COLUMN_OPEN + COLUMN_SEPARATOR.join(rendered_columns) + "</div></div>"


def render_fragment(columns: list[list[ActivityCell]]) -> str:
    rendered_columns = [
        "".join(render_cell(cell.level, cell.count, cell.date) for cell in column)
        for column in columns
    ]
    return assemble_fragment(rendered_columns)


def trim_columns(fragment: str, columns: int) -> str:
    """Keep only the most recent `columns` weeks of an assembled fragment.

    Removes the leading `TOTAL_COLUMN_SLOTS - columns` column containers, or
    as many as exist when the fragment holds fewer. From
    `TOTAL_COLUMN_SLOTS` upwards nothing is removed. A calendar container
    without columns has nothing to show and trims to "".
    """

    if columns <= 0:
        raise ValueError(f"columns must be positive, got {columns}")

    if not fragment.strip():
        return ""

    soup = BeautifulSoup(fragment, "html.parser")
    container = soup.find("div", class_=FRAGMENT_CLASS)
    if container is None:
        return str(soup)

    found = container.find_all("div", class_=COLUMN_CLASS, recursive=False)
    if not found:
        return ""

    for column in found[: max(0, TOTAL_COLUMN_SLOTS - columns)]:
        column.decompose()

    return str(soup)
