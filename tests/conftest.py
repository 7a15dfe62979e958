from collections.abc import Callable
from datetime import date
from datetime import timedelta

import pytest
from sqlalchemy import Engine
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from commitscrape.db import Base

CellSpec = tuple[str, int, int]


@pytest.fixture
def memory_engine() -> Engine:
    test_engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def make_days() -> Callable[..., list[CellSpec]]:
    """Build `(date, level, count)` triples for consecutive days."""

    def build(
        total: int, start: date = date(2020, 1, 5), level: int = 0, count: int = 0
    ) -> list[CellSpec]:
        return [
            ((start + timedelta(days=offset)).isoformat(), level, count)
            for offset in range(total)
        ]

    return build


@pytest.fixture
def make_calendar_page() -> Callable[..., str]:
    """Render a contributions page with one svg group per week."""

    def build(cells: list[CellSpec], use_fill: bool = False) -> str:
        palette = ["#ebedf0", "#9be9a8", "#40c463", "#30a14e", "#216e39"]
        groups = []
        for week_start in range(0, len(cells), 7):
            rects = []
            for day, level, count in cells[week_start : week_start + 7]:
                level_attr = (
                    f'fill="{palette[level]}"' if use_fill else f'data-level="{level}"'
                )
                rects.append(
                    f'<rect width="10" height="10" {level_attr}'
                    f' data-count="{count}" data-date="{day}"></rect>'
                )
            groups.append(f"<g>{''.join(rects)}</g>")

        return (
            "<!DOCTYPE html><html><body>"
            '<div class="js-calendar-graph">'
            f'<svg width="722" height="112"><g>{"".join(groups)}</g></svg>'
            "</div></body></html>"
        )

    return build
