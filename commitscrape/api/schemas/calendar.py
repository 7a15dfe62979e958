from pydantic import BaseModel


class CalendarResponse(BaseModel):
    """Rendered calendar fragment ready for injection into a page."""

    html: str


class ErrorResponse(BaseModel):
    err: str
