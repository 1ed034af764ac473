from typing import Optional

from pydantic import BaseModel, Field


class PageMeta(BaseModel):
    current_page: int
    per_page: int
    total: int
    last_page: int
    # positions of the first/last item on the page; None for an empty page
    from_: Optional[int] = Field(None, alias="from")
    to: Optional[int] = None

    model_config = {"populate_by_name": True}
