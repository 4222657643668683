from pydantic import BaseModel, ConfigDict
from typing import List, Literal

Dir = Literal["asc", "desc"]

class FilterQueryParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    search: str = ""
    filter: List[str] = []
    page: int = 1
    page_size: int = 10
    all: bool = False
    order_by: str = "id"
    order_direction: Dir = "desc"

class PageMeta(BaseModel):
    total: int
    total_pages: int
    page: int
    page_size: int
