from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from queryfilter.api.deps import filter_params
from queryfilter.db.session import get_db
from queryfilter.models.user import User
from queryfilter.schemas.filter_params import FilterQueryParams
from queryfilter.schemas.user import UserRead
from queryfilter.services.filter_scope import QueryFeature, apply_filter_scope
from queryfilter.services.pagination import page_meta, pagination_headers

router = APIRouter()

@router.get("", response_model=List[UserRead])
def list_users(
    response: Response,
    params: Optional[FilterQueryParams] = Depends(filter_params),
    db: Session = Depends(get_db),
):
    outcome = apply_filter_scope(db.query(User), params, QueryFeature.ALL)
    rows = outcome.query.all()
    if outcome.page is not None:
        counted = apply_filter_scope(db.query(User), params, QueryFeature.SEARCH | QueryFeature.FILTER)
        meta = page_meta(counted.query.count(), outcome.page)
        for key, value in pagination_headers(meta).items():
            response.headers[key] = value
    return rows
