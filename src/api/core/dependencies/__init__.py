from typing import Annotated

from fastapi import Depends
from sqlmodel import Session

from src.api.core.dependencies.query_params import list_query_params, product_query_params
from src.api.services.catalog_service import ProductQuery
from src.lib.db_con import get_session
from src.api.core.security import (
    is_authenticated,
    require_signin,
    require_admin,
)


GetSession = Annotated[Session, Depends(get_session)]

requireSignin = Annotated[dict, Depends(require_signin)]
requireAdmin = Annotated[dict, Depends(require_admin)]
isAuthenticated = Annotated[dict | None, Depends(is_authenticated)]
ListQueryParams = Annotated[list_query_params, Depends(list_query_params)]
ProductQueryParams = Annotated[ProductQuery, Depends(product_query_params)]
