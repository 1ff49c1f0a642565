from .request import CrudRequest, ParsedRequestParams, QueryFilter, parse_crud_request
from .service import CrudService, GetManyResponse, is_get_many

__all__ = [
    "CrudRequest",
    "CrudService",
    "GetManyResponse",
    "ParsedRequestParams",
    "QueryFilter",
    "is_get_many",
    "parse_crud_request",
]
