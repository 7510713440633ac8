from .base import BaseRequestSchema, BaseResponseSchema
from .filter import FilterSchema, SoftDeleteFilterSchema, get_soft_delete_filter_schema_for

__all__ = [
    'BaseRequestSchema',
    'BaseResponseSchema',
    'FilterSchema',
    'SoftDeleteFilterSchema',
    'get_soft_delete_filter_schema_for',
]
