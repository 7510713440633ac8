from datetime import datetime

from tombstone.schemas.base import BaseRequestSchema, BaseResponseSchema


class MockModelResponseSchema(BaseResponseSchema):
    id: int
    title: str
    description: str | None
    deleted_at: datetime | None


class CreateMockModelRequestSchema(BaseRequestSchema):
    title: str
    description: str | None = None


class UpdateMockModelRequestSchema(BaseRequestSchema):
    title: str | None = None
    description: str | None = None
