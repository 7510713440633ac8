from pydantic import BaseModel, ConfigDict


class BaseRequestSchema(BaseModel):
    model_config = ConfigDict(extra='forbid', populate_by_name=True)


class BaseResponseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)
