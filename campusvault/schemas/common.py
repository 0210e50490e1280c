from typing import Generic, TypeVar, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ResponseModel(BaseModel, Generic[T]):
    """Standard API response model"""
    code: int = 200
    data: Optional[T] = None
    msg: str = "success"


class CamelModel(BaseModel):
    """Bodies use camelCase on the wire; snake_case is accepted on input too"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
