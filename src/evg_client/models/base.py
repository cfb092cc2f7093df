"""Shared base model and body decoders for Evergreen resources."""

from functools import lru_cache
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from ..errors import DecodeError

__all__ = ["EvgModel", "decode_batch", "decode_one"]

M = TypeVar("M", bound=BaseModel)


class EvgModel(BaseModel):
    """Base for API records: unknown fields are ignored, instances are frozen."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


@lru_cache(maxsize=None)
def _batch_adapter(model: type[M]) -> TypeAdapter:
    return TypeAdapter(list[model])


def decode_one(model: type[M], body: bytes) -> M:
    """Decode a JSON body as a single record.

    Raises:
        DecodeError: If the body is not JSON or does not match the model.
    """
    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        raise DecodeError(f"Response is not a valid {model.__name__}: {e}") from e


def decode_batch(model: type[M], body: bytes) -> list[M]:
    """Decode a JSON array body as a batch of records, preserving order.

    Raises:
        DecodeError: If the body is not a JSON array of matching objects.
    """
    try:
        return _batch_adapter(model).validate_json(body)
    except ValidationError as e:
        raise DecodeError(f"Response is not a list of {model.__name__}: {e}") from e
