"""Pydantic response shapes for the bucket listing API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from bucket_lister.domain.bucket import BucketListing, BucketSummary

BUCKET_LIST_MESSAGE = "GCS Buckets in the authenticated project"
BUCKET_LIST_ERROR = "Failed to retrieve GCS buckets"
METHOD_NOT_ALLOWED_ERROR = "Method not allowed"


class BucketModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = None
    location: str | None = None
    created: str | None = None
    storage_class: str | None = Field(default=None, serialization_alias="storageClass")
    id: str | None = None

    @classmethod
    def from_summary(cls, summary: BucketSummary) -> BucketModel:
        return cls(
            name=summary.name,
            location=summary.location,
            created=summary.created,
            storage_class=summary.storage_class,
            id=summary.id,
        )


class BucketListResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str = BUCKET_LIST_MESSAGE
    count: int = Field(ge=0)
    buckets: tuple[BucketModel, ...]

    @classmethod
    def from_listing(cls, listing: BucketListing) -> BucketListResponse:
        return cls(
            count=listing.count,
            buckets=tuple(BucketModel.from_summary(bucket) for bucket in listing.buckets),
        )


class ErrorResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    error: str
    details: str | None = None


__all__ = [
    "BUCKET_LIST_ERROR",
    "BUCKET_LIST_MESSAGE",
    "BucketListResponse",
    "BucketModel",
    "ErrorResponse",
    "METHOD_NOT_ALLOWED_ERROR",
]
