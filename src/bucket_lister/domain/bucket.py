"""Bucket records returned to API callers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class BucketSummary:
    """Projection of a storage bucket resource onto the fields the API exposes."""

    name: str | None
    location: str | None
    created: str | None
    storage_class: str | None
    id: str | None

    @classmethod
    def from_resource(cls, resource: Mapping[str, Any]) -> BucketSummary:
        return cls(
            name=resource.get("name"),
            location=resource.get("location"),
            created=resource.get("timeCreated"),
            storage_class=resource.get("storageClass"),
            id=resource.get("id"),
        )


@dataclass(frozen=True, slots=True)
class BucketListing:
    project_id: str
    buckets: tuple[BucketSummary, ...]

    @property
    def count(self) -> int:
        return len(self.buckets)


__all__ = ["BucketListing", "BucketSummary"]
