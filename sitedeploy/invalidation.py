"""CloudFront cache invalidation for SiteDeploy.

Key classes:
- InvalidationRequest: One invalidation batch with a per-run caller reference.
- CloudFrontInvalidator: Submits requests through boto3.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import InvalidationError

CLOUDFRONT_API_VERSION = "2020-05-31"


def new_caller_reference(now: datetime | None = None) -> str:
    """Build a caller reference that is unique for every deploy run.

    CloudFront treats two requests with the same reference as one, so the
    reference combines the current UTC time with a random suffix.

    Args:
        now: Timestamp to use instead of the current time.

    Returns:
        A string such as ``2024-05-01T12:00:00.123456+00:00-1a2b3c4d``.
    """
    stamp = (now or datetime.now(timezone.utc)).isoformat()
    return f"{stamp}-{uuid.uuid4().hex[:8]}"


@dataclass(frozen=True)
class InvalidationRequest:
    """A cache invalidation for one distribution.

    Attributes:
        distribution_id: CloudFront distribution to purge.
        paths: Ordered path patterns, e.g. ``("/*",)``.
        caller_reference: Token that keeps repeated deploys from being deduplicated.
    """

    distribution_id: str
    paths: tuple[str, ...]
    caller_reference: str

    @classmethod
    def create(
        cls, distribution_id: str, paths: Iterable[str]
    ) -> InvalidationRequest:
        """Create a request with a fresh caller reference."""
        items = tuple(paths)
        if not items:
            raise ValueError("An invalidation needs at least one path")
        return cls(distribution_id, items, new_caller_reference())

    def to_api(self) -> dict[str, Any]:
        """Render the keyword arguments for ``CreateInvalidation``."""
        return {
            "DistributionId": self.distribution_id,
            "InvalidationBatch": {
                "CallerReference": self.caller_reference,
                "Paths": {
                    "Quantity": len(self.paths),
                    "Items": list(self.paths),
                },
            },
        }


class CloudFrontInvalidator:
    """InvalidationClient that calls CloudFront through boto3.

    Args:
        profile_name: AWS profile to authenticate with.
        client: Preconfigured CloudFront client, mainly for tests.
    """

    def __init__(self, profile_name: str | None = None, client: Any = None):
        self.profile_name = profile_name
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            session = boto3.Session(profile_name=self.profile_name)
            self._client = session.client(
                "cloudfront", api_version=CLOUDFRONT_API_VERSION
            )
        return self._client

    def submit(self, request: InvalidationRequest) -> str:
        """Submit the request and return the invalidation id.

        Raises:
            InvalidationError: If boto3 or CloudFront reports an error.
        """
        try:
            response = self.client.create_invalidation(**request.to_api())
        except (BotoCoreError, ClientError) as exc:
            raise InvalidationError(
                f"CloudFront invalidation failed for {request.distribution_id}: {exc}",
                exc,
            ) from exc
        return str(response.get("Invalidation", {}).get("Id", ""))
