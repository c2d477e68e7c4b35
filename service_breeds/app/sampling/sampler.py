"""
Random selection over cached catalog collections.
"""

import random
from typing import Optional

from shared.errors import SelectionFailed

from service_breeds.app.domain.models import Collection, ImagePayload, Scalar, UpstreamResult


class Sampler:
    """Draws entries from a collection-shaped response without replacement.

    ``amount == 0`` yields one scalar entry; ``amount > 0`` yields a list of
    ``min(amount, total)`` distinct entries in draw order. The status code
    and headers of the input result are kept, only the body changes.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._random = rng or random.Random()

    def select(self, result: UpstreamResult, amount: int = 0) -> UpstreamResult:
        if amount < 0:
            raise ValueError("amount must be non-negative")

        payload = self._sampleable_payload(result)
        entries = payload.message.entries()

        if amount == 0:
            message = Scalar(self._random.choice(entries))
        else:
            amount = min(amount, len(entries))
            message = Collection(self._random.sample(entries, amount))

        return result.with_body(payload.with_message(message).encode())

    def _sampleable_payload(self, result: UpstreamResult) -> ImagePayload:
        if result.status != 200:
            raise SelectionFailed(
                f"Upstream status {result.status}",
                details={"status": result.status},
            )

        try:
            payload = ImagePayload.decode(result.body)
        except ValueError as exc:
            raise SelectionFailed("Malformed payload", details={"error": str(exc)}) from exc

        if not payload.succeeded:
            raise SelectionFailed(f"Payload status {payload.status!r}")

        message = payload.message
        if not isinstance(message, Collection):
            raise SelectionFailed("Message is not a collection")
        if len(message) == 0:
            raise SelectionFailed("Message collection is empty")

        return payload
