"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Concurrent grouping table: signature hash -> equivalence classes.

The table is split into lock-protected stripes (stripe = hash % stripes), so
workers merging unrelated signatures never wait on each other. Within a stripe a
hash bucket may hold several groups: a hash match is only a candidate, the
canonical string decides. A collision starts a new group in the same bucket,
keyed by (hash, canonical).
"""

import logging
import threading
from typing import Dict, List

from xmlstruct.core.hasher import format_hash
from xmlstruct.core.models import Signature, SignatureGroup, StructuralNode

logger = logging.getLogger(__name__)

DEFAULT_STRIPES = 64


class _Stripe:
    __slots__ = ("lock", "buckets")

    def __init__(self):
        self.lock = threading.Lock()
        self.buckets: Dict[int, List[SignatureGroup]] = {}


class SignatureGrouperImpl:
    """
    Thread-safe insert-or-merge table owned by one analysis run.

    At most one group is created per (hash, canonical) pair even when several
    workers see a brand-new signature at the same time: the first to take the
    stripe lock creates it, the others append to it.
    """

    def __init__(self, stripes: int = DEFAULT_STRIPES):
        if stripes < 1:
            raise ValueError("Stripe count must be positive")
        self._stripes = [_Stripe() for _ in range(stripes)]
        self._collision_lock = threading.Lock()
        self.collisions = 0

    def _stripe_for(self, hash_value: int) -> _Stripe:
        return self._stripes[hash_value % len(self._stripes)]

    def record(self, file_path: str, signature: Signature, structure: StructuralNode) -> SignatureGroup:
        stripe = self._stripe_for(signature.hash)

        with stripe.lock:
            bucket = stripe.buckets.setdefault(signature.hash, [])
            for group in bucket:
                if group.matches(signature):
                    target = group
                    break
            else:
                collided = bool(bucket)
                target = SignatureGroup(signature, structure, file_path)
                bucket.append(target)
                if collided:
                    self._note_collision(signature, bucket[0].signature)
                return target

        # Merging outside the stripe lock; the group guards its own file list
        target.add_file(file_path, signature)
        return target

    def _note_collision(self, signature: Signature, existing: Signature) -> None:
        with self._collision_lock:
            self.collisions += 1
        logger.warning(
            f"Hash collision on {format_hash(signature.hash)}: "
            f"'{signature.canonical[:60]}' vs '{existing.canonical[:60]}' kept as separate groups"
        )

    def groups(self) -> List[SignatureGroup]:
        result = []
        for stripe in self._stripes:
            with stripe.lock:
                for bucket in stripe.buckets.values():
                    result.extend(bucket)
        return result

    def __len__(self) -> int:
        total = 0
        for stripe in self._stripes:
            with stripe.lock:
                total += sum(len(bucket) for bucket in stripe.buckets.values())
        return total
