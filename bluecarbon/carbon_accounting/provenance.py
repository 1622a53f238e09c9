# -*- coding: utf-8 -*-
"""
Provenance Tracking - BC-MRV-001: Carbon Accounting

SHA-256 audit trail for carbon estimates and record validations. Every
entry links to its predecessor through ``previous_hash`` so that the
global log forms a tamper-evident chain starting from a fixed genesis
hash. Entries are also indexed per entity (``entity_type:entity_id``).

Example:
    >>> from bluecarbon.carbon_accounting.provenance import ProvenanceTracker
    >>> tracker = ProvenanceTracker()
    >>> h = tracker.record("plot_estimate", "EST-1", "estimate", tracker.build_hash({"co2": 1}))
    >>> valid, chain = tracker.verify_chain("plot_estimate", "EST-1")
    >>> valid, len(chain)
    (True, 1)
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = (
    "entity_type",
    "entity_id",
    "action",
    "data_hash",
    "timestamp",
    "previous_hash",
    "chain_hash",
)


def _utcnow() -> datetime:
    """Return current UTC datetime with microseconds zeroed."""
    return datetime.now(timezone.utc).replace(microsecond=0)


class ProvenanceTracker:
    """In-memory, thread-safe chain of carbon accounting audit entries.

    Attributes:
        GENESIS_HASH: Chain hash that the first entry links to.
    """

    GENESIS_HASH = hashlib.sha256(
        b"bluecarbon-carbon-accounting-genesis"
    ).hexdigest()

    def __init__(self) -> None:
        self._entity_index: Dict[str, List[Dict[str, Any]]] = {}
        self._global_chain: List[Dict[str, Any]] = []
        self._last_chain_hash: str = self.GENESIS_HASH
        self._lock = threading.Lock()
        logger.info("Carbon accounting provenance tracker initialized")

    def record(
        self,
        entity_type: str,
        entity_id: str,
        action: str,
        data_hash: str,
        user_id: str = "system",
    ) -> str:
        """Append an entry for an operation on an entity.

        Args:
            entity_type: Kind of entity (``plot_estimate``, ``record``, ...).
            entity_id: Entity identifier.
            action: Operation performed (``estimate``, ``validate``, ...).
            data_hash: SHA-256 of the operation's output.
            user_id: Actor, ``system`` for service-initiated work.

        Returns:
            Chain hash of the new entry.
        """
        timestamp = _utcnow().isoformat()

        with self._lock:
            previous_hash = self._last_chain_hash
            entry = {
                "entity_type": entity_type,
                "entity_id": entity_id,
                "action": action,
                "data_hash": data_hash,
                "user_id": user_id,
                "timestamp": timestamp,
                "previous_hash": previous_hash,
                "chain_hash": self._link(
                    previous_hash, data_hash, action, timestamp,
                ),
            }
            self._entity_index.setdefault(
                f"{entity_type}:{entity_id}", [],
            ).append(entry)
            self._global_chain.append(entry)
            self._last_chain_hash = entry["chain_hash"]

        logger.debug(
            "Provenance %s/%s action=%s hash=%s",
            entity_type, entity_id, action, entry["chain_hash"][:16],
        )
        return entry["chain_hash"]

    def verify_chain(
        self,
        entity_type: str,
        entity_id: str,
    ) -> Tuple[bool, List[Dict[str, Any]]]:
        """Recompute and check the chain hashes of one entity's entries.

        Returns:
            ``(is_valid, entries)``; an entity with no entries is valid.
        """
        chain = self.get_chain(entity_type, entity_id)
        for entry in chain:
            missing = [f for f in _REQUIRED_FIELDS if f not in entry]
            if missing:
                logger.warning(
                    "Provenance entry for %s/%s missing fields %s",
                    entity_type, entity_id, missing,
                )
                return False, chain
            expected = self._link(
                entry["previous_hash"],
                entry["data_hash"],
                entry["action"],
                entry["timestamp"],
            )
            if expected != entry["chain_hash"]:
                logger.warning(
                    "Provenance hash mismatch for %s/%s at %s",
                    entity_type, entity_id, entry["timestamp"],
                )
                return False, chain
        return True, chain

    def verify_global_chain(self) -> bool:
        """Check that every entry links to its predecessor from genesis."""
        with self._lock:
            chain = list(self._global_chain)

        previous_hash = self.GENESIS_HASH
        for entry in chain:
            if entry.get("previous_hash") != previous_hash:
                return False
            expected = self._link(
                previous_hash,
                entry["data_hash"],
                entry["action"],
                entry["timestamp"],
            )
            if expected != entry["chain_hash"]:
                return False
            previous_hash = expected
        return True

    def get_chain(
        self,
        entity_type: str,
        entity_id: str,
    ) -> List[Dict[str, Any]]:
        """Return an entity's entries, oldest first."""
        with self._lock:
            return list(
                self._entity_index.get(f"{entity_type}:{entity_id}", [])
            )

    def get_global_chain(self, limit: int = 100) -> List[Dict[str, Any]]:
        """Return up to ``limit`` entries across all entities, newest first."""
        with self._lock:
            return list(reversed(self._global_chain[-limit:]))

    @property
    def last_chain_hash(self) -> str:
        with self._lock:
            return self._last_chain_hash

    @property
    def entry_count(self) -> int:
        with self._lock:
            return len(self._global_chain)

    @property
    def entity_count(self) -> int:
        with self._lock:
            return len(self._entity_index)

    def export_json(self) -> str:
        """Serialise the global chain, oldest first, as indented JSON."""
        with self._lock:
            data = list(self._global_chain)
        return json.dumps(data, indent=2, default=str)

    def build_hash(self, data: Any) -> str:
        """SHA-256 over the canonical (sorted-key) JSON form of ``data``."""
        serialized = json.dumps(data, sort_keys=True, default=str)
        return hashlib.sha256(serialized.encode("utf-8")).hexdigest()

    @staticmethod
    def _link(
        previous_hash: str,
        data_hash: str,
        action: str,
        timestamp: str,
    ) -> str:
        combined = json.dumps({
            "previous": previous_hash,
            "data": data_hash,
            "action": action,
            "timestamp": timestamp,
        }, sort_keys=True)
        return hashlib.sha256(combined.encode("utf-8")).hexdigest()


__all__ = [
    "ProvenanceTracker",
]
