"""
Persisted record sets and the upload merge policy.

MERGE RULES (easy to misread, keep them exactly):

1. Inside one uploaded batch, sales rows sharing (product_id, date) are
   SUMMED. A single export may split one day's sales over several rows.
2. Across batches, a key already in the persisted set is REPLACED by the new
   value, never added to. Re-uploading a corrected file for a date already
   seen is idempotent, not cumulative.

Master records merge per barcode as a field-level overwrite: fields the new
upload resolved replace the stored ones, the rest are kept.
"""

import logging
import threading
from typing import Dict, Iterable, List, Tuple

from coupang_insights.models.store import KeyValueStore
from coupang_insights.schemas import (
    SalesRecord, ProductMaster, InboundRecord, MergeSummary
)

logger = logging.getLogger(__name__)

SALES_KEY = "sales_records"
MASTER_KEY = "product_master"
INBOUND_KEY = "inbound_records"


def sales_key(record: SalesRecord) -> str:
    return f"{record.product_id}_{record.date}"


def aggregate_batch(batch: Iterable[SalesRecord]) -> Dict[str, SalesRecord]:
    """
    Collapse rows of one upload sharing a key by summing quantities.
    Descriptive fields come from the last row seen.
    """
    merged: Dict[str, SalesRecord] = {}
    for record in batch:
        key = sales_key(record)
        existing = merged.get(key)
        if existing is None:
            merged[key] = record.model_copy()
        else:
            merged[key] = record.model_copy(update={
                "sales_qty": existing.sales_qty + record.sales_qty,
                "inventory_qty": existing.inventory_qty + record.inventory_qty,
            })
    return merged


def merge_sales_records(
    existing: Iterable[SalesRecord],
    batch: Iterable[SalesRecord]
) -> Tuple[List[SalesRecord], MergeSummary]:
    """
    Merge a new batch into the persisted set (overwrite on key collision).
    Returns the date-sorted result and added/updated counts.
    """
    current: Dict[str, SalesRecord] = {sales_key(r): r for r in existing}

    added = 0
    updated = 0
    for key, record in aggregate_batch(batch).items():
        if key in current:
            updated += 1
        else:
            added += 1
        current[key] = record

    merged = sorted(current.values(), key=lambda r: r.date)
    return merged, MergeSummary(added=added, updated=updated, total=len(merged))


def merge_master_records(
    existing: Iterable[ProductMaster],
    batch: Iterable[ProductMaster]
) -> Tuple[List[ProductMaster], MergeSummary]:
    """Merge master entries by trimmed barcode with field-level overwrite."""
    current: Dict[str, ProductMaster] = {m.barcode.strip(): m for m in existing}

    added = 0
    updated = 0
    for product in batch:
        key = product.barcode.strip()
        previous = current.get(key)
        if previous is None:
            current[key] = product
            added += 1
        else:
            current[key] = previous.model_copy(update=product.model_dump(exclude_unset=True))
            updated += 1

    merged = list(current.values())
    return merged, MergeSummary(added=added, updated=updated, total=len(merged))


class RecordRepository:
    """
    Owns the persisted record sets.

    Every read-modify-write runs under one lock so concurrent uploads cannot
    lose each other's merge. Readers see either the old or the new set,
    never a partial merge.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store
        self._lock = threading.Lock()

    # ============== Loading ==============

    def load_sales(self) -> List[SalesRecord]:
        return [SalesRecord.model_validate(r) for r in self.store.get(SALES_KEY) or []]

    def load_master(self) -> List[ProductMaster]:
        return [ProductMaster.model_validate(r) for r in self.store.get(MASTER_KEY) or []]

    def load_inbound(self) -> List[InboundRecord]:
        return [InboundRecord.model_validate(r) for r in self.store.get(INBOUND_KEY) or []]

    # ============== Writing ==============

    def merge_sales(self, batch: List[SalesRecord]) -> MergeSummary:
        with self._lock:
            merged, summary = merge_sales_records(self.load_sales(), batch)
            self.store.set(SALES_KEY, [r.model_dump(mode="json") for r in merged])
        logger.info(
            f"Merged sales: {summary.added} added, {summary.updated} updated "
            f"(overwrite strategy), {summary.total} total"
        )
        return summary

    def merge_master(self, batch: List[ProductMaster]) -> MergeSummary:
        with self._lock:
            merged, summary = merge_master_records(self.load_master(), batch)
            self.store.set(MASTER_KEY, [m.model_dump(mode="json") for m in merged])
        logger.info(f"Merged product master: {summary.added} added, {summary.updated} updated")
        return summary

    def replace_inbound(self, batch: List[InboundRecord]) -> MergeSummary:
        """An inbound upload is a full snapshot of scheduled supply."""
        with self._lock:
            self.store.set(INBOUND_KEY, [r.model_dump(mode="json") for r in batch])
        logger.info(f"Replaced inbound schedule with {len(batch)} records")
        return MergeSummary(added=len(batch), updated=0, total=len(batch))

    # ============== Clearing ==============

    def clear_sales(self) -> None:
        with self._lock:
            self.store.delete(SALES_KEY)
        logger.info("Cleared all sales records")

    def clear_master(self) -> None:
        with self._lock:
            self.store.delete(MASTER_KEY)
        logger.info("Cleared product master")

    def clear_inbound(self) -> None:
        with self._lock:
            self.store.delete(INBOUND_KEY)
        logger.info("Cleared inbound schedule")
