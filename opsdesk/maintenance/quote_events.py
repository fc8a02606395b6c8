"""
Attach active events to a quote as `selectedEvents` sub-records.

Events already on the quote (same eventId) are skipped, so re-running only
adds what is missing.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from opsdesk.database.models import Event, Quote, SelectedEvent
from opsdesk.database.repository import Repository, UpdateOutcome, to_object_id

logger = logging.getLogger(__name__)


def active_events(db: Any, limit: int) -> List[Event]:
    return Repository(db, Event).find({"isActive": True}, limit=limit, sort=[("name", 1)])


def add_events_to_quote(db: Any, quote_id: str, events: List[Event]) -> UpdateOutcome:
    quotes = Repository(db, Quote)
    oid = to_object_id(quote_id)
    if oid is None:
        return UpdateOutcome(matched=0, modified=0)

    quote = quotes.find_one({"_id": oid})
    existing = {str(e.event_id) for e in quote.selected_events} if quote else set()
    new = [SelectedEvent.from_event(e) for e in events if str(e.object_id) not in existing]
    payload = [s.model_dump(by_alias=True) for s in new]

    if quote is not None and not payload:
        return UpdateOutcome(matched=1, modified=0)
    # A missing quote still goes through the store so the counts come from it
    return quotes.update_one(
        {"_id": oid},
        {
            "$push": {"selectedEvents": {"$each": payload}},
            "$set": {"updatedAt": datetime.now(timezone.utc)},
        },
    )


def run(db: Any, quote_id: Optional[str], events_limit: int = 2) -> int:
    if not quote_id:
        print("❌ No quote id given (use --quote-id or quote_events.quote_id in config/ops_targets.yml)")
        return 1

    quote = Repository(db, Quote).get(quote_id)
    if quote is None:
        print(f"⚠️  Quote {quote_id} not found")
        outcome = add_events_to_quote(db, quote_id, [])
        print(f"Matched: {outcome.matched}")
        print(f"Modified: {outcome.modified}")
        return 0

    print(f"✅ Found quote {quote.object_id} for {quote.lead_name or '(no lead name)'}")
    print(f"  Existing selected events: {len(quote.selected_events)}")

    events = active_events(db, events_limit)
    if not events:
        print("⚠️  No active events found. Create some events first.")
        return 0
    print(f"✅ Found {len(events)} active event(s):")
    for i, e in enumerate(events, start=1):
        print(f"  {i}. {e.name} - {e.currency} {e.price:g}")
    print()

    outcome = add_events_to_quote(db, quote_id, events)
    print(f"Matched: {outcome.matched}")
    print(f"Modified: {outcome.modified}")

    updated = Repository(db, Quote).get(quote_id)
    if updated:
        print(f"Selected events now on quote: {len(updated.selected_events)}")
        for s in updated.selected_events:
            print(f"  - {s.event_name}: {s.event_currency} {s.event_price:g} (added {s.added_at.isoformat()})")
    return 0
