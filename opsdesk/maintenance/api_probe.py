"""
Probe the quote pricing endpoints of the running application.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, List, Optional

from opsdesk.integrations.app_api import ApiResponse, AppApiClient
from opsdesk.maintenance.quote_events import active_events
from opsdesk.utils.config_loader import ApiProbeTargets

logger = logging.getLogger(__name__)


def _print_response(label: str, response: ApiResponse) -> None:
    marker = "✅" if response.ok else "❌"
    print(f"   {marker} {label}: HTTP {response.status}")
    body = json.dumps(response.body, indent=2, default=str)
    for line in body.splitlines()[:40]:
        print(f"      {line}")
    if not response.ok and response.error_message:
        print(f"   error: {response.error_message}")


def active_event_ids(db: Any, limit: int) -> List[str]:
    return [str(e.object_id) for e in active_events(db, limit)]


def calculate_events_price(client: AppApiClient, targets: ApiProbeTargets, event_ids: List[str]) -> ApiResponse:
    return client.post(
        targets.calculate_path,
        {"eventIds": event_ids, "numberOfPeople": targets.number_of_people},
    )


def run(
    client: AppApiClient,
    targets: ApiProbeTargets,
    event_ids: Optional[List[str]] = None,
    event_lookup: Optional[Callable[[], List[str]]] = None,
) -> int:
    """
    Price `event_ids` (else the targets file ids). With neither, `event_lookup`
    supplies ids, normally the first active events in the store.
    """
    ids = list(event_ids or targets.event_ids)
    if not ids and event_lookup is not None:
        ids = list(event_lookup())
        print(f"Using {len(ids)} active event(s) from the database")
    if not ids:
        print("⚠️  No event ids given and no active events found; pricing an empty selection")
    failed = False

    print(f"Base URL: {client.base_url}\n")
    print(f"1) POST {targets.calculate_path} (eventIds={ids})")
    response = calculate_events_price(client, targets, ids)
    _print_response("calculate-events-price", response)
    failed |= not response.ok
    print()

    if targets.quote_id:
        path = targets.quote_path.format(quote_id=targets.quote_id)
        print(f"2) GET {path}")
        response = client.get(path)
        _print_response("quote", response)
        failed |= not response.ok
        if response.ok and isinstance(response.body, dict):
            data = response.body.get("data", response.body)
            quote = data.get("quote", data) if isinstance(data, dict) else {}
            events = quote.get("selectedEvents", []) if isinstance(quote, dict) else []
            print(f"   selectedEvents: {len(events)}")
        print()

    print("=== API probe completed" + (" with errors ===" if failed else " ==="))
    return 1 if failed else 0
