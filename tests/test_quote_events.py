from bson import ObjectId

from opsdesk.maintenance import quote_events


def _seed(db):
    quote_id = db.seed("quotes", [{"leadName": "Smith stag", "selectedEvents": []}])[0]
    db.seed(
        "events",
        [
            {"name": "Boat party", "isActive": True, "pricing": {"estimatedCost": 45, "currency": "EUR"}},
            {"name": "Go karting", "isActive": True},
            {"name": "Archived", "isActive": False},
            {"name": "Zorbing", "isActive": True},
        ],
    )
    return quote_id


def test_adds_first_active_events(db, capsys):
    quote_id = _seed(db)
    assert quote_events.run(db, str(quote_id), events_limit=2) == 0

    stored = db["quotes"].find_one({"_id": quote_id})
    names = [e["eventName"] for e in stored["selectedEvents"]]
    assert names == ["Boat party", "Go karting"]
    boat = stored["selectedEvents"][0]
    assert boat["eventPrice"] == 45
    assert boat["eventCurrency"] == "EUR"
    assert stored["selectedEvents"][1]["eventPrice"] == 0
    assert stored["selectedEvents"][1]["eventCurrency"] == "GBP"
    assert "updatedAt" in stored
    out = capsys.readouterr().out
    assert "Matched: 1" in out
    assert "Modified: 1" in out


def test_rerun_skips_events_already_on_quote(db):
    quote_id = _seed(db)
    events = quote_events.active_events(db, 2)
    quote_events.add_events_to_quote(db, str(quote_id), events)

    outcome = quote_events.add_events_to_quote(db, str(quote_id), events)

    assert (outcome.matched, outcome.modified) == (1, 0)
    assert len(db["quotes"].find_one({"_id": quote_id})["selectedEvents"]) == 2


def test_nonexistent_quote_reports_zero_counts(db, capsys):
    _seed(db)
    missing = str(ObjectId())
    assert quote_events.run(db, missing) == 0
    out = capsys.readouterr().out
    assert f"Quote {missing} not found" in out
    assert "Matched: 0" in out
    assert "Modified: 0" in out


def test_malformed_quote_id_gives_zero_counts(db):
    outcome = quote_events.add_events_to_quote(db, "not-an-object-id", [])
    assert (outcome.matched, outcome.modified) == (0, 0)


def test_missing_quote_id_is_an_error(db):
    assert quote_events.run(db, None) == 1


def test_no_active_events(db, capsys):
    quote_id = db.seed("quotes", [{"leadName": "Jones"}])[0]
    assert quote_events.run(db, str(quote_id)) == 0
    assert "No active events found" in capsys.readouterr().out
