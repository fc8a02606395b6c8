from datetime import datetime, timezone

from opsdesk.maintenance import packages


def _seed(db):
    return db.seed(
        "super_offer_packages",
        [
            {
                "name": "Benidorm Super Package",
                "destination": "Benidorm",
                "resort": "Costa Blanca",
                "status": "active",
                "createdAt": datetime(2025, 3, 1, tzinfo=timezone.utc),
            },
            {
                "name": "Albufeira Super Package",
                "destination": "Albufeira",
                "status": "inactive",
                "createdAt": datetime(2025, 4, 1, tzinfo=timezone.utc),
            },
        ],
    )


def test_named_package_details_are_printed(db, capsys):
    ids = _seed(db)
    assert packages.run(db, name="Benidorm Super Package") == 0
    out = capsys.readouterr().out
    assert "Total packages in super_offer_packages: 2" in out
    assert f"ID: {ids[0]}" in out
    assert "Destination: Benidorm" in out
    assert "Status: active" in out


def test_lookup_falls_back_to_case_insensitive_match(db):
    _seed(db)
    assert packages.find_package(db, "benidorm super package").destination == "Benidorm"
    assert packages.find_package(db, "Benidorm") is None


def test_listing_is_newest_first_and_limited(db, capsys):
    _seed(db)
    packages.run(db, list_limit=1)
    out = capsys.readouterr().out
    assert "First 1 package(s):" in out
    assert "Albufeira Super Package" in out
    assert "| Benidorm Super Package |" not in out


def test_unknown_name_is_reported(db, capsys):
    _seed(db)
    packages.run(db, name="Magaluf")
    assert 'No package named "Magaluf"' in capsys.readouterr().out
