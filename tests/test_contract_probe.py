import pytest
from bson import ObjectId
from pydantic import ValidationError

from opsdesk.database.models import ContractTemplate
from opsdesk.maintenance import contract_probe


def _seed_admin(db):
    return db.seed("users", [{"name": "Ops", "contactEmail": "ops@example.org", "role": "admin", "isApproved": True}])[0]


def test_probe_saves_reads_back_and_cleans_up(db, capsys):
    _seed_admin(db)
    assert contract_probe.run(db) == 0

    assert db["contracttemplates"].count_documents({}) == 0
    assert db["contractsignatures"].count_documents({}) == 0
    out = capsys.readouterr().out
    assert "ContractTemplate" in out and "read back" in out
    assert "Contract records save and load correctly" in out


def test_validation_failure_still_cleans_up(db, capsys):
    _seed_admin(db)
    assert contract_probe.run(db, signature_type="typed") == 1

    assert db["contracttemplates"].count_documents({}) == 0
    out = capsys.readouterr().out
    assert "failed schema validation" in out
    assert "signatureType" in out or "signature_type" in out


def test_write_failure_propagates_after_cleanup(db):
    _seed_admin(db)
    db["contractsignatures"].fail_on["insert_one"] = RuntimeError("not authorized")
    with pytest.raises(RuntimeError):
        contract_probe.run(db)
    assert db["contracttemplates"].count_documents({}) == 0


def test_no_admin_is_not_an_error(db, capsys):
    assert contract_probe.run(db) == 0
    assert "No admin user found" in capsys.readouterr().out


def test_template_constraints():
    admin_id = ObjectId()
    ok = ContractTemplate(version="v1.0", title="Agency terms", content="x" * 100, created_by=admin_id)
    assert ok.is_active is False
    with pytest.raises(ValidationError):
        ContractTemplate(version="1.0", title="Short title", content="x" * 100, created_by=admin_id)
    with pytest.raises(ValidationError):
        ContractTemplate(version="v1.0", title="Tiny", content="x" * 100, created_by=admin_id)
