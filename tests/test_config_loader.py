import pytest
from pydantic import ValidationError

from opsdesk.utils.config_loader import DEFAULT_TARGETS_PATH, load_targets_config


def test_default_targets_file_loads():
    cfg = load_targets_config()
    assert DEFAULT_TARGETS_PATH.exists()
    assert cfg.package.name == "Benidorm Super Package"
    assert cfg.api_probe.calculate_path == "/api/admin/quotes/calculate-events-price"
    assert cfg.cleanup.older_than_days == 7
    assert cfg.approvals.admin_emails == []


def test_partial_file_uses_defaults(tmp_path):
    path = tmp_path / "targets.yml"
    path.write_text("quote_events:\n  quote_id: 665f1c2e8b3a4d0012345678\n")
    cfg = load_targets_config(path)
    assert cfg.quote_events.quote_id == "665f1c2e8b3a4d0012345678"
    assert cfg.quote_events.events_limit == 2
    assert cfg.contract_probe.signature_type == "checkbox"


def test_empty_file_is_all_defaults(tmp_path):
    path = tmp_path / "targets.yml"
    path.write_text("")
    assert load_targets_config(path).package.list_limit == 5


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_targets_config(tmp_path / "nope.yml")


def test_invalid_values_raise_validation_error(tmp_path):
    path = tmp_path / "targets.yml"
    path.write_text("package:\n  list_limit: 0\n")
    with pytest.raises(ValidationError):
        load_targets_config(path)
