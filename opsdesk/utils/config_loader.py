"""
Loader for config/ops_targets.yml: the records and endpoints tasks act on.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_TARGETS_PATH = Path(__file__).parent.parent.parent / "config" / "ops_targets.yml"


class ApprovalTargets(BaseModel):
    """Admins to approve; empty means every admin account."""

    admin_emails: List[str] = Field(default_factory=list)


class PackageTargets(BaseModel):
    name: Optional[str] = None
    list_limit: int = Field(default=5, ge=1, le=100)


class QuoteEventTargets(BaseModel):
    quote_id: Optional[str] = None
    events_limit: int = Field(default=2, ge=1, le=20)


class ContractProbeTargets(BaseModel):
    admin_email: Optional[str] = None
    signature_type: str = "checkbox"


class EmailTargets(BaseModel):
    test_recipient: Optional[str] = None
    resend_approval_to: Optional[str] = None


class ApiProbeTargets(BaseModel):
    calculate_path: str = "/api/admin/quotes/calculate-events-price"
    quote_path: str = "/api/admin/quotes/{quote_id}"
    event_ids: List[str] = Field(default_factory=list)
    events_limit: int = Field(default=2, ge=1, le=20)
    number_of_people: int = Field(default=2, ge=1)
    quote_id: Optional[str] = None


class CleanupTargets(BaseModel):
    older_than_days: int = Field(default=7, ge=0)
    public_dir: str = "public"


class TargetsConfig(BaseModel):
    approvals: ApprovalTargets = Field(default_factory=ApprovalTargets)
    package: PackageTargets = Field(default_factory=PackageTargets)
    quote_events: QuoteEventTargets = Field(default_factory=QuoteEventTargets)
    contract_probe: ContractProbeTargets = Field(default_factory=ContractProbeTargets)
    email: EmailTargets = Field(default_factory=EmailTargets)
    api_probe: ApiProbeTargets = Field(default_factory=ApiProbeTargets)
    cleanup: CleanupTargets = Field(default_factory=CleanupTargets)


def load_targets_config(config_path: Optional[Path] = None) -> TargetsConfig:
    """
    Load and validate the targets file.

    Args:
        config_path: Path to the YAML file. Defaults to config/ops_targets.yml

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If the content doesn't match the schema
    """
    if config_path is None:
        config_path = DEFAULT_TARGETS_PATH

    if not config_path.exists():
        raise FileNotFoundError(f"Targets file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    try:
        cfg = TargetsConfig(**data)
        logger.info("Successfully loaded targets from %s", config_path)
        return cfg
    except ValidationError as e:
        logger.error("Targets config validation failed: %s", e)
        raise
