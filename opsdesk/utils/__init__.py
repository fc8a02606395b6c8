"""
Configuration helpers for opsdesk tasks
"""
from .config_loader import TargetsConfig, load_targets_config
from .settings import MailSettings, OpsSettings, load_environment

__all__ = [
    'TargetsConfig',
    'load_targets_config',
    'MailSettings',
    'OpsSettings',
    'load_environment',
]
