"""Configuration management module for the fairness audit toolkit."""

from .config_parser import (
    AuditConfig,
    ConfigParser,
    DataConfig,
    MatricesConfig,
    ReportConfig,
    ScoreWeights,
    ThresholdsConfig,
)
from .logging_config import setup_logging, get_audit_logger, AuditLogger

__all__ = [
    'AuditConfig',
    'ConfigParser',
    'DataConfig',
    'MatricesConfig',
    'ReportConfig',
    'ScoreWeights',
    'ThresholdsConfig',
    'setup_logging',
    'get_audit_logger',
    'AuditLogger',
]
