"""Unified provider error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``lingyi_providers.base.errors_parts`` to keep a single stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.classification import classify_exception, code_for_status

__all__ = ["ErrorCode", "ProviderError", "classify_exception", "code_for_status"]
