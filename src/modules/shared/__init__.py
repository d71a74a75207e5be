"""
KilluStats Shared Module

Purpose
-------
Provides domain-level foundations for the stats services:
- Domain exceptions and error handling
- Base service and repository patterns
- Identifier validation utilities

Architecture
------------
- BaseService: Foundation for service classes (logging, config access)
- BaseRepository: Type-safe read-only database access patterns
- Domain exceptions: Player-facing errors
- Validators: Identifier classification and UUID dash conventions

Usage
-----
    from src.modules.shared import (
        BaseService,
        BaseRepository,
        PlayerNotFoundError,
        classify_identifier,
    )
"""

from __future__ import annotations

# Base patterns
from .base_repository import BaseRepository
from .base_service import BaseService

# Domain exceptions
from .exceptions import (
    ErrorSeverity,
    KilluDomainException,
    NotFoundError,
    PlayerNotFoundError,
)

# Validators
from .validators import (
    IDENTIFIER_NAME,
    IDENTIFIER_UUID,
    alternate_uuid_form,
    classify_identifier,
    is_uuid_shaped,
    normalize_identifier,
)

__all__ = [
    # Base patterns
    "BaseService",
    "BaseRepository",
    # Exceptions
    "ErrorSeverity",
    "KilluDomainException",
    "NotFoundError",
    "PlayerNotFoundError",
    # Validators
    "IDENTIFIER_UUID",
    "IDENTIFIER_NAME",
    "normalize_identifier",
    "is_uuid_shaped",
    "classify_identifier",
    "alternate_uuid_form",
]
