#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""
Settings Panel - Consolidated Exception Classes

All exception classes used by the panel live here so that the engine,
the codec and the plugin registry raise and catch the same types.
"""

from datetime import datetime
from typing import Dict, Any, Optional


class BaseError(Exception):
    """Base class for all project-specific errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code or "ERROR"
        self.details = details or {}
        self.timestamp = datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        """Converts the exception to a dictionary for structured logging."""
        return {
            'error_code': self.error_code,
            'message': str(self),
            'details': self.details,
            'timestamp': self.timestamp.isoformat()
        }


# =====================================================================================================
# Configuration-related errors
# =====================================================================================================

class ConfigurationError(BaseError):
    """Base class for configuration errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 file_path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        config_details = details or {}
        if file_path:
            config_details['file_path'] = file_path
        super().__init__(message, error_code or "CONFIG_ERROR", config_details)


class ValidationError(ConfigurationError):
    """Raised when panel preferences fail validation."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 expected_type: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        validation_details = details or {}
        if field_name:
            validation_details['field_name'] = field_name
        if expected_type:
            validation_details['expected_type'] = expected_type
        super().__init__(message, "VALIDATION_ERROR", None, validation_details)


# =====================================================================================================
# IO and data-related errors
# =====================================================================================================

class DataError(BaseError):
    """Base class for data-related errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code or "DATA_ERROR", details)


class FileOperationError(DataError):
    """Raised when reading or writing the export artifact fails."""

    def __init__(self, message: str, file_path: Optional[str] = None,
                 operation: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        file_details = details or {}
        if file_path:
            file_details['file_path'] = str(file_path)
        if operation:
            file_details['operation'] = operation
        super().__init__(message, "FILE_OP_ERROR", file_details)


class ConversionError(DataError):
    """Raised when a stored string cannot be converted to a setting value."""

    def __init__(self, message: str, type_name: Optional[str] = None,
                 raw_value: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        conv_details = details or {}
        if type_name:
            conv_details['type_name'] = type_name
        if raw_value is not None:
            conv_details['raw_value'] = raw_value
        super().__init__(message, "CONVERSION_ERROR", conv_details)


# =====================================================================================================
# Setting and discovery errors
# =====================================================================================================

class SettingError(BaseError):
    """Base class for errors raised by a single setting entry."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 setting_key: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        setting_details = details or {}
        if setting_key:
            setting_details['setting_key'] = setting_key
        super().__init__(message, error_code or "SETTING_ERROR", setting_details)


class ReadOnlySettingError(SettingError):
    """Raised when a value is written to a read-only setting."""

    def __init__(self, message: str, setting_key: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "READ_ONLY_SETTING", setting_key, details)


class DiscoveryError(BaseError):
    """Raised when a plugin manifest or register hook is malformed."""

    def __init__(self, message: str, plugin_path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        discovery_details = details or {}
        if plugin_path:
            discovery_details['plugin_path'] = str(plugin_path)
        super().__init__(message, "DISCOVERY_ERROR", discovery_details)


# =====================================================================================================
# Rendering errors
# =====================================================================================================

class RenderError(BaseError):
    """Base class for errors during panel rendering."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 module_id: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        render_details = details or {}
        if module_id:
            render_details['module_id'] = module_id
        super().__init__(message, error_code or "RENDER_ERROR", render_details)


class LayoutMismatchError(RenderError):
    """Raised by a surface when nested layout groups are unbalanced mid-frame."""

    def __init__(self, message: str, module_id: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "LAYOUT_MISMATCH", module_id, details)


class ReentrancyError(RenderError):
    """Raised when a rebuild and a render pass would interleave."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        reentrancy_details = details or {}
        if operation:
            reentrancy_details['operation'] = operation
        super().__init__(message, "REENTRANT_CALL", None, reentrancy_details)
