"""
Error handling system for the Network Topology Module.

This module provides the exception hierarchy raised by the topology core,
error context records, and a centralized ErrorHandler that keeps error
statistics and prints user-friendly troubleshooting suggestions.
"""

from typing import Optional, Any, Dict, List
from enum import Enum
from dataclasses import dataclass

from .logger import Logger, get_logger


class ErrorType(Enum):
    """Enumeration for different types of errors."""
    SCHEMA_ERROR = "schema_error"
    CONFIGURATION_ERROR = "configuration_error"
    LISTENER_ERROR = "listener_error"
    FILE_ERROR = "file_error"


class ErrorSeverity(Enum):
    """Enumeration for error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class ErrorContext:
    """
    Context information for error handling.

    Attributes:
        error_type: Type of error that occurred
        severity: Severity level of the error
        operation: Operation that was being performed when error occurred
        component: Component/module where error occurred
        additional_info: Additional context information
    """
    error_type: ErrorType
    severity: ErrorSeverity
    operation: str
    component: str
    additional_info: Dict[str, Any] = None

    def __post_init__(self):
        if self.additional_info is None:
            self.additional_info = {}


class TopologyError(Exception):
    """Base exception class for Network Topology Module."""

    def __init__(self, message: str, error_context: Optional[ErrorContext] = None):
        super().__init__(message)
        self.message = message
        self.error_context = error_context


class InvalidSchemaError(TopologyError):
    """
    Exception for scan records that fail structural validation.

    Attributes:
        path: JSON path of the offending element (e.g. "$[0].mac_data")
        suggestions: Hints on how to fix the input
    """

    def __init__(self, message: str, path: str = "$",
                 suggestions: Optional[List[str]] = None,
                 error_context: Optional[ErrorContext] = None):
        super().__init__(message, error_context)
        self.path = path
        self.suggestions = suggestions or []

    def __str__(self) -> str:
        return f"{self.message} (at {self.path})"


class ConfigurationError(TopologyError):
    """Exception for configuration-related errors."""
    pass


class ErrorHandler:
    """
    Centralized error handling system.

    Keeps per-type error statistics, logs errors at a level matching their
    severity and prints troubleshooting suggestions for the user.
    """

    def __init__(self, logger: Optional[Logger] = None):
        """
        Initialize the ErrorHandler.

        Args:
            logger: Logger instance for error reporting
        """
        self.logger = logger or get_logger(__name__)
        self.error_statistics: Dict[ErrorType, int] = {
            error_type: 0 for error_type in ErrorType
        }

    def handle_error(self, error: Exception, context: ErrorContext) -> bool:
        """
        Handle an error based on its type and context.

        Args:
            error: The exception that occurred
            context: Error context information

        Returns:
            bool: True if the surrounding operation can continue, False otherwise
        """
        self.error_statistics[context.error_type] += 1
        self._log_error(error, context)

        if context.error_type == ErrorType.SCHEMA_ERROR:
            self._suggest_schema_fixes(error, context)
            return False
        elif context.error_type == ErrorType.CONFIGURATION_ERROR:
            self._suggest_configuration_fixes(error, context)
            return False
        elif context.error_type == ErrorType.LISTENER_ERROR:
            # Listeners are advisory; a failing one never stops the pipeline
            return True
        elif context.error_type == ErrorType.FILE_ERROR:
            file_path = context.additional_info.get('file_path', 'unknown')
            self.logger.error(f"File system error with {file_path}")
            self._suggest_file_solutions(error, context)
            return False
        else:
            self.logger.error(f"Unknown error type: {context.error_type}")
            return False

    def get_error_summary(self) -> Dict[str, int]:
        """Return non-zero error counts keyed by error type value."""
        return {
            error_type.value: count
            for error_type, count in self.error_statistics.items()
            if count
        }

    def _log_error(self, error: Exception, context: ErrorContext) -> None:
        """
        Log error information with appropriate detail level.

        Args:
            error: The exception that occurred
            context: Error context information
        """
        error_msg = f"Error in {context.component}.{context.operation}: {str(error)}"

        if context.severity == ErrorSeverity.CRITICAL:
            self.logger.error(error_msg, exception=error)
        elif context.severity == ErrorSeverity.HIGH:
            self.logger.error(error_msg)
        elif context.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(error_msg)
        else:
            self.logger.debug(error_msg)

    def _suggest_schema_fixes(self, error: Exception, context: ErrorContext) -> None:
        """Provide scan record schema suggestions."""
        self.logger.info("Scan record format suggestions:")
        for suggestion in getattr(error, 'suggestions', []):
            self.logger.info(f"  • {suggestion}")
        self.logger.info('  • Expected layout: [{"mac_data": [{"<category>": [<device>, ...]}]}]')
        self.logger.info("  • Each device needs at least a MAC field")

    def _suggest_configuration_fixes(self, error: Exception, context: ErrorContext) -> None:
        """Provide configuration error solutions."""
        config_file = context.additional_info.get('config_file', 'unknown')
        self.logger.info(f"Configuration error solutions for {config_file}:")
        self.logger.info("  • Check YAML syntax and indentation")
        self.logger.info("  • Keyword and allowlist entries must be lists of strings")
        self.logger.info("  • Private networks must be valid CIDR blocks")
        self.logger.info("  • Use ConfigLoader.create_default_configs() as reference")

    def _suggest_file_solutions(self, error: Exception, context: ErrorContext) -> None:
        """Provide file system error solutions."""
        self.logger.info("File system error solutions:")
        self.logger.info("  • Check that the scan file exists and is readable")
        self.logger.info("  • Verify the file contains valid JSON")
        self.logger.info("  • Check output directory permissions")
