"""Error types and diagnostics collection for the annotation pipeline."""

import json
import logging
import time
import traceback
from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class MalformedHeaderError(ValueError):
    """Raised when an Ensembl header does not follow the positional field layout."""

    def __init__(self, field_index: int, expected: str, found: str):
        self.field_index = field_index
        self.expected = expected
        self.found = found
        super().__init__(
            f"Malformed header field {field_index}: expected '{expected}', found '{found}'"
        )


class InvalidMotifPatternError(ValueError):
    """Raised when a PROSITE pattern cannot be compiled."""

    def __init__(self, pattern: str, reason: str, motif_id: Optional[str] = None):
        self.pattern = pattern
        self.reason = reason
        self.motif_id = motif_id
        label = f"motif {motif_id}" if motif_id else "motif"
        super().__init__(f"Invalid pattern for {label} '{pattern}': {reason}")


class SequenceAlphabetError(ValueError):
    """Raised when a nucleotide sequence contains characters outside ACGT."""

    def __init__(self, invalid_characters: Sequence[str], position: int):
        self.invalid_characters = tuple(sorted(set(invalid_characters)))
        self.position = position
        super().__init__(
            f"Sequence contains characters outside the ACGT alphabet "
            f"({', '.join(self.invalid_characters)}), first at position {position + 1}"
        )


class ErrorType(Enum):
    """Types of errors that can occur."""
    MALFORMED_HEADER = "malformed_header"
    INVALID_MOTIF_PATTERN = "invalid_motif_pattern"
    SEQUENCE_ALPHABET = "sequence_alphabet"
    DUPLICATE_TRANSCRIPT = "duplicate_transcript"
    FILE_IO_ERROR = "file_io_error"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass
class ErrorContext:
    """Context information for an error."""
    error_type: ErrorType
    severity: ErrorSeverity
    message: str
    timestamp: float
    operation: str
    item_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    traceback: Optional[str] = None
    suggestion: Optional[str] = None


SUGGESTIONS = {
    ErrorType.MALFORMED_HEADER: "Header does not follow the Ensembl cDNA layout. Transcript skipped.",
    ErrorType.INVALID_MOTIF_PATTERN: "Check the motif catalog file; scanning cannot start.",
    ErrorType.SEQUENCE_ALPHABET: "Non-ACGT characters never match start or stop codons.",
    ErrorType.DUPLICATE_TRANSCRIPT: "Transcript seen twice for the same gene; first record kept.",
    ErrorType.FILE_IO_ERROR: "Check that the input files exist and are readable.",
}


def _format_traceback(error: Exception) -> str:
    return "".join(traceback.format_exception(type(error), error, error.__traceback__))


class ErrorHandler:
    """Collects per-item diagnostics so a batch can continue past bad records."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.error_history: List[ErrorContext] = []

    def handle_error(self,
                     error: Exception,
                     operation: str,
                     item_id: Optional[str] = None,
                     severity: Optional[ErrorSeverity] = None,
                     **kwargs) -> ErrorContext:
        """
        Record an error and log it.

        Args:
            error: The exception that occurred
            operation: The operation being performed
            item_id: Optional item identifier
            severity: Override the severity derived from the error type
            **kwargs: Additional context data

        Returns:
            ErrorContext with error details and suggestion
        """
        error_type = self._classify_error(error)
        if severity is None:
            severity = self._determine_severity(error_type)

        context = ErrorContext(
            error_type=error_type,
            severity=severity,
            message=str(error),
            timestamp=time.time(),
            operation=operation,
            item_id=item_id,
            details=kwargs or None,
            traceback=_format_traceback(error) if error_type == ErrorType.UNKNOWN else None,
            suggestion=SUGGESTIONS.get(error_type),
        )

        self._log_error(context)
        self.error_history.append(context)
        return context

    def record_warning(self, error_type: ErrorType, message: str, operation: str,
                       item_id: Optional[str] = None, **kwargs) -> ErrorContext:
        """Record a non-fatal diagnostic that did not come from an exception."""
        context = ErrorContext(
            error_type=error_type,
            severity=ErrorSeverity.WARNING,
            message=message,
            timestamp=time.time(),
            operation=operation,
            item_id=item_id,
            details=kwargs or None,
            suggestion=SUGGESTIONS.get(error_type),
        )
        self._log_error(context)
        self.error_history.append(context)
        return context

    def _classify_error(self, error: Exception) -> ErrorType:
        """Classify the error type based on exception."""
        if isinstance(error, MalformedHeaderError):
            return ErrorType.MALFORMED_HEADER
        if isinstance(error, InvalidMotifPatternError):
            return ErrorType.INVALID_MOTIF_PATTERN
        if isinstance(error, SequenceAlphabetError):
            return ErrorType.SEQUENCE_ALPHABET
        if isinstance(error, (FileNotFoundError, PermissionError, IOError)):
            return ErrorType.FILE_IO_ERROR
        return ErrorType.UNKNOWN

    def _determine_severity(self, error_type: ErrorType) -> ErrorSeverity:
        if error_type == ErrorType.INVALID_MOTIF_PATTERN:
            return ErrorSeverity.CRITICAL
        if error_type == ErrorType.DUPLICATE_TRANSCRIPT:
            return ErrorSeverity.WARNING
        return ErrorSeverity.ERROR

    def _log_error(self, context: ErrorContext):
        """Log error with appropriate level and details."""
        log_message = f"{context.operation} - {context.error_type.value}: {context.message}"

        if context.item_id:
            log_message += f" (item: {context.item_id})"

        if context.severity == ErrorSeverity.INFO:
            self.logger.info(log_message)
        elif context.severity == ErrorSeverity.WARNING:
            self.logger.warning(log_message)
        elif context.severity == ErrorSeverity.ERROR:
            self.logger.error(log_message)
        else:
            self.logger.critical(log_message)

        if context.traceback:
            self.logger.debug(f"Traceback:\n{context.traceback}")

    @property
    def has_errors(self) -> bool:
        return any(
            e.severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL)
            for e in self.error_history
        )

    def get_error_summary(self) -> Dict[str, Any]:
        """Get summary of errors for reporting."""
        by_type: Dict[str, int] = {}
        by_severity: Dict[str, int] = {}
        for error in self.error_history:
            by_type[error.error_type.value] = by_type.get(error.error_type.value, 0) + 1
            by_severity[error.severity.value] = by_severity.get(error.severity.value, 0) + 1

        recent_errors = [
            {
                'type': error.error_type.value,
                'severity': error.severity.value,
                'message': error.message,
                'operation': error.operation,
                'item_id': error.item_id,
                'timestamp': datetime.fromtimestamp(error.timestamp).isoformat(),
            }
            for error in self.error_history[-5:]
        ]

        return {
            'total_errors': len(self.error_history),
            'by_type': by_type,
            'by_severity': by_severity,
            'recent_errors': recent_errors
        }

    def export_error_report(self, output_file: str):
        """Export detailed error report as JSON."""
        report = {
            'generated_at': datetime.now().isoformat(),
            'summary': self.get_error_summary(),
            'detailed_errors': []
        }

        for error in self.error_history:
            error_dict = asdict(error)
            error_dict['error_type'] = error.error_type.value
            error_dict['severity'] = error.severity.value
            error_dict['timestamp'] = datetime.fromtimestamp(error.timestamp).isoformat()
            report['detailed_errors'].append(error_dict)

        with open(output_file, 'w') as f:
            json.dump(report, f, indent=2)

        self.logger.info(f"Error report exported to {output_file}")
