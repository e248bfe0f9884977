"""HTTP interface for the audit bounded context."""
