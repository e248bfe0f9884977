"""
Infrastructure adapters for the audit bounded context.
"""
