"""
Shared error handling package.

Centralizes failure classification and the error envelope so that
every failure is consistently translated into an API response.
"""
