"""
Shared module package.

Contains cross-cutting concerns used across bounded contexts:
- Error classification and the error envelope
- Identifier generation
- Security middleware
- Rate limiting
- Logging configuration
"""
