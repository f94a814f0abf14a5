"""
Shared module package.

Contains cross-cutting concerns used across bounded contexts:
- Error handling and mapping
- Security middleware and rate limiting
- Logging configuration
- Retry policy for outbound calls
"""
