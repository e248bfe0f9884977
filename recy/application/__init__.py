"""
Application layer package.

Use cases coordinate domain entities and ports to fulfill
business operations. Composite writes run as workflows.
"""
