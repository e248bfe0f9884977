"""
Infrastructure layer package.

Adapters implementing domain ports: relational and in-memory record
stores, and the minting service client.
"""
