"""
Audit bounded context: domain layer.

Audits of recycling reports, the record store contract they rely on,
and the minting service contract.
"""
