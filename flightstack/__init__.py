"""
flightstack.

- backend/: Proxy relay (FastAPI), configuration, logging, upstream client
- cli/: Query dispatcher and report rendering for cli.py
"""
