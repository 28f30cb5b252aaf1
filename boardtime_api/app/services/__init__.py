"""
Service layer abstraction.

Each service encapsulates business logic for a domain: meetings, the
vote ledger, tallies and the audit trail.  API handlers only translate
between HTTP and these services.
"""
