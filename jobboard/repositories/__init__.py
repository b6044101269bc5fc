"""
Repositories for companies and jobs.

Responsibilities:
- CRUD operations for the companies and jobs tables.
- Translate "no matching row" into NotFoundError.

Non-Responsibilities:
- No transaction or connection management.
- No request validation beyond update field names.

Invariant:
Every operation takes the Store explicitly and holds no state between calls.
"""
