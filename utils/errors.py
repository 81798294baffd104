"""Error taxonomy shared by the store and the services.

NotFoundError is raised by the store for unknown identifiers; the delete and
reconciliation paths absorb it. ValidationError is raised before any store
mutation. Storage failures (sqlite3.Error) are not wrapped.
"""


class LedgerError(Exception):
    """Base class for ledger errors."""


class NotFoundError(LedgerError, LookupError):
    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} {entity_id} not found.")
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(LedgerError, ValueError):
    pass
