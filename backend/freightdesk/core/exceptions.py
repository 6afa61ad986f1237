"""Domain exceptions for the freight invoice dashboard."""


class FreightDeskError(Exception):
    """Base exception for all dashboard errors."""
    pass


class NotFoundError(FreightDeskError):
    """Raised when an invoice, truck or vendor does not exist at lookup time.

    Read paths return None or an empty list instead of raising; write paths
    targeting a specific record raise this.
    """

    def __init__(self, entity_type: str, key: str):
        self.entity_type = entity_type
        self.key = key
        super().__init__(f"{entity_type.capitalize()} '{key}' not found")


class PersistenceError(FreightDeskError):
    """Raised when a write to the record store fails."""
    pass
