"""Domain exceptions raised by persistence adapters"""


class DuplicateInvoiceError(Exception):
    """
    Raised when inserting an invoice violates a uniqueness constraint

    The database constraint is the correctness backstop for the duplicate
    guard: two concurrent generators can both pass the read-side check, but
    only one insert survives.
    """

    def __init__(self, message: str = "Invoice already exists for this billing key"):
        super().__init__(message)
        self.message = message
