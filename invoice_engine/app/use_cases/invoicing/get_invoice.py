"""GetInvoice Use Case"""

from libs.result import Result, Return
from invoice_engine.app.repositories.invoice_repository import InvoiceRepository
from .base import to_response_dto
from .dtos import InvoiceResponseDTO
from .errors import not_found


class GetInvoice:
    """
    Use Case: Read a generated invoice with its line items

    Invoices of another law firm are reported as not found.
    """

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(self, law_firm_id: str, invoice_id: str) -> Result[InvoiceResponseDTO]:
        invoice = await self.invoice_repo.get_by_id(invoice_id)

        if not invoice or invoice.law_firm_id != law_firm_id:
            return Return.err(not_found("invoice", invoice_id))

        lines = await self.invoice_repo.get_lines(invoice.id)
        return Return.ok(to_response_dto(invoice, lines))
