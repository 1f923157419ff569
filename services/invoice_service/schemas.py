from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class InvoiceResult(BaseModel):
    order_id: int
    invoice_number: str
    invoice_url: str
    invoice_generated_at: Optional[datetime] = None
    created: bool
