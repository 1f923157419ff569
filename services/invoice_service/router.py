from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.errors import NotFound
from shared.security import require_admin

from .schemas import InvoiceResult
from .service import InvoiceService
from .storage import InvoiceStore, get_invoice_store

router = APIRouter(dependencies=[Depends(require_admin)])
public_router = APIRouter()

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "invoice", "status": "running"}


@public_router.get("/files/{filename}", include_in_schema=False)
async def invoice_file(filename: str, store: InvoiceStore = Depends(get_invoice_store)):
    path = store.path_for(filename)
    if not path.is_file():
        raise NotFound("Invoice not found")
    return FileResponse(path, media_type="application/pdf", filename=filename)


@router.post("/orders/{order_id}", response_model=InvoiceResult)
async def generate_invoice(
    order_id: int,
    store: InvoiceStore = Depends(get_invoice_store),
    db: AsyncSession = Depends(get_db),
):
    return await InvoiceService.request_gst_invoice(db, store, order_id)
