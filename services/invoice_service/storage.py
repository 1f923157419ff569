import asyncio
import re
from pathlib import Path

from shared.config.settings import INVOICE_PUBLIC_BASE_URL, INVOICE_STORAGE_DIR
from shared.errors import NotFound

INVOICE_FILE_PATTERN = re.compile(r"^INV-\d{4}-\d{4,}\.pdf$")


class InvoiceStore:
    """Invoice PDFs on local disk, served back under a public base URL."""

    def __init__(self, directory: str | Path = INVOICE_STORAGE_DIR, public_base_url: str = INVOICE_PUBLIC_BASE_URL):
        self.directory = Path(directory)
        self.public_base_url = public_base_url.rstrip("/")

    def url_for(self, filename: str) -> str:
        return f"{self.public_base_url}/{filename}"

    def path_for(self, filename: str) -> Path:
        if not INVOICE_FILE_PATTERN.match(filename):
            raise NotFound("Invoice not found")
        return self.directory / filename

    async def save(self, filename: str, data: bytes) -> str:
        """Write (or overwrite) the file and return its public URL."""
        path = self.path_for(filename)
        await asyncio.to_thread(self._write, path, data)
        return self.url_for(filename)

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)


def get_invoice_store() -> InvoiceStore:
    return InvoiceStore()
