from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from shared.errors import NotFound

from .models import Product
from .repository import ProductRepository
from .schemas import ProductCreate

logger = structlog.get_logger(__name__)


def matches_query(product: Product, query: str) -> bool:
    """A product matches when any query word is a word of its name."""
    query_words = set(query.lower().split())
    name_words = set(product.name.lower().split())
    return bool(query_words & name_words)


class ProductService:

    @staticmethod
    async def create_product(db: AsyncSession, data: ProductCreate):
        product = await ProductRepository.create_product(db, Product(**data.model_dump()))
        logger.info("product_created", product_id=product.id)
        return product

    @staticmethod
    async def list_products(db: AsyncSession, category: Optional[str] = None, query: Optional[str] = None):
        products = await ProductRepository.get_all_products(db, category)
        if query:
            products = [p for p in products if matches_query(p, query)]
        return products

    @staticmethod
    async def get_product(db: AsyncSession, product_id: int):
        product = await ProductRepository.get_product_by_id(db, product_id)
        if not product:
            raise NotFound("Product not found")
        return product

    @staticmethod
    async def update_product(db: AsyncSession, product_id: int, data: ProductCreate):
        product = await ProductService.get_product(db, product_id)
        for field, value in data.model_dump().items():
            setattr(product, field, value)
        product = await ProductRepository.update_product(db, product)
        logger.info("product_updated", product_id=product.id, in_stock=product.in_stock)
        return product
