"""
Product routes for the API.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pymongo import ASCENDING, DESCENDING
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from api.config import COLLECTION_NAME
from api.models import Product, ProductCreate, ProductListResponse

router = APIRouter(prefix="/products", tags=["Products"])


async def get_db(request: Request) -> AsyncDatabase:
    """Resolve the shared database handle from the application's manager."""
    return await request.app.state.mongo.get_connection()


@router.get("", response_model=ProductListResponse)
async def get_products(
    sort_by: str = Query("name", description="Sort field"),
    sort_order: str = Query("asc", pattern="^(asc|desc)$", description="Sort order: asc or desc"),
    limit: int = Query(50, ge=1, le=200, description="Maximum number of products"),
    db: AsyncDatabase = Depends(get_db),
):
    """
    Get products from the catalog.
    """
    collection = db[COLLECTION_NAME]

    sort_direction = DESCENDING if sort_order == "desc" else ASCENDING
    total = await collection.count_documents({})
    cursor = collection.find({}, {"_id": 0}).sort(sort_by, sort_direction).limit(limit)

    products = [Product(**doc) for doc in await cursor.to_list(length=None)]

    return ProductListResponse(
        total=total,
        data=products
    )


@router.get("/{name}", response_model=Product)
async def get_product(name: str, db: AsyncDatabase = Depends(get_db)):
    """
    Get a specific product by name.
    """
    doc = await db[COLLECTION_NAME].find_one({"name": name}, {"_id": 0})

    if not doc:
        raise HTTPException(status_code=404, detail=f"Product {name} not found")

    return Product(**doc)


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
async def create_product(product: ProductCreate, db: AsyncDatabase = Depends(get_db)):
    """
    Add a product to the catalog.

    Names are unique; inserting an existing name is rejected with 409.
    """
    document = product.model_dump()
    try:
        await db[COLLECTION_NAME].insert_one(document)
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail=f"Product {product.name} already exists")

    return Product(**product.model_dump())
