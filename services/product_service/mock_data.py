from decimal import Decimal

from shared.storage import MemoryStore

from .models import Category, Product

# Served when the database cannot be reached, and the starting catalogue of the in-memory backend
MOCK_CATEGORIES = [
    {"id": "1", "name": "Furniture", "description": "Home and office furniture"},
    {"id": "2", "name": "Lighting", "description": "Indoor and outdoor lighting"},
    {"id": "3", "name": "Decor", "description": "Home decoration items"},
    {"id": "4", "name": "Office", "description": "Office supplies and equipment"},
    {"id": "5", "name": "Kitchen", "description": "Kitchen appliances and tools"},
]

MOCK_PRODUCTS = [
    {
        "id": "1",
        "name": "Modern Office Chair",
        "description": "Ergonomic office chair with lumbar support",
        "price": Decimal("299.99"),
        "original_price": Decimal("399.99"),
        "category": "Office",
        "images": ["https://images.pexels.com/photos/586344/pexels-photo-586344.jpeg"],
        "stock": 15,
        "rating": Decimal("4.5"),
        "review_count": 23,
        "featured": True,
        "tags": ["ergonomic", "office", "chair"],
    },
    {
        "id": "2",
        "name": "LED Desk Lamp",
        "description": "Adjustable LED desk lamp with USB charging port",
        "price": Decimal("79.99"),
        "original_price": None,
        "category": "Lighting",
        "images": ["https://images.pexels.com/photos/1112598/pexels-photo-1112598.jpeg"],
        "stock": 8,
        "rating": Decimal("4.2"),
        "review_count": 15,
        "featured": False,
        "tags": ["led", "desk", "lamp"],
    },
]


def seed_catalog(store: MemoryStore) -> MemoryStore:
    for data in MOCK_CATEGORIES:
        store.insert("categories", Category(image=None, **data))
    for data in MOCK_PRODUCTS:
        store.insert("products", Product(**data))
    return store
