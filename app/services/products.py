# app/services/products.py
import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from app.core.exceptions import Forbidden, NotFound, translate_errors
from app.db.store import DocumentStore
from app.schemas.product import Product, ProductCreate, ProductUpdate
from app.schemas.user import User
from app.services.image_store import ImageStore

logger = logging.getLogger(__name__)

PRODUCTS = "products"
RATINGS = "ratings"
BOOKINGS = "bookings"
USERS = "users"

DEFAULT_PAGE_SIZE = 8
UNAVAILABLE_PRODUCT_NAME = "Product not Available"

SAMPLE_PRODUCTS = [
    {
        "name": "Elegant Evening Gown",
        "price": 2999.99,
        "description": "A stunning evening gown perfect for special occasions",
        "category": "gown",
        "quantity": 5,
        "rating": 4.5,
        "image": "https://example.com/gown1.jpg",
        "condition": "new",
        "sellerMessage": "Perfect for weddings and formal events",
        "rentAvailable": True,
        "userId": "sample-user-1",
    },
    {
        "name": "Classic Business Suit",
        "price": 1999.99,
        "description": "A professional business suit for formal occasions",
        "category": "suit",
        "quantity": 3,
        "rating": 4.8,
        "image": "https://example.com/suit1.jpg",
        "condition": "new",
        "sellerMessage": "Ideal for business meetings and interviews",
        "rentAvailable": True,
        "userId": "sample-user-1",
    },
    {
        "name": "Professional Makeup Kit",
        "price": 999.99,
        "description": "Complete makeup kit for professional artists",
        "category": "makeup",
        "quantity": 10,
        "rating": 4.7,
        "image": "https://example.com/makeup1.jpg",
        "condition": "new",
        "sellerMessage": "Includes all essential products for professional makeup application",
        "rentAvailable": False,
        "userId": "sample-user-1",
    },
]


class ProductService:
    def __init__(self, store: DocumentStore, images: Optional[ImageStore] = None):
        self.store = store
        self.images = images

    # ---------- create / seed ----------

    @translate_errors("Failed to create product")
    def create(self, payload: ProductCreate, owner: User) -> Product:
        data = payload.model_dump(by_alias=True, exclude_none=True)
        data["userId"] = owner.uid
        return self._insert(data)

    def _insert(self, data: Dict) -> Product:
        now = datetime.now(timezone.utc)
        product_id = self.store.add(PRODUCTS, {**data, "createdAt": now, "updatedAt": now})
        logger.info("Product %s created for seller %s", product_id, data.get("userId"))
        return self.get(product_id)

    def seed_sample_products(self) -> int:
        """Create the sample catalogue when the products collection is empty."""
        try:
            existing = self.store.count(PRODUCTS)
        except Exception:
            logger.exception("Could not check for existing products")
            return 0
        if existing:
            logger.info("Found %d existing products, skipping sample data", existing)
            return 0

        created = 0
        for sample in SAMPLE_PRODUCTS:
            try:
                self._insert(dict(sample))
                created += 1
            except Exception:
                logger.exception("Error creating sample product %s", sample["name"])
        logger.info("Sample products initialization completed (%d created)", created)
        return created

    # ---------- reads ----------

    @translate_errors("Failed to fetch products")
    def list(
        self,
        user_id: Optional[str] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        categories: Optional[Sequence[str]] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        min_rating: Optional[float] = None,
        search: Optional[str] = None,
    ) -> List[Product]:
        filters = []
        if min_price is not None:
            filters.append(("price", ">=", min_price))
        if max_price is not None:
            filters.append(("price", "<=", max_price))
        where = {"userId": user_id} if user_id else None
        docs = self.store.find(PRODUCTS, where=where, filters=filters)

        if categories:
            wanted = {c.strip().lower() for c in categories if c.strip()}
            docs = [d for d in docs if str(d.get("category", "")).lower() in wanted]

        averages = self._average_ratings()
        products = [self._to_product(d, average_rating=averages.get(d["id"], 0)) for d in docs]

        if min_rating is not None:
            products = [p for p in products if p.average_rating >= min_rating]

        if search:
            needle = search.lower()
            products = [
                p for p in products
                if needle in p.name.lower() or needle in (p.description or "").lower()
            ]

        # paginate after every filter has been applied
        start = (max(page, 1) - 1) * limit
        return products[start:start + limit]

    @translate_errors("Failed to fetch product")
    def get(self, product_id: str) -> Product:
        doc = self._get_doc(product_id)

        seller = {}
        try:
            seller = self.store.get(USERS, doc.get("userId", "")) or {}
        except Exception:
            logger.exception("Error fetching seller information for product %s", product_id)

        average = self._average_ratings(product_id).get(product_id, 0)
        return self._to_product(
            doc,
            seller_name=seller.get("username"),
            seller_photo=(seller.get("profile") or {}).get("photoURL"),
            average_rating=average,
        )

    @translate_errors("Failed to fetch products from the same shop")
    def list_from_same_shop(self, product_id: str, limit: int = 5) -> List[Product]:
        original = self._get_doc(product_id)
        seller_id = original.get("userId")
        if not seller_id:
            logger.warning("Product %s has no seller associated", product_id)
            return []

        others = self.list(user_id=seller_id, page=1, limit=50)
        return [p for p in others if p.id != product_id][:limit]

    # ---------- writes ----------

    @translate_errors("Failed to update product")
    def update(self, product_id: str, payload: ProductUpdate, user: User) -> Product:
        self._get_owned(product_id, user)
        # null leaves the field unchanged
        changes = payload.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)
        changes["updatedAt"] = datetime.now(timezone.utc)
        self.store.update(PRODUCTS, product_id, changes)
        return self.get(product_id)

    @translate_errors("Failed to update product quantity")
    def update_quantity(self, product_id: str, quantity: int, user: User) -> Product:
        self._get_owned(product_id, user)
        new_quantity = max(0, quantity)
        self.store.update(
            PRODUCTS, product_id, {"quantity": new_quantity, "updatedAt": datetime.now(timezone.utc)}
        )
        logger.info("Product %s quantity updated to %d", product_id, new_quantity)
        return self.get(product_id)

    @translate_errors("Failed to attach product image")
    def attach_image(self, product_id: str, content: bytes, file_name: str, user: User) -> Product:
        self._get_owned(product_id, user)
        uploaded = self.images.upload_image(content, file_name, "products")
        self.store.update(
            PRODUCTS,
            product_id,
            {
                "image": uploaded["url"],
                "imageFileId": uploaded["fileId"],
                "updatedAt": datetime.now(timezone.utc),
            },
        )
        return self.get(product_id)

    @translate_errors("Failed to delete product")
    def delete(self, product_id: str, user: User) -> None:
        product = self._get_owned(product_id, user)

        self._delete_images(product)

        ratings = self.store.find(RATINGS, where={"productId": product_id})
        logger.info("Found %d ratings to delete for product %s", len(ratings), product_id)
        for rating in ratings:
            self.store.delete(RATINGS, rating["id"])

        # bookings keep a copy of the product name; point them at a placeholder instead
        bookings = self.store.find(BOOKINGS, where={"serviceName": product["name"]})
        logger.info("Found %d bookings to update for product %s", len(bookings), product["name"])
        now = datetime.now(timezone.utc)
        for booking in bookings:
            self.store.update(
                BOOKINGS,
                booking["id"],
                {"serviceName": UNAVAILABLE_PRODUCT_NAME, "productImage": None, "updatedAt": now},
            )

        self.store.delete(PRODUCTS, product_id)
        logger.info("Product %s deleted", product_id)

    # ---------- helpers ----------

    def _get_doc(self, product_id: str) -> Dict:
        doc = self.store.get(PRODUCTS, product_id)
        if doc is None:
            raise NotFound(f'Product with ID "{product_id}" not found')
        return doc

    def _get_owned(self, product_id: str, user: User) -> Dict:
        doc = self._get_doc(product_id)
        if doc.get("userId") != user.uid and not user.is_admin:
            raise Forbidden("You cannot modify another seller's product")
        return doc

    def _average_ratings(self, product_id: Optional[str] = None) -> Dict[str, float]:
        where = {"productId": product_id} if product_id else None
        grouped = defaultdict(list)
        for rating in self.store.find(RATINGS, where=where):
            if rating.get("rating") is not None:
                grouped[rating["productId"]].append(rating["rating"])
        return {pid: sum(values) / len(values) for pid, values in grouped.items()}

    def _delete_images(self, product: Dict) -> None:
        file_ids = list(product.get("imageFileIds") or [])
        if product.get("imageFileId"):
            file_ids.append(product["imageFileId"])
        if not file_ids or self.images is None:
            return
        for file_id in dict.fromkeys(file_ids):
            try:
                self.images.delete_image(file_id)
            except Exception:
                logger.exception("Failed to delete image %s for product %s", file_id, product["id"])

    @staticmethod
    def _to_product(doc: Dict, **extra) -> Product:
        product = Product.model_validate(doc)
        return product.model_copy(update={"available": product.quantity > 0, **extra})
