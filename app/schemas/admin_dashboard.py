# app/schemas/admin_dashboard.py
from app.schemas.common import CamelModel


class UserCounts(CamelModel):
    total: int
    admin_count: int
    customer_count: int
    shop_owner_count: int


class ProductCounts(CamelModel):
    total: int


class BookingCounts(CamelModel):
    total: int
    pending: int


class DashboardStats(CamelModel):
    users: UserCounts
    products: ProductCounts
    bookings: BookingCounts
