from smartops.models.customer import Customer
from smartops.models.inventory import InventoryItem
from smartops.models.notification import Notification
from smartops.models.report import Report
from smartops.models.sale import Sale
from smartops.services.collections import TenantScopedStore

inventory_store = TenantScopedStore(
    InventoryItem,
    not_found_message="Item not found",
    non_nullable=frozenset({"name", "price", "cost", "quantity", "reorder_point", "sold_count"}),
)
sale_store = TenantScopedStore(Sale, not_found_message="Sale not found")
customer_store = TenantScopedStore(
    Customer,
    not_found_message="Customer not found",
    non_nullable=frozenset({"name", "is_vip", "total_spent", "visit_count"}),
)
notification_store = TenantScopedStore(
    Notification,
    not_found_message="Notification not found",
    non_nullable=frozenset({"title", "type", "priority", "is_read"}),
)
report_store = TenantScopedStore(Report, not_found_message="Report not found")
