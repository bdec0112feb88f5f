from smartops.models.business import Business
from smartops.models.user import User
from smartops.models.inventory import InventoryItem
from smartops.models.customer import Customer
from smartops.models.sale import Sale
from smartops.models.notification import Notification
from smartops.models.report import Report
