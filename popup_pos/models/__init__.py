from popup_pos.models.organization import Organization
from popup_pos.models.user import User
from popup_pos.models.membership import Membership
from popup_pos.models.menu_item import MenuItem
from popup_pos.models.modifier import Modifier
from popup_pos.models.modifier_option import ModifierOption
from popup_pos.models.order import Order
from popup_pos.models.order_item import OrderItem
from popup_pos.models.order_item_modifier import OrderItemModifier
