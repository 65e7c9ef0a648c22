# root
from .usersModel import User, UserRole

# category
from .categoryModel import Category

# product
from .product_model.productsModel import Product, ProductVariant

# wishlist
from .product_model.wishlistsModel import Wishlist

# Review
from .reviewModel import Review

# Coupon
from .couponModel import Coupon, CouponType

# settings
from .settingsModel import Settings

# customer address
from .addressModel import Address

# cart
from .cart_model.cartModel import Cart, CartItem

# orders
from .order_model.orderModel import (
    Order,
    OrderItem,
    OrderStatusEnum,
    PaymentStatusEnum,
    PaymentMethodEnum,
)

# announcement
from .announcementModel import Announcement, AnnouncementType
