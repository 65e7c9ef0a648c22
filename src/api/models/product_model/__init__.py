from .productsModel import Product, ProductVariant
from .wishlistsModel import Wishlist
