from .cartModel import Cart, CartItem
