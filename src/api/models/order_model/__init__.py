from .orderModel import Order, OrderItem, OrderStatusEnum, PaymentStatusEnum, PaymentMethodEnum
