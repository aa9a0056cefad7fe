from storefront.notification.templates.order_cancellation import OrderCancellationTemplate
from storefront.notification.templates.order_confirmation import OrderConfirmationTemplate

__all__ = ["OrderCancellationTemplate", "OrderConfirmationTemplate"]
