"""Settings use cases"""
from .payment_info import GetPaymentInfo, UpdatePaymentInfo

__all__ = [
    "GetPaymentInfo",
    "UpdatePaymentInfo",
]
