"""Kinds of transactional email the order flow sends."""

from enum import Enum


class NotificationType(Enum):
    ORDER_RECEIVED = "ORDER_RECEIVED"
    FULFILLMENT_REQUEST = "FULFILLMENT_REQUEST"
    SHIPPING_UPDATE = "SHIPPING_UPDATE"
