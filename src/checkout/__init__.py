"""Checkout orchestration for multi-seller orders.

Drives a shopper from address selection through payment to placed orders:
seller partitioning, order totals, the checkout step machine, order placement
and the payment gateway round trip.
"""
