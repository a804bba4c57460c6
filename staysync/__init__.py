"""StaySync: booking/payment status synchronization service."""

__version__ = "1.0.0"
