"""
Circuit Breaker configuration for payment processor calls.

Wraps calls to Stripe so a failing processor does not tie up every request.

Circuit Breaker Pattern:
- CLOSED: Normal operation, requests pass through
- OPEN: Too many failures, requests fail immediately
- HALF_OPEN: Testing if service recovered, limited requests allowed

Configuration:
- fail_max: Number of consecutive failures before opening circuit
- reset_timeout: Seconds to wait before attempting recovery (HALF_OPEN)
"""

import logging

from pybreaker import CircuitBreaker, CircuitBreakerError, CircuitBreakerListener

logger = logging.getLogger(__name__)


class StateChangeLogger(CircuitBreakerListener):
    """Logs circuit breaker state changes for monitoring and alerting."""

    def __init__(self, name: str):
        self.name = name

    def state_change(self, cb, old_state, new_state):
        logger.warning(
            "Circuit breaker state changed",
            extra={
                "breaker_name": self.name,
                "old_state": old_state.name if old_state else None,
                "new_state": new_state.name,
            },
        )


stripe_breaker = CircuitBreaker(
    fail_max=5,
    reset_timeout=60,
    name="stripe_circuit_breaker",
    listeners=[StateChangeLogger("stripe")],
)


__all__ = [
    "stripe_breaker",
    "CircuitBreakerError",
]
