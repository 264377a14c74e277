"""
Host lifecycle for the hand posing feature.

The host scene may not have every dependency (camera rig, hand prefabs,
tracked hands...) ready when the feature is enabled. The service polls
for them on every tick until they all resolve:

    UNINITIALIZED --(all dependencies resolved)--> READY
    UNINITIALIZED --(max_attempts failures)------> FAILED

A missing dependency is logged and leaves the feature inactive; nothing
is raised to the host. ``disable()`` returns to UNINITIALIZED and stops
polling until ``enable()`` is called again.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

Resolver = Callable[[], Optional[Any]]


class ServiceState(Enum):
    """Lifecycle state of HandPosingService."""
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    FAILED = "failed"


class HandPosingService:
    """Resolve named host dependencies, then bind them once.

    Args:
        resolvers: Ordered mapping name -> callable returning the dependency or None
        on_ready: Called with the resolved components; returning False
            rejects them and counts as a failed attempt
        max_attempts: Failed attempts before giving up (None = never)
        name: Name used in log messages
    """

    def __init__(
        self,
        resolvers: Mapping[str, Resolver],
        on_ready: Optional[Callable[[Dict[str, Any]], Optional[bool]]] = None,
        max_attempts: Optional[int] = None,
        name: str = "Hand Posing Service",
    ):
        if max_attempts is not None and max_attempts < 1:
            raise ValueError(f"max_attempts must be positive, got {max_attempts}")
        self.name = name
        self._resolvers = dict(resolvers)
        self._on_ready = on_ready
        self.max_attempts = max_attempts

        self.state = ServiceState.UNINITIALIZED
        self.enabled = False
        self.attempts = 0
        self.components: Dict[str, Any] = {}

    @property
    def is_active(self) -> bool:
        return self.enabled and self.state is ServiceState.READY

    def enable(self) -> ServiceState:
        """Start the feature and make a first initialization attempt."""
        self.enabled = True
        self.state = ServiceState.UNINITIALIZED
        self.attempts = 0
        return self._attempt()

    def disable(self) -> None:
        """Stop the feature and release resolved components."""
        self.enabled = False
        self.state = ServiceState.UNINITIALIZED
        self.components = {}
        logger.info("%s disabled", self.name)

    def tick(self) -> ServiceState:
        """Advance the lifecycle; retries initialization while pending."""
        if self.enabled and self.state is ServiceState.UNINITIALIZED:
            return self._attempt()
        return self.state

    def _attempt(self) -> ServiceState:
        self.attempts += 1
        components = self._resolve()

        if components is not None and self._bind(components):
            self.components = components
            self.state = ServiceState.READY
            logger.info(
                "%s ready after %d attempt(s)", self.name, self.attempts,
                extra={"event": "ready", "attempts": self.attempts},
            )
        elif self.max_attempts is not None and self.attempts >= self.max_attempts:
            self.state = ServiceState.FAILED
            logger.error(
                "%s failed after %d attempt(s), feature left inactive",
                self.name, self.attempts,
                extra={"event": "failed", "attempts": self.attempts},
            )
        return self.state

    def _resolve(self) -> Optional[Dict[str, Any]]:
        components: Dict[str, Any] = {}
        for dependency, resolver in self._resolvers.items():
            value = resolver()
            if value is None:
                logger.error(
                    "%s: missing dependency %r", self.name, dependency,
                    extra={"event": "missing_dependency", "attempt": self.attempts},
                )
                return None
            components[dependency] = value
        return components

    def _bind(self, components: Dict[str, Any]) -> bool:
        if self._on_ready is None:
            return True
        return self._on_ready(components) is not False
