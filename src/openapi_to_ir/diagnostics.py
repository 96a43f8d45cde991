"""Collection of non-fatal violations."""

from __future__ import annotations

import logging

from .ir import Violation

logger = logging.getLogger(__name__)

UNSUPPORTED_FEATURE = "openapi-3/unsupported-feature"


class Diagnostics:
    """Accumulates violations for one document and logs each as it is recorded."""

    def __init__(self, source_path: str) -> None:
        self.source_path = source_path
        self._violations: list[Violation] = []

    @property
    def violations(self) -> tuple[Violation, ...]:
        return tuple(self._violations)

    def unsupported(self, message: str, loc: str | None) -> None:
        """Record use of a construct the IR cannot represent."""
        self._violations.append(
            Violation(
                code=UNSUPPORTED_FEATURE,
                message=message,
                range=loc,
                severity="warning",
                source_path=self.source_path,
            )
        )
        logger.warning("%s (%s at %s)", message, self.source_path or "<document>", loc)

    def __len__(self) -> int:
        return len(self._violations)
