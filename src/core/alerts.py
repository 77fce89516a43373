"""Alert management for Listing Quality Scorer."""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime
from typing import TYPE_CHECKING, Callable

from .models import Alert, AlertType, ScoreHistory, ScoreResult, Severity

if TYPE_CHECKING:
    from .config import AlertConfig

logger = logging.getLogger(__name__)

AlertListener = Callable[[Alert], None]


class AlertManager:
    """Manages alerts for listing score changes."""

    def __init__(self, config: AlertConfig) -> None:
        self.config = config
        self._alerts: deque[Alert] = deque(maxlen=config.max_alerts)
        self._listeners: list[AlertListener] = []

    @property
    def alerts(self) -> list[Alert]:
        """Get all alerts."""
        return list(self._alerts)

    @property
    def unread_count(self) -> int:
        """Get count of unread alerts."""
        return sum(1 for a in self._alerts if not a.is_read and not a.is_dismissed)

    def add_listener(self, listener: AlertListener) -> None:
        """Register a callable invoked with every new alert."""
        self._listeners.append(listener)

    def remove_listener(self, listener: AlertListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def check_for_alerts(
        self,
        result: ScoreResult,
        previous: ScoreHistory | None = None,
    ) -> list[Alert]:
        """Check if a score result should trigger any alerts.

        Args:
            result: The new score result
            previous: The last recorded score for the same listing (if any)

        Returns:
            List of alerts triggered
        """
        if not self.config.enabled:
            return []

        alerts: list[Alert] = []
        label = result.sku or result.asin or "listing"
        score = result.total_score
        old_score = previous.total_score if previous else None
        low = self.config.low_score_threshold

        # Falls below the threshold, or starts below it
        if score < low and (old_score is None or old_score >= low):
            alerts.append(
                Alert(
                    alert_type=AlertType.LOW_SCORE,
                    sku=result.sku,
                    asin=result.asin,
                    message=f"Low score: {label} scores {score} (below {low})",
                    old_value=old_score,
                    new_value=score,
                    created_at=datetime.now(),
                )
            )

        if old_score is not None:
            score_change = score - old_score

            if score_change >= self.config.score_increase_threshold:
                alerts.append(
                    Alert(
                        alert_type=AlertType.SCORE_INCREASE,
                        sku=result.sku,
                        asin=result.asin,
                        message=f"Score increased: {label} {old_score} → {score} (+{score_change})",
                        old_value=old_score,
                        new_value=score,
                        created_at=datetime.now(),
                    )
                )

            if score_change <= -self.config.score_decrease_threshold:
                alerts.append(
                    Alert(
                        alert_type=AlertType.SCORE_DECREASE,
                        sku=result.sku,
                        asin=result.asin,
                        message=f"Score decreased: {label} {old_score} → {score} ({score_change})",
                        old_value=old_score,
                        new_value=score,
                        created_at=datetime.now(),
                    )
                )

        critical = [
            v for v in result.components.compliance.violations if v.severity == Severity.CRITICAL
        ]
        if critical:
            terms = ", ".join(f'"{v.term}"' for v in critical)
            alerts.append(
                Alert(
                    alert_type=AlertType.COMPLIANCE_CRITICAL,
                    sku=result.sku,
                    asin=result.asin,
                    message=f"Critical compliance issue: {label} title contains {terms}",
                    new_value=result.components.compliance.score,
                    created_at=datetime.now(),
                )
            )

        for alert in alerts:
            self._alerts.append(alert)
            logger.info(f"Alert: {alert.message}")
            for listener in list(self._listeners):
                try:
                    listener(alert)
                except Exception:
                    logger.exception(f"Alert listener failed for {alert.alert_type.value}")

        return alerts

    def mark_read(self, alert: Alert) -> None:
        """Mark an alert as read."""
        alert.is_read = True

    def mark_all_read(self) -> None:
        """Mark all alerts as read."""
        for alert in self._alerts:
            alert.is_read = True

    def dismiss(self, alert: Alert) -> None:
        """Dismiss an alert."""
        alert.is_dismissed = True

    def clear_all(self) -> None:
        """Clear all alerts."""
        self._alerts.clear()

    def get_recent_alerts(self, limit: int = 20) -> list[Alert]:
        """Get recent alerts."""
        return list(self._alerts)[-limit:]

    def get_unread_alerts(self) -> list[Alert]:
        """Get all unread alerts."""
        return [a for a in self._alerts if not a.is_read and not a.is_dismissed]
