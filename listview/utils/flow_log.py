import time

from listview.utils.settings import DEFAULT_SETTINGS, settings


class FlowLogger:
    """Timestamped, optionally throttled flow logging for windowing diagnostics."""

    ALWAYS_SHOWN = {"WARNING", "ERROR"}

    def __init__(self):
        self._last: dict[str, float] = {}

    def enabled(self) -> bool:
        try:
            return bool(settings.value("trace_logs", DEFAULT_SETTINGS["trace_logs"], type=bool))
        except Exception:
            return False

    def log_flow(self, component: str, message: str, *, level: str = "DEBUG",
                 throttle_key: str | None = None, every_s: float | None = None) -> bool:
        """Print a trace line; returns False when filtered or throttled."""
        if level not in self.ALWAYS_SHOWN and not self.enabled():
            return False

        now = time.time()
        if throttle_key and every_s is not None:
            last = self._last.get(throttle_key, 0.0)
            if (now - last) < every_s:
                return False
            self._last[throttle_key] = now
        ts = time.strftime("%H:%M:%S", time.localtime(now)) + f".{int((now % 1) * 1000):03d}"
        print(f"[{ts}][TRACE][{component}][{level}] {message}")
        return True


# Shared instance so throttle keys are shared across services
flow_logger = FlowLogger()


def log_flow(component: str, message: str, **kwargs) -> bool:
    return flow_logger.log_flow(component, message, **kwargs)
