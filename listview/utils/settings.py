from PySide6.QtCore import QSettings, Signal

# Defaults for settings that are accessed from multiple places.
DEFAULT_SETTINGS = {
    'preload_screens': 6,  # Viewport heights kept rendered above and below the visible area
    'scroll_inside': False,  # Observe the list's own scroll area instead of the enclosing one
    'scroll_throttle_ms': 1000,  # At most one processed scroll update per interval
    'trace_logs': False,  # Print DEBUG/INFO flow traces (warnings are always printed)
}


class Settings(QSettings):
    # Signal that shows that the setting with the given string was changes
    change = Signal(str, object, name='settingsChanged')

    def __init__(self):
        super().__init__('listview', 'listview')

    def setValue(self, key, value):
        super().setValue(key, value)
        self.change.emit(key, value)

# Common shared instance to ensure the Signal is also shared
settings = Settings()


def get_preload_screens() -> float:
    try:
        value = float(settings.value(
            'preload_screens', defaultValue=DEFAULT_SETTINGS['preload_screens'],
            type=float))
    except (TypeError, ValueError):
        value = float(DEFAULT_SETTINGS['preload_screens'])
    return max(0.0, min(value, 50.0))


def get_scroll_throttle_ms() -> int:
    try:
        value = int(settings.value(
            'scroll_throttle_ms',
            defaultValue=DEFAULT_SETTINGS['scroll_throttle_ms'], type=int))
    except (TypeError, ValueError):
        value = DEFAULT_SETTINGS['scroll_throttle_ms']
    return max(0, min(value, 10000))


def get_scroll_inside() -> bool:
    try:
        return bool(settings.value(
            'scroll_inside', defaultValue=DEFAULT_SETTINGS['scroll_inside'],
            type=bool))
    except (TypeError, ValueError):
        return DEFAULT_SETTINGS['scroll_inside']
