"""
Developer application catalog.

Correction only applies while the user dictates into an application where
code or markdown is expected. The host detects the frontmost application and
asks this catalog whether it counts as a developer app.
"""

from typing import Dict, List, Optional
from dataclasses import dataclass, replace
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DevApp:
    """An application where dictation gets developer corrections."""
    bundle_id: str
    display_name: str
    enabled: bool = True


DEFAULT_DEV_APPS: List[DevApp] = [
    DevApp("com.googlecode.iterm2", "iTerm2"),
    DevApp("com.apple.Terminal", "Terminal"),
    DevApp("com.microsoft.VSCode", "Visual Studio Code"),
    DevApp("com.jetbrains.PhpStorm", "PhpStorm"),
    DevApp("com.jetbrains.WebStorm", "WebStorm"),
    DevApp("com.jetbrains.intellij", "IntelliJ IDEA"),
    DevApp("com.apple.dt.Xcode", "Xcode"),
    DevApp("com.sublimehq.Sublime-Text", "Sublime Text"),
    DevApp("dev.zed.Zed", "Zed"),
    DevApp("com.cursor.Cursor", "Cursor"),
]


class DevAppRegistry:
    """Lookup table of developer apps keyed by bundle identifier."""

    def __init__(self, apps: Optional[List[DevApp]] = None):
        self._apps: Dict[str, DevApp] = {
            app.bundle_id: app for app in (apps if apps is not None else DEFAULT_DEV_APPS)
        }

    @property
    def apps(self) -> List[DevApp]:
        return list(self._apps.values())

    def is_dev_app(self, bundle_id: Optional[str]) -> bool:
        """Check whether the given app is a known, enabled developer app."""
        if not bundle_id:
            return False
        app = self._apps.get(bundle_id)
        return app is not None and app.enabled

    def add(self, app: DevApp) -> None:
        """Register (or replace) an application."""
        self._apps[app.bundle_id] = app

    def set_enabled(self, bundle_id: str, enabled: bool) -> None:
        """Enable or disable corrections for a registered app."""
        app = self._apps.get(bundle_id)
        if app is None:
            raise KeyError(f"Unknown application: {bundle_id}")
        self._apps[bundle_id] = replace(app, enabled=enabled)
        logger.info(f"Dev corrections {'enabled' if enabled else 'disabled'} for {app.display_name}")


@dataclass(frozen=True)
class CorrectionContext:
    """Per-invocation facts about where the text is going."""
    is_dev_app: bool

    @classmethod
    def for_app(cls, bundle_id: Optional[str], registry: Optional[DevAppRegistry] = None) -> "CorrectionContext":
        """Build a context from the frontmost application's bundle id."""
        registry = registry or DevAppRegistry()
        return cls(is_dev_app=registry.is_dev_app(bundle_id))
