"""Application settings for the MPD server address, persisted with QSettings."""

import logging

from PySide6.QtCore import QSettings

from mpdq.api.mpd.types import DEFAULT_PORT, ServerAddress

logger = logging.getLogger(__name__)

# MPD
_KEY_MPD_HOST = "mpd/host"
_KEY_MPD_PORT = "mpd/port"

DEFAULT_HOST = "localhost"


class ConfigManager:
    """Wrapper around QSettings for type-safe access to the MPD address.

    QSettings stores config in platform-specific locations:
    - Windows: HKEY_CURRENT_USER\\Software\\mpdq\\mpdq
    - macOS: ~/Library/Preferences/com.mpdq.mpdq.plist
    - Linux: ~/.config/mpdq/mpdq.conf

    Example:
        config = ConfigManager()
        client = MpdClient(config.get_server_address())
    """

    def __init__(self, organization: str = "mpdq", application: str = "mpdq") -> None:
        """Initialize the config manager.

        Args:
            organization: Organization name for QSettings.
            application: Application name for QSettings.
        """
        self._settings = QSettings(organization, application)

    @property
    def settings(self) -> QSettings:
        """Return the underlying QSettings instance."""
        return self._settings

    def get_mpd_host(self) -> str:
        """Return the MPD host (default "localhost")."""
        value = self._settings.value(_KEY_MPD_HOST, DEFAULT_HOST, str)
        return str(value) if value else DEFAULT_HOST

    def set_mpd_host(self, host: str) -> None:
        """Set the MPD host.

        Args:
            host: Hostname or IP.
        """
        self._settings.setValue(_KEY_MPD_HOST, host)

    def get_mpd_port(self) -> int:
        """Return the MPD port.

        Returns:
            Port number (default 6600).
        """
        value = self._settings.value(_KEY_MPD_PORT, DEFAULT_PORT, int)
        return max(1, min(65535, int(value)))  # type: ignore[arg-type]

    def set_mpd_port(self, port: int) -> None:
        """Set the MPD port.

        Args:
            port: Port number (1-65535).
        """
        self._settings.setValue(_KEY_MPD_PORT, max(1, min(65535, port)))

    def get_server_address(self) -> ServerAddress:
        """Return the configured MPD server address."""
        address = ServerAddress(self.get_mpd_host(), self.get_mpd_port())
        logger.debug("Configured MPD server: %s", address)
        return address

    def set_server_address(self, address: ServerAddress) -> None:
        """Persist the MPD server address.

        Args:
            address: Address to save.
        """
        self.set_mpd_host(address.host)
        self.set_mpd_port(address.port)

    def clear(self) -> None:
        """Clear all settings (useful for testing or reset)."""
        self._settings.clear()

    def sync(self) -> None:
        """Force settings to be written to disk."""
        self._settings.sync()
