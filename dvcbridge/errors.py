from __future__ import annotations


class BridgeError(Exception):
    """Base class for errors raised outside the process-result boundary."""


class SettingsError(BridgeError):
    pass


class VaultNotFoundError(BridgeError):
    pass
