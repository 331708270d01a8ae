"""MissionLog — loguru output plus optional in-sim debug text."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from flak.config import FlakSettings
    from flak.host.interface import Host


class MissionLog:
    """Writes every message to the log; mirrors it in-sim when debug is on."""

    PREFIX = "[Flak]"

    def __init__(self, host: Host, config: FlakSettings) -> None:
        self._host = host
        self._config = config

    def _display(self, msg: str, duration: float | None) -> None:
        if self._config.debug:
            self._host.display_message(
                f"{self.PREFIX} {msg}", duration or self._config.message_duration,
            )

    def info(self, msg: str, duration: float | None = None) -> None:
        logger.info(f"{self.PREFIX} {msg}")
        self._display(msg, duration)

    def warning(self, msg: str, duration: float | None = None) -> None:
        logger.warning(f"{self.PREFIX} {msg}")
        self._display(msg, duration)

    def debug(self, msg: str) -> None:
        logger.debug(f"{self.PREFIX} {msg}")
