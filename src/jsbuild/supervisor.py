"""Notification channel to a supervising parent process.

When jsbuild is spawned by a Node.js parent with an "ipc" stdio entry, the
parent passes the channel's file descriptor in NODE_CHANNEL_FD and reads
newline-delimited JSON messages from it. After every build or rebuild the
orchestrator sends the fixed token BUILD_DONE over that channel.
"""

import json
import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

BUILD_DONE = "build:done"
CHANNEL_FD_ENV = "NODE_CHANNEL_FD"


class ParentChannel:
    """Write-only message channel to the parent process."""

    def __init__(self, fd: int) -> None:
        self._fd = fd

    @classmethod
    def from_environment(cls) -> Optional["ParentChannel"]:
        """Open the channel advertised by the parent, if any.

        Returns:
            A channel, or None when the process is not supervised
        """
        value = os.environ.get(CHANNEL_FD_ENV)
        if not value:
            return None
        try:
            fd = int(value)
        except ValueError:
            logger.warning("Ignoring malformed %s=%r", CHANNEL_FD_ENV, value)
            return None
        return cls(fd)

    def send(self, message: str) -> None:
        """Send one message to the parent.

        A parent that has already gone away is not an error for the build.
        """
        payload = (json.dumps(message) + "\n").encode("utf-8")
        try:
            os.write(self._fd, payload)
        except OSError as e:
            logger.debug("Could not notify parent process: %s", e)
