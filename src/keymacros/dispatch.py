# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import logging
import shlex
import subprocess

import trio

logger = logging.getLogger(__name__)


class Dispatcher:
    """Launches bound commands as child processes.

    Commands are split with shell quoting rules but are not run through a shell.
    The children are reaped by tasks in the given nursery; nothing waits for them
    to finish before the next key is handled.
    """

    def __init__(self, nursery: trio.Nursery):
        self.nursery = nursery

    async def dispatch(self, command: str) -> bool:
        try:
            argv = shlex.split(command)
        except ValueError as exc:
            logger.warning("Could not split command %r: %s", command, exc)
            return False
        if not argv:
            logger.warning("Refusing to run an empty command")
            return False
        try:
            pid = await self.nursery.start(self._run, argv)
        except OSError:
            logger.warning("Could not launch %r", command, exc_info=True)
            return False
        logger.debug("Launched %r as pid %d", argv, pid)
        return True

    async def _run(self, argv: list[str], *, task_status=trio.TASK_STATUS_IGNORED):
        process = await trio.lowlevel.open_process(argv, stdin=subprocess.DEVNULL, start_new_session=True)
        task_status.started(process.pid)
        returncode = await process.wait()
        if returncode != 0:
            logger.debug("%r exited with status %d", argv, returncode)
