"""Run a single shell command with live output streaming and a timeout."""

import asyncio
import codecs
import logging
import os
import signal
import sys
from pathlib import Path
from typing import TextIO

import psutil

from autograding_action.errors import TestExitError, TestTimeoutError

log = logging.getLogger(__name__)

CHUNK_SIZE = 4096
STREAM_LIMIT = 2**16
DRAIN_TIMEOUT = 0.5
INDENT = "  "


def indent(text: str) -> str:
    """Indent every line after a line break so output nests under the test name."""
    return text.replace("\r\n", "\n").replace("\n", "\n" + INDENT)


def child_environment() -> dict[str, str]:
    """Environment for spawned commands: inherited PATH and forced colors only."""
    return {"PATH": os.environ.get("PATH", ""), "FORCE_COLOR": "true"}


def kill_process_tree(pid: int) -> None:
    """Forcibly terminate a process and all of its descendants."""
    try:
        parent = psutil.Process(pid)
        children = parent.children(recursive=True)
    except psutil.NoSuchProcess:
        parent = None
        children = []

    log.debug(
        "Killing process tree: pid=%d children=%s", pid, [c.pid for c in children]
    )
    for proc in [*children, parent]:
        if proc is None:
            continue
        try:
            proc.kill()
        except psutil.NoSuchProcess:
            pass

    # Commands run in their own session, so the group also covers descendants
    # that were spawned after the snapshot above.
    if hasattr(os, "killpg"):
        try:
            os.killpg(pid, signal.SIGKILL)
        except (ProcessLookupError, PermissionError):
            pass


class _ExitAwareProtocol(asyncio.subprocess.SubprocessStreamProtocol):
    """Stream protocol that also resolves a future as soon as the child exits.

    ``Process.wait()`` only returns once every pipe is closed, which never
    happens while a background descendant keeps stdout or stderr open.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        super().__init__(limit=STREAM_LIMIT, loop=loop)
        self.exited: asyncio.Future[None] = loop.create_future()

    def process_exited(self) -> None:
        super().process_exited()
        if not self.exited.done():
            self.exited.set_result(None)


async def run_process(
    command: str,
    *,
    cwd: Path,
    timeout_ms: int,
    input: str | None = None,
    capture: bool = False,
    label: str = "Command",
) -> str:
    """Run a shell command, streaming its output indented to our own streams.

    The command settles when the shell exits, not when its output pipes
    close; output still buffered at that point is drained for a short while
    and whatever a lingering background process writes afterwards is dropped.

    Args:
        command: Shell command line
        cwd: Working directory for the command
        timeout_ms: Wall-clock budget; zero or less times out immediately
        input: Text written to the command's stdin, which is then closed
        capture: Accumulate stdout and return it
        label: Prefix used in the timeout message

    Returns:
        Captured stdout, or an empty string when not capturing

    Raises:
        TestExitError: If the command exits non-zero or from a signal
        TestTimeoutError: If the command does not finish within timeout_ms
        OSError: If the command could not be spawned

    """
    log.debug("Spawning command in %s: %s", cwd, command)
    loop = asyncio.get_running_loop()
    transport, protocol = await loop.subprocess_shell(
        lambda: _ExitAwareProtocol(loop),
        command,
        cwd=cwd,
        env=child_environment(),
        stdin=asyncio.subprocess.PIPE,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        start_new_session=True,
    )
    pid = transport.get_pid()

    sys.stdout.write(indent("\n"))
    sys.stdout.flush()

    captured: list[str] | None = [] if capture else None
    assert protocol.stdout is not None and protocol.stderr is not None
    pumps = [
        asyncio.ensure_future(_stream(protocol.stdout, sys.stdout, captured)),
        asyncio.ensure_future(_stream(protocol.stderr, sys.stderr, None)),
        asyncio.ensure_future(_feed(protocol.stdin, input)),
    ]

    try:
        try:
            await asyncio.wait_for(
                asyncio.shield(protocol.exited), timeout=max(timeout_ms, 0) / 1000
            )
        except TimeoutError:
            log.info("Command timed out after %d ms, killing pid %d", timeout_ms, pid)
            kill_process_tree(pid)
            # Reap only; the timeout already decided the result.
            await protocol.exited
            raise TestTimeoutError(
                f"{label} timed out in {timeout_ms} milliseconds"
            ) from None

        await _drain(pumps)
    finally:
        for pump in pumps:
            pump.cancel()
        if transport.get_returncode() is None:
            kill_process_tree(pid)
        transport.close()

    returncode = transport.get_returncode()
    assert returncode is not None
    if returncode != 0:
        code, signal_name = _classify_exit(returncode)
        raise TestExitError(
            f"Error: Exit with code: {code} and signal: {signal_name}",
            code=code,
            signal=signal_name,
        )

    return "".join(captured) if captured is not None else ""


async def _drain(pumps: list[asyncio.Future[None]]) -> None:
    """Let the stream pumps finish reading what the exited command left behind."""
    done, pending = await asyncio.wait(pumps, timeout=DRAIN_TIMEOUT)
    if pending:
        log.debug(
            "%d stream(s) still open after exit, left to a background process",
            len(pending),
        )
    for pump in done:
        pump.result()


def _classify_exit(returncode: int) -> tuple[int | None, str | None]:
    """Split a return code into an exit code or a signal name."""
    if returncode >= 0:
        return returncode, None
    try:
        return None, signal.Signals(-returncode).name
    except ValueError:
        return None, str(-returncode)


async def _stream(
    reader: asyncio.StreamReader, target: TextIO, captured: list[str] | None
) -> None:
    """Echo a child stream chunk by chunk, optionally keeping the text."""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while chunk := await reader.read(CHUNK_SIZE):
        text = decoder.decode(chunk)
        target.write(indent(text))
        target.flush()
        if captured is not None:
            captured.append(text)
    if tail := decoder.decode(b"", final=True):
        target.write(indent(tail))
        if captured is not None:
            captured.append(tail)


async def _feed(writer: asyncio.StreamWriter | None, input: str | None) -> None:
    """Preload stdin with the given text and close it."""
    if writer is None:
        return
    try:
        if input:
            writer.write(input.encode())
            await writer.drain()
        writer.close()
        await writer.wait_closed()
    except (BrokenPipeError, ConnectionResetError):
        # The command exited without reading all of its input.
        log.debug("Command closed stdin before reading all input")
