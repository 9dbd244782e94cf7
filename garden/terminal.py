"""Interactive shell over a WebSocket at ``/terminal``.

Shell output is pushed to the socket from reader threads. Socket messages
are written to the shell's stdin. There is no PTY, so ``resize:`` control
messages are ignored.
"""
import atexit
import logging
import os
import subprocess
import threading

from flask import Blueprint, current_app
from flask_jwt_extended import verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from simple_websocket import ConnectionClosed

from garden.extensions import sock

logger = logging.getLogger(__name__)

terminal_ws = Blueprint("terminal_ws", __name__)

RED = "\x1b[31m"
RESET = "\x1b[0m"

WELCOME = (
    "\r\n\x1b[1;32m╔════════════════════════════════════════════════════════════╗\x1b[0m\r\n"
    "\x1b[1;32m║\x1b[0m  \x1b[1;36mGarden - Cluster Terminal\x1b[0m                                 \x1b[1;32m║\x1b[0m\r\n"
    "\x1b[1;32m╠════════════════════════════════════════════════════════════╣\x1b[0m\r\n"
    "\x1b[1;32m║\x1b[0m  Commands: kubectl, helm, sh                               \x1b[1;32m║\x1b[0m\r\n"
    "\x1b[1;32m╚════════════════════════════════════════════════════════════╝\x1b[0m\r\n\r\n"
)
SESSION_ENDED = "\r\n\x1b[1;31m[Terminal session ended]\x1b[0m\r\n"

_sessions = {}
_sessions_lock = threading.Lock()


def shell_env(cwd):
    env = dict(os.environ)
    env.update(
        KUBECONFIG=os.path.join(cwd, "kyma-cluster", "kyma-admin.yaml"),
        TERM="xterm-256color",
        PATH=f"{os.environ.get('PATH', '')}:/usr/local/bin:/usr/bin:/bin",
    )
    return env


class TerminalSession:
    def __init__(self, ws, shell, cwd=None):
        self.ws = ws
        self.cwd = cwd or os.getcwd()
        self.process = subprocess.Popen(
            [shell, "-i"],
            cwd=self.cwd,
            env=shell_env(self.cwd),
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
        self.pid = self.process.pid
        self._send_lock = threading.Lock()
        self._readers = [
            threading.Thread(target=self._pump, args=(self.process.stdout, False), daemon=True),
            threading.Thread(target=self._pump, args=(self.process.stderr, True), daemon=True),
        ]

    def send(self, text):
        with self._send_lock:
            try:
                self.ws.send(text)
                return True
            except ConnectionClosed:
                return False

    def _pump(self, stream, is_stderr):
        for chunk in iter(lambda: stream.read1(4096), b""):
            text = chunk.decode("utf-8", errors="replace")
            if not self.send(f"{RED}{text}{RESET}" if is_stderr else text):
                break

    def write(self, message):
        if message.startswith("resize:"):
            return
        try:
            self.process.stdin.write(message.encode("utf-8"))
            self.process.stdin.flush()
        except (BrokenPipeError, ValueError) as e:
            logger.error("Error writing to terminal %s stdin: %s", self.pid, e)

    def run(self):
        for reader in self._readers:
            reader.start()
        watcher = threading.Thread(target=self._watch_exit, daemon=True)
        watcher.start()
        while self.process.poll() is None:
            message = self.ws.receive(timeout=1)
            if message is None:
                continue
            if isinstance(message, bytes):
                message = message.decode("utf-8", errors="replace")
            self.write(message)
        watcher.join(timeout=2)

    def _watch_exit(self):
        code = self.process.wait()
        for reader in self._readers:
            reader.join(timeout=1)
        logger.info("Terminal PID %s exited with code: %s", self.pid, code)
        self.send(SESSION_ENDED)
        self.ws.close()

    def kill(self):
        if self.process.poll() is None:
            self.process.kill()


def cleanup_terminals():
    with _sessions_lock:
        sessions = list(_sessions.values())
        _sessions.clear()
    for session in sessions:
        session.kill()


atexit.register(cleanup_terminals)


@sock.route("/terminal", bp=terminal_ws)
def terminal(ws):
    try:
        verify_jwt_in_request()
    except (JWTExtendedException, PyJWTError) as e:
        logger.info("Terminal connection refused: %s", e)
        ws.send(f"\r\n{RED}Authentication required{RESET}\r\n")
        return

    logger.info("Terminal WebSocket connected")
    ws.send(WELCOME)
    try:
        session = TerminalSession(ws, current_app.config["TERMINAL_SHELL"])
    except OSError as e:
        logger.error("Could not start shell: %s", e)
        ws.send(f"\r\n\x1b[1;31mError: {e}\x1b[0m\r\n")
        return

    logger.info("Shell %s spawned with PID: %s", current_app.config["TERMINAL_SHELL"], session.pid)
    with _sessions_lock:
        _sessions[session.pid] = session
    try:
        session.run()
    finally:
        logger.info("Terminal WebSocket disconnected (PID: %s)", session.pid)
        session.kill()
        with _sessions_lock:
            _sessions.pop(session.pid, None)
