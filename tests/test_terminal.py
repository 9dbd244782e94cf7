import os
import time

import pytest

from garden.terminal import SESSION_ENDED, TerminalSession, shell_env

from .conftest import make_app


class FakeSocket:
    def __init__(self, *incoming):
        self.incoming = list(incoming)
        self.sent = []
        self.closed = False

    def send(self, text):
        self.sent.append(text)

    def receive(self, timeout=None):
        if self.incoming:
            return self.incoming.pop(0)
        time.sleep(0.01)
        return None

    def close(self):
        self.closed = True


def _rules(app):
    return {rule.rule for rule in app.url_map.iter_rules()}


def test_terminal_disabled_by_default(memory_app):
    assert "/terminal" not in _rules(memory_app)


def test_terminal_route_registered_when_enabled(tmp_path):
    app = make_app(tmp_path, TERMINAL_ENABLED=True)
    assert "/terminal" in _rules(app)


def test_shell_env_points_at_cluster_config(tmp_path):
    env = shell_env(str(tmp_path))
    assert env["TERM"] == "xterm-256color"
    assert env["KUBECONFIG"] == os.path.join(str(tmp_path), "kyma-cluster", "kyma-admin.yaml")


@pytest.mark.skipif(not os.path.exists("/bin/sh"), reason="needs /bin/sh")
def test_session_relays_shell_output(tmp_path):
    ws = FakeSocket("resize:120:30", "echo garden-$((1+1))\n", "exit\n")
    session = TerminalSession(ws, "/bin/sh", cwd=str(tmp_path))
    session.run()

    output = "".join(ws.sent)
    assert "garden-2" in output
    assert output.endswith(SESSION_ENDED)
    assert ws.closed
    assert session.process.returncode == 0
