"""
Engine pipeline plumbing.

Contains:
    - BasicEngine: One stage of a chain, forwards commands with send()
    - CommandRecorder: Sink that keeps every command it receives
    - link: Wire stages together front to back
"""
from __future__ import annotations

from .ir import Command


class BasicEngine:
    """A pipeline stage. Upstream calls receive(); the stage calls send() downstream."""

    def __init__(self):
        self.next_engine: BasicEngine | None = None

    @property
    def is_last_engine(self) -> bool:
        return self.next_engine is None

    def is_available(self, cmd: Command) -> bool:
        """Whether the rest of the pipeline accepts cmd. Last engine accepts everything."""
        return True if self.next_engine is None else self.next_engine.is_available(cmd)

    def receive(self, commands: list[Command]) -> None:
        raise NotImplementedError

    def send(self, commands: list[Command]) -> None:
        if self.next_engine is None:
            raise RuntimeError(f"{type(self).__name__} has no next engine to send to")
        self.next_engine.receive(commands)


class CommandRecorder(BasicEngine):
    """Stores received commands in order; forwards them if another stage follows."""

    def __init__(self):
        super().__init__()
        self.received_commands: list[Command] = []

    def receive(self, commands: list[Command]) -> None:
        self.received_commands.extend(commands)
        if not self.is_last_engine:
            self.send(commands)

    def clear(self) -> None:
        self.received_commands.clear()


def link(*engines: BasicEngine) -> BasicEngine:
    """Connect engines in order and return the first one."""
    if not engines:
        raise ValueError("link() needs at least one engine")
    for upstream, downstream in zip(engines, engines[1:]):
        upstream.next_engine = downstream
    return engines[0]
