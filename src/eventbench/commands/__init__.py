"""Commands and the command bus."""

from eventbench.commands.bus import Command, CommandBus, SimpleCommandBus

__all__ = ["Command", "CommandBus", "SimpleCommandBus"]
