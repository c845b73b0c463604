"""event-dispatcher CLI.

Small demonstrations of the dispatcher, runnable with
``event-dispatcher demo <name>``.
"""

from __future__ import annotations

from typing import Any

import click

from event_dispatcher import __version__
from event_dispatcher.config import configure_logging, get_settings
from event_dispatcher.dispatcher import Dispatcher
from event_dispatcher.registry import DispatcherRegistry


class Sender:
    """Posts ``onFoo`` and reports what observers wrote back."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    def foo(self) -> Any:
        notification = self._dispatcher.post(self, "onFoo", {"message": "Some Info..."})
        click.echo(f"notification.foo is {getattr(notification, 'foo', None)}")
        return notification


class Receiver:
    def __init__(self, foo: Any = None) -> None:
        self.foo = foo

    def notify(self, notification: Any) -> None:
        click.echo("received notification")
        click.echo(f"receiver.foo is {self.foo}")
        notification.foo = "bar"


@click.group()
@click.version_option(__version__, prog_name="event-dispatcher")
@click.option("--verbose", "-v", is_flag=True, help="Log dispatcher activity to stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Synchronous in-process notification dispatcher."""
    settings = get_settings()
    if verbose:
        settings = settings.model_copy(update={"log_level": "DEBUG"})
    configure_logging(settings)
    ctx.obj = DispatcherRegistry(settings)


@cli.group()
def demo() -> None:
    """Run a demonstration scenario."""
    pass


@demo.command("function")
@click.pass_obj
def demo_function(registry: DispatcherRegistry) -> None:
    """Global observer given as a plain function."""
    dispatcher = registry.get_instance()
    receiver = Receiver(foo=42)

    def callback(notification: Any) -> None:
        click.echo("function callback called")
        receiver.notify(notification)

    dispatcher.add_observer(callback)
    receiver.foo = "bar"

    click.echo("sender.foo()")
    Sender(dispatcher).foo()


@demo.command("object")
@click.pass_obj
def demo_object(registry: DispatcherRegistry) -> None:
    """Global observer given as a bound method."""
    dispatcher = registry.get_instance()
    receiver = Receiver(foo=42)
    dispatcher.add_observer(receiver.notify)
    receiver.foo = "bar"

    click.echo("sender.foo()")
    Sender(dispatcher).foo()


@demo.command("bubble")
@click.option("--cancel", is_flag=True, help="Cancel the notification in the child dispatcher")
@click.pass_obj
def demo_bubble(registry: DispatcherRegistry, cancel: bool) -> None:
    """Notification posted to a child dispatcher bubbling up to its parent."""
    child = registry.get_instance("child")
    parent = registry.get_instance("parent")
    child.add_nested_dispatcher(parent)

    def on_child(notification: Any) -> None:
        notification.info["trace"].append("x")
        if cancel:
            notification.cancel()

    def on_parent(notification: Any) -> None:
        notification.info["trace"].append("y")

    child.add_observer(on_child, "onFoo")
    parent.add_observer(on_parent, "onFoo")

    notification = child.post(object(), "onFoo", {"trace": []})
    click.echo(f"Trace:     {notification.info['trace']}")
    click.echo(f"Delivered: {notification.delivery_count}")
    click.echo(f"Cancelled: {notification.cancelled}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
