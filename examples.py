"""Showcase examples for scriptflow connection routing."""

import logging
import os

from scriptflow import RoutingConfig, connect, diagram, node


def straight_flow():
    """Top-to-bottom script: every connection is a direct line."""
    with diagram(name="Open terminal", filename="output/straight_flow"):
        run = node("key_combination", "Win+R", x=0, y=0)
        wait = node("delay", "500 ms", x=0, y=120)
        typed = node("text_input", "powershell", x=0, y=240)
        enter = node("key_combination", "Ctrl+Shift+Enter", x=0, y=360)

        run >> wait >> typed >> enter


def detours():
    """Nodes placed in the way force S-shaped and curved detours."""
    with diagram(name="Copy and paste", filename="output/detours"):
        select_all = node("key_combination", "Ctrl+A", x=0, y=0)
        copy = node("key_combination", "Ctrl+C", x=0, y=400)

        # Obstacles sitting between the two steps
        node("delay", "200 ms", x=-20, y=150)
        node("command", "ALT TAB", x=140, y=220)

        connect(select_all, copy)


def loop_back():
    """A connection going back up the canvas cannot be drawn as a long line."""
    with diagram(name="Retry", filename="output/loop_back"):
        check = node("condition", "window open?", x=0, y=0)
        retry = node("delay", "1000 ms", x=0, y=150)
        done = node("command", "ENTER", x=220, y=300)

        check >> retry
        retry >> check
        check >> done


def wide_margins():
    """Routing constants can be tuned per diagram."""
    config = RoutingConfig(margin=30, curve_samples=40)
    with diagram(name="Wide margins", filename="output/wide_margins", routing=config):
        start = node("command", "GUI r", x=0, y=0)
        middle = node("text_input", "notepad", x=10, y=160)
        end = node("key_combination", "Ctrl+S", x=0, y=320)

        connect(start, end)
        start >> middle


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    os.makedirs("output", exist_ok=True)

    straight_flow()
    detours()
    loop_back()
    wide_margins()
