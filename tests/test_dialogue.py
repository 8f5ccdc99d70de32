"""Behavior tests for the interactive picker loop.

Keys come from a script and frames land on an in-memory screen, so each test
reads as a short user session.
"""

from __future__ import annotations

import unittest

from fake_terminal import ScreenTerminal, ScriptedKeys
from sessionizer.input.events import BACKSPACE, DOWN, ENTER, ESC, LEFT, RIGHT, UP
from sessionizer.picker.dialogue import CANCELLED, SELECTED, SHUTDOWN, Dialogue
from sessionizer.picker.messages import Finish, ForceShutdown, ItemsFound, MessageChannel, ProgressUpdate


def _dialogue(
    script: list,
    *,
    items: list[object] | None = None,
    channel: MessageChannel | None = None,
    width: int = 60,
    max_predictions: int = 10,
) -> tuple[Dialogue, ScreenTerminal, ScriptedKeys, list[float]]:
    terminal = ScreenTerminal(width=width)
    keys = ScriptedKeys(script)
    sleeps: list[float] = []
    dialogue = Dialogue(
        channel or MessageChannel(),
        terminal=terminal,
        keys=keys,
        max_predictions=max_predictions,
        poll_interval=0.01,
        sleep=sleeps.append,
    ).prompt("Pick")
    if items:
        dialogue.add_items(items)
    return dialogue, terminal, keys, sleeps


def _prompt_writes(terminal: ScreenTerminal) -> int:
    return sum(1 for op in terminal.ops if op[0] == "write")


class SelectionFlowTests(unittest.TestCase):
    def test_typing_narrows_and_enter_returns_the_selection(self) -> None:
        dialogue, terminal, _keys, _sleeps = _dialogue(
            ["h", "o", "o", ENTER],
            items=["hehe", "hoohoo", "oo"],
        )

        result = dialogue.interact()

        self.assertEqual(result.status, SELECTED)
        self.assertTrue(result.is_selected)
        self.assertEqual(result.item, "hoohoo")
        self.assertEqual(terminal.screen(), ["✔  Pick: hoohoo"])

    def test_escape_cancels_and_erases_the_block(self) -> None:
        dialogue, terminal, _keys, _sleeps = _dialogue(["x", ESC], items=["api", "web"])

        result = dialogue.interact()

        self.assertEqual(result.status, CANCELLED)
        self.assertIsNone(result.item)
        self.assertEqual(terminal.screen(), [])

    def test_enter_without_predictions_is_ignored(self) -> None:
        dialogue, _terminal, keys, _sleeps = _dialogue(["z", "z", ENTER, ESC], items=["abc"])

        result = dialogue.interact()

        self.assertEqual(result.status, CANCELLED)
        self.assertEqual(keys.reads, 4)

    def test_empty_store_shows_no_rows_and_enter_does_nothing(self) -> None:
        snapshots: list[list[str]] = []
        dialogue, terminal, keys, _sleeps = _dialogue(
            ["q", ENTER, DOWN, lambda: (snapshots.append(terminal.screen()), ESC)[1]],
        )

        result = dialogue.interact()

        self.assertEqual(result.status, CANCELLED)
        self.assertEqual(snapshots[0], ["?  Pick: q"])
        self.assertEqual(keys.reads, 4)

    def test_escape_cancels_even_after_items_arrive(self) -> None:
        channel = MessageChannel()
        sender = channel.sender()
        dialogue, _terminal, _keys, _sleeps = _dialogue(
            [
                "x",
                lambda: (sender.send(ItemsFound(["x-api", "x-web"])), "")[1],
                ESC,
            ],
            channel=channel,
        )

        result = dialogue.interact()

        self.assertEqual(result.status, CANCELLED)
        self.assertEqual(dialogue.items, ["x-api", "x-web"])

    def test_up_from_first_row_wraps_to_last(self) -> None:
        dialogue, _terminal, _keys, _sleeps = _dialogue([UP, ENTER], items=["a1", "a2", "a3"])

        result = dialogue.interact()

        self.assertEqual(result.item, "a3")

    def test_down_moves_and_wraps(self) -> None:
        dialogue, _terminal, _keys, _sleeps = _dialogue([DOWN, DOWN, DOWN, ENTER], items=["a1", "a2", "a3"])

        result = dialogue.interact()

        self.assertEqual(result.item, "a1")

    def test_only_max_predictions_rows_are_shown(self) -> None:
        snapshots: list[list[str]] = []
        dialogue, terminal, _keys, _sleeps = _dialogue(
            [lambda: (snapshots.append(terminal.screen()), ESC)[1]],
            items=[f"repo-{idx}" for idx in range(15)],
            max_predictions=3,
        )

        dialogue.interact()

        self.assertEqual(snapshots[0], ["?  Pick:", "❯  repo-0", "   repo-1", "   repo-2"])


class QueryEditingTests(unittest.TestCase):
    def test_backspace_at_start_changes_nothing(self) -> None:
        dialogue, terminal, _keys, _sleeps = _dialogue([BACKSPACE, LEFT, ESC], items=["api"])

        dialogue.interact()

        self.assertEqual(_prompt_writes(terminal), 1)

    def test_backspace_removes_character_before_caret(self) -> None:
        snapshots: list[list[str]] = []
        dialogue, terminal, _keys, _sleeps = _dialogue(
            ["a", "b", BACKSPACE, lambda: (snapshots.append(terminal.screen()), ESC)[1]],
        )

        dialogue.interact()

        self.assertEqual(snapshots[0], ["?  Pick: a"])

    def test_insertion_happens_at_the_caret(self) -> None:
        snapshots: list[list[str]] = []
        dialogue, terminal, _keys, _sleeps = _dialogue(
            ["a", "c", LEFT, "b", RIGHT, "d", lambda: (snapshots.append(terminal.screen()), ESC)[1]],
        )

        dialogue.interact()

        self.assertEqual(snapshots[0], ["?  Pick: abcd"])

    def test_caret_is_parked_after_the_character_left_of_it(self) -> None:
        caret_moves: list[tuple] = []

        def _capture():
            caret_moves.append((terminal.row, terminal.col))
            return ESC

        dialogue, terminal, _keys, _sleeps = _dialogue(["a", "b", LEFT, _capture])

        dialogue.interact()

        # "?  Pick: " is 9 cells wide; one character sits left of the caret.
        self.assertEqual(caret_moves, [(0, 10)])

    def test_input_stops_growing_at_the_width_budget(self) -> None:
        snapshots: list[list[str]] = []
        terminal_width = 20
        dialogue, terminal, _keys, _sleeps = _dialogue(
            ["a"] * 12 + [lambda: (snapshots.append(terminal.screen()), ESC)[1]],
            width=terminal_width,
        )

        dialogue.interact()

        # 20 columns minus 5 leaves 15 cells; the prompt uses 6 of them.
        self.assertEqual(snapshots[0], ["?  Pick: " + "a" * 9])

    def test_control_characters_are_not_inserted(self) -> None:
        dialogue, terminal, _keys, _sleeps = _dialogue(["\x07", ESC], items=["api"])

        dialogue.interact()

        self.assertEqual(_prompt_writes(terminal), 1)


class MessageFlowTests(unittest.TestCase):
    def test_items_arriving_while_idle_are_shown_and_selectable(self) -> None:
        channel = MessageChannel()
        sender = channel.sender()
        snapshots: list[list[str]] = []
        dialogue, terminal, _keys, _sleeps = _dialogue(
            [
                "",
                lambda: (sender.send(ItemsFound(["web"])), "")[1],
                lambda: (snapshots.append(terminal.screen()), DOWN)[1],
                ENTER,
            ],
            items=["api"],
            channel=channel,
        )

        result = dialogue.interact()

        self.assertEqual(snapshots[0], ["?  Pick:", "❯  api", "   web"])
        self.assertEqual(result.item, "web")

    def test_selection_follows_item_when_better_matches_arrive(self) -> None:
        channel = MessageChannel()
        sender = channel.sender()
        dialogue, _terminal, _keys, _sleeps = _dialogue(
            [
                "w",
                lambda: (sender.send(ItemsFound(["w"])), "")[1],
                ENTER,
            ],
            items=["x-web"],
            channel=channel,
        )

        result = dialogue.interact()

        self.assertEqual(result.item, "x-web")

    def test_unmatched_arrivals_do_not_repaint(self) -> None:
        channel = MessageChannel()
        sender = channel.sender()
        writes: list[int] = []
        dialogue, terminal, _keys, _sleeps = _dialogue(
            [
                "a",
                lambda: (writes.append(_prompt_writes(terminal)), "")[1],
                lambda: (sender.send(ItemsFound(["zzz"])), "")[1],
                lambda: (writes.append(_prompt_writes(terminal)), ENTER)[1],
            ],
            items=["api"],
            channel=channel,
        )

        result = dialogue.interact()

        self.assertEqual(writes[0], writes[1])
        self.assertEqual(dialogue.items, ["api", "zzz"])
        self.assertEqual(result.item, "api")

    def test_reordered_rows_are_repainted(self) -> None:
        channel = MessageChannel()
        sender = channel.sender()
        snapshots: list[list[str]] = []
        dialogue, terminal, _keys, _sleeps = _dialogue(
            [
                "w",
                lambda: (sender.send(ItemsFound(["w"])), "")[1],
                lambda: (snapshots.append(terminal.screen()), ESC)[1],
            ],
            items=["x-web"],
            channel=channel,
        )

        dialogue.interact()

        self.assertEqual(snapshots[0], ["?  Pick: w", "   w", "❯  x-web"])

    def test_progress_line_appears_and_finish_clears_it(self) -> None:
        channel = MessageChannel()
        sender = channel.sender()
        snapshots: list[list[str]] = []
        dialogue, terminal, _keys, _sleeps = _dialogue(
            [
                lambda: (sender.send(ProgressUpdate("Last found directory:/src/a")), "")[1],
                lambda: (snapshots.append(terminal.screen()), "")[1],
                lambda: (sender.send(Finish()), "")[1],
                lambda: (snapshots.append(terminal.screen()), ESC)[1],
            ],
            items=["api"],
            channel=channel,
        )

        dialogue.interact()

        self.assertEqual(snapshots[0][0], "🕑 Last found directory:/src/a")
        self.assertEqual(snapshots[1], ["?  Pick:", "❯  api"])

    def test_disconnected_channel_acts_as_finish(self) -> None:
        channel = MessageChannel()
        sender = channel.sender()
        sender.send(ItemsFound(["api"]))
        sender.send(ProgressUpdate("scanning"))
        sender.close()
        snapshots: list[list[str]] = []
        dialogue, terminal, _keys, _sleeps = _dialogue(
            [lambda: (snapshots.append(terminal.screen()), ESC)[1]],
            channel=channel,
        )

        dialogue.interact()

        self.assertEqual(snapshots[0], ["?  Pick:", "❯  api"])
        self.assertFalse(dialogue.handle_received_messages())

    def test_idle_polling_sleeps_without_repainting(self) -> None:
        dialogue, terminal, _keys, sleeps = _dialogue(["", "", "", ESC], items=["api"])

        dialogue.interact()

        self.assertEqual(sleeps, [0.01, 0.01, 0.01])
        self.assertEqual(_prompt_writes(terminal), 1)

    def test_force_shutdown_returns_without_reading_more_keys(self) -> None:
        channel = MessageChannel()
        dialogue, terminal, keys, _sleeps = _dialogue(
            ["", lambda: (channel.send(ForceShutdown()), "")[1], "a"],
            items=["api"],
            channel=channel,
        )

        result = dialogue.interact()

        self.assertEqual(result.status, SHUTDOWN)
        self.assertEqual(keys.script, ["a"])
        self.assertEqual(terminal.screen(), [])

    def test_force_shutdown_wins_over_messages_queued_behind_it(self) -> None:
        channel = MessageChannel()
        channel.send(ForceShutdown())
        channel.send(ItemsFound(["late"]))
        dialogue, _terminal, keys, _sleeps = _dialogue(["a"], items=["api"], channel=channel)

        result = dialogue.interact()

        self.assertEqual(result.status, SHUTDOWN)
        self.assertEqual(keys.reads, 0)
        self.assertNotIn("late", dialogue.items)


if __name__ == "__main__":
    unittest.main()
