from __future__ import annotations

import sys
import unittest
from unittest import mock

from sessionizer.picker.terminal import InlineTerminal


def _written(write_mock: mock.Mock) -> str:
    return "".join(call.args[1].decode("utf-8") for call in write_mock.call_args_list)


class InlineTerminalOutputTests(unittest.TestCase):
    def test_writes_go_to_the_output_fd(self) -> None:
        terminal = InlineTerminal(stdin_fd=0, out_fd=7)
        with mock.patch("sessionizer.picker.terminal.os.write") as write:
            terminal.write_line("héllo")

        write.assert_called_once_with(7, "héllo\r\n".encode("utf-8"))

    def test_empty_write_is_skipped(self) -> None:
        terminal = InlineTerminal()
        with mock.patch("sessionizer.picker.terminal.os.write") as write:
            terminal.write("")
            terminal.move_cursor(0, 0)
            terminal.clear_last_lines(0)

        write.assert_not_called()

    def test_clear_last_lines_erases_current_line_and_those_above(self) -> None:
        terminal = InlineTerminal()
        with mock.patch("sessionizer.picker.terminal.os.write") as write:
            terminal.clear_last_lines(2)

        self.assertEqual(_written(write), "\r\x1b[2K\x1b[1A\x1b[2K\x1b[1A\x1b[2K")

    def test_move_cursor_sequences(self) -> None:
        terminal = InlineTerminal()
        with mock.patch("sessionizer.picker.terminal.os.write") as write:
            terminal.move_cursor(4, -2)
            terminal.move_cursor(-3, 1)

        self.assertEqual(_written(write), "\x1b[2A\x1b[4C\x1b[1B\x1b[3D")

    def test_cursor_visibility(self) -> None:
        terminal = InlineTerminal()
        with mock.patch("sessionizer.picker.terminal.os.write") as write:
            terminal.hide_cursor()
            terminal.show_cursor()

        self.assertEqual(_written(write), "\x1b[?25l\x1b[?25h")

    def test_width_falls_back_when_fd_is_not_a_terminal(self) -> None:
        terminal = InlineTerminal(out_fd=99)
        fallback = mock.Mock(columns=123)
        with mock.patch("sessionizer.picker.terminal.os.get_terminal_size", side_effect=OSError), mock.patch(
            "sessionizer.picker.terminal.shutil.get_terminal_size", return_value=fallback
        ):
            self.assertEqual(terminal.width(), 123)


class InlineTerminalStyleTests(unittest.TestCase):
    def test_no_color_returns_plain_text(self) -> None:
        terminal = InlineTerminal(no_color=True)

        self.assertEqual(terminal.style("api", color="cyan", bold=True), "api")

    def test_colored_text_is_wrapped_in_ansi_codes(self) -> None:
        terminal = InlineTerminal()

        styled = terminal.style("api", color="green", bold=True)

        self.assertIn("api", styled)
        self.assertTrue(styled.startswith("\x1b["))
        self.assertTrue(styled.endswith("\x1b[39;49;00m"))

    def test_bold_without_color(self) -> None:
        terminal = InlineTerminal()

        self.assertEqual(terminal.style("x", bold=True), "\x1b[01mx\x1b[39;49;00m")
        self.assertEqual(terminal.style("x"), "x")


@unittest.skipIf(sys.platform == "win32", "termios is POSIX only")
class CbreakModeTests(unittest.TestCase):
    def test_cbreak_mode_restores_tty_state_and_cursor(self) -> None:
        terminal = InlineTerminal(stdin_fd=5, out_fd=6)
        saved = ["saved-attrs"]
        with mock.patch("sessionizer.picker.terminal.termios.tcgetattr", return_value=saved) as getattr_mock, mock.patch(
            "sessionizer.picker.terminal.termios.tcsetattr"
        ) as setattr_mock, mock.patch("sessionizer.picker.terminal.tty.setcbreak") as setcbreak, mock.patch(
            "sessionizer.picker.terminal.os.write"
        ) as write:
            with terminal.cbreak_mode():
                setcbreak.assert_called_once()
                setattr_mock.assert_not_called()

        getattr_mock.assert_called_once_with(5)
        self.assertEqual(setcbreak.call_args.args[0], 5)
        self.assertEqual(setattr_mock.call_args.args[0], 5)
        self.assertIs(setattr_mock.call_args.args[2], saved)
        self.assertIn("\x1b[?25h", _written(write))

    def test_cbreak_mode_restores_even_when_body_raises(self) -> None:
        terminal = InlineTerminal(stdin_fd=5, out_fd=6)
        with mock.patch("sessionizer.picker.terminal.termios.tcgetattr", return_value=[]), mock.patch(
            "sessionizer.picker.terminal.termios.tcsetattr"
        ) as setattr_mock, mock.patch("sessionizer.picker.terminal.tty.setcbreak"), mock.patch(
            "sessionizer.picker.terminal.os.write"
        ):
            with self.assertRaises(RuntimeError):
                with terminal.cbreak_mode():
                    raise RuntimeError("boom")

        setattr_mock.assert_called_once()


if __name__ == "__main__":
    unittest.main()
