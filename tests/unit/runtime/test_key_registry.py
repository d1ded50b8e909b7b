"""Tests for the key-combo dispatch table."""

from __future__ import annotations

import unittest

from fastgit.key_registry import KeyComboBinding, KeyComboRegistry


class KeyComboRegistryTests(unittest.TestCase):
    def test_dispatch_invokes_handler_for_every_combo(self) -> None:
        calls: list[str] = []
        registry = KeyComboRegistry().register_binding(
            KeyComboBinding(("j", "DOWN"), lambda: calls.append("down"))
        )

        registry.dispatch("j")
        registry.dispatch("DOWN")

        self.assertEqual(calls, ["down", "down"])

    def test_unbound_key_returns_none(self) -> None:
        registry = KeyComboRegistry()
        self.assertIsNone(registry.dispatch("x"))

    def test_later_binding_overrides_earlier(self) -> None:
        registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(("q",), lambda: False),
            KeyComboBinding(("q",), lambda: True),
        )
        self.assertTrue(registry.dispatch("q"))


if __name__ == "__main__":
    unittest.main()
