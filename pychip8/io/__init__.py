"""Input handling for the CHIP-8 hex keypad."""

from .keyboard import KEYPAD_MAP, NUM_KEYS, QUIT_KEYS, Keypad, canonical_name, is_quit_key

__all__ = [
    "KEYPAD_MAP",
    "NUM_KEYS",
    "QUIT_KEYS",
    "Keypad",
    "canonical_name",
    "is_quit_key",
]
