"""
Mapping of solfege signs to notes, and a player that turns gesture events
into note-on/note-off calls on a synth.
"""
import re
from typing import Dict, Optional, Protocol

from solfege.confidence import GestureClass
from solfege.events import GestureEvent

# Fixed do, starting at middle C
SOLFEGE_NOTES: Dict[GestureClass, str] = {
    GestureClass.DO: "C4",
    GestureClass.RE: "D4",
    GestureClass.MI: "E4",
    GestureClass.FA: "F4",
    GestureClass.SOL: "G4",
    GestureClass.LA: "A4",
    GestureClass.TI: "B4",
}

_SEMITONES = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}
_NOTE_RE = re.compile(r"^([A-Ga-g])([#b]?)(-?\d+)$")


def note_to_midi(note: str) -> int:
    """Scientific pitch name ('C4', 'F#3', 'Bb5') to MIDI number (C4 = 60)."""
    match = _NOTE_RE.match(note.strip())
    if not match:
        raise ValueError(f"Not a note name: {note!r}")
    letter, accidental, octave = match.groups()
    semitone = _SEMITONES[letter.upper()]
    if accidental == "#":
        semitone += 1
    elif accidental == "b":
        semitone -= 1
    return (int(octave) + 1) * 12 + semitone


def note_frequency(note: str, a4: float = 440.0) -> float:
    """Equal-tempered frequency in Hz."""
    return a4 * 2 ** ((note_to_midi(note) - 69) / 12)


def note_for(gesture: GestureClass) -> str:
    return SOLFEGE_NOTES[gesture]


class Synth(Protocol):
    def note_on(self, note: str) -> None:
        ...

    def note_off(self, note: str) -> None:
        ...


class ConsoleSynth:
    """Synth stand-in that prints note changes."""

    def note_on(self, note: str) -> None:
        print(f"Note on:  {note} ({note_frequency(note):.2f} Hz)")

    def note_off(self, note: str) -> None:
        print(f"Note off: {note}")


class NotePlayer:
    """
    Gesture event listener driving a synth.

    Enter(sign) starts the sign's sustained note, Leave(sign) stops it.
    Only one note sounds at a time.
    """

    def __init__(self, synth: Synth, notes: Optional[Dict[GestureClass, str]] = None):
        self._synth = synth
        self._notes = dict(notes or SOLFEGE_NOTES)
        self._active_note: Optional[str] = None

    @property
    def active_note(self) -> Optional[str]:
        return self._active_note

    def __call__(self, event: GestureEvent) -> None:
        note = self._notes[event.gesture]
        if event.is_enter:
            if self._active_note is not None:
                self._synth.note_off(self._active_note)
            self._synth.note_on(note)
            self._active_note = note
        elif self._active_note == note:
            self._synth.note_off(note)
            self._active_note = None

    def stop(self) -> None:
        """Silence whatever is playing."""
        if self._active_note is not None:
            self._synth.note_off(self._active_note)
            self._active_note = None
