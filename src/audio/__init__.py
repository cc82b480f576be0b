"""
SolfaSign Audio Module

Note table and the gesture-event listener that starts and stops notes.
"""
from .notes import SOLFEGE_NOTES, ConsoleSynth, NotePlayer, note_for, note_frequency, note_to_midi

__all__ = [
    'SOLFEGE_NOTES',
    'ConsoleSynth',
    'NotePlayer',
    'note_for',
    'note_frequency',
    'note_to_midi',
]
