"""Command line for sound_send tooling."""
