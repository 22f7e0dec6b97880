"""Board-state engine for a two-player sea battle game."""
