"""Natural-language front: intent parsing, date resolution, text assistance."""
