"""Click commands registered on the rfcsections group."""
