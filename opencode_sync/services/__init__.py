"""Services composing readers, importers and the sync engine."""
