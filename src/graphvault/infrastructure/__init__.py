"""Infrastructure layer — snapshot codec, file I/O, and graph projection."""
