"""Infrastructure layer — graph storage and document file I/O."""
