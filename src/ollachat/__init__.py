"""Editor chat assistant backed by a local text-generation service."""
