"""Cross-cutting runtime support: logging, metrics, tracing and prompts."""
