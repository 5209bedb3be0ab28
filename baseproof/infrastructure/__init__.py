"""Infrastructure: chain adapter, definitions loader, stubs, observability."""
