"""Azure Functions adapters for the attachment extractor."""
