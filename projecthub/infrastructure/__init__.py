"""Infrastructure: persistence, blob storage, external adapters."""
