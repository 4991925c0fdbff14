"""HTTP API for the receipt text parser."""
