"""Plain-text formatting of predictions and model state for the CLI."""
