"""Command groups registered on the root typer app."""
