"""Core, UI-agnostic editing logic: tree model, parsing, range algorithms and services."""
