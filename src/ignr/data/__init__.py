"""Package data: embedded .gitignore templates."""
