"""Click commands for the gsv CLI."""
