"""Terminal interaction surface: prompts and cancellation."""
