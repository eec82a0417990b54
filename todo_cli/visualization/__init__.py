"""Rich renderables for the task list."""
