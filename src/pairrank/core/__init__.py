"""Core building blocks shared by the ranking tasks."""
