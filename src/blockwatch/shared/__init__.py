"""Models and enums shared by every layer."""
