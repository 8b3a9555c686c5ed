"""Storyboard: compile convention-named vector documents into animation timelines."""
