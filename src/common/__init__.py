"""Helpers shared across modules: logging, HTTP and shell-outs."""
