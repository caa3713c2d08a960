"""Realtime voice console server: session tokens and server-rendered client."""

__version__ = "0.1.0"
