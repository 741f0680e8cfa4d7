"""Concrete adapters behind the interfaces in design_copilot.interfaces."""
