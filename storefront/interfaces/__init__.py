"""Interface adapters exposing the application over HTTP."""
