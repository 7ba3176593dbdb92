"""Wire-level names shared by the UI server and the runtime."""
