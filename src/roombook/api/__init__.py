"""FastAPI backend for RoomBook."""
