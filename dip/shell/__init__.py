"""Front-end services shared by the platform layer."""
