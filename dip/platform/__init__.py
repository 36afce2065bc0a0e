"""pygame host adapters: window/driver loop, audio, keyboard."""
