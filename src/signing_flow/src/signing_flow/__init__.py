"""Action code signing flow: sessions, artifact construction and status observation."""
