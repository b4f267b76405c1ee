"""Party jukebox: shared Spotify queue with admin playback control."""
