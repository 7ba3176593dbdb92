class AudioOutputError(Exception):
    """Raised when chime playback through the audio device fails."""
