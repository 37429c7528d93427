"""Latest Streaming Releases: a Stremio catalog add-on backed by TMDB and OMDb."""
