# =============================================================================
# core/models/track.py - Catalog Track Schemas
# =============================================================================
# Two groups of models live here:
# - Spotify*: the subset of Spotify Web API JSON the client consumes. Parsing
#   through these fails fast when a required field is missing.
# - TrackRecord: the flat projection relayed to clients. Never persisted.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Upstream Shapes (Spotify Web API)
# =============================================================================

class SpotifyTokenResponse(BaseModel):
    """Body of a successful client-credentials exchange."""
    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(..., min_length=1)
    token_type: str = "Bearer"
    expires_in: int = Field(..., gt=0)


class SpotifyImage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: str
    height: int | None = None
    width: int | None = None


class SpotifyArtist(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str


class SpotifyAlbum(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str
    images: list[SpotifyImage] = Field(default_factory=list)


class SpotifyTrack(BaseModel):
    """A track object as returned by /v1/tracks/{id} and /v1/search."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    artists: list[SpotifyArtist]
    album: SpotifyAlbum
    duration_ms: int
    preview_url: str | None = None
    external_urls: dict[str, str] = Field(default_factory=dict)
    popularity: int | None = None


class SpotifyTrackPage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    items: list[SpotifyTrack] = Field(default_factory=list)
    total: int | None = None


class SpotifySearchResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    tracks: SpotifyTrackPage


# =============================================================================
# Normalized Record
# =============================================================================

class TrackRecord(BaseModel):
    """
    Flat track projection returned by the catalog endpoints.

    Example:
        {
            "spotify_track_id": "3n3Ppam7vgaVa1iaRUc9Lp",
            "title": "Mr. Brightside",
            "artist": "The Killers",
            "album": "Hot Fuss",
            "duration_ms": 222075,
            "album_art_url": "https://i.scdn.co/image/...",
            "preview_url": null,
            "external_url": "https://open.spotify.com/track/3n3Ppam7vgaVa1iaRUc9Lp",
            "popularity": 87
        }
    """

    spotify_track_id: str
    title: str
    artist: str
    album: str
    duration_ms: int
    album_art_url: str | None = None
    preview_url: str | None = None
    external_url: str | None = None
    popularity: int | None = None

    @classmethod
    def from_spotify(cls, track: SpotifyTrack) -> "TrackRecord":
        """
        Normalize an upstream track.

        Multiple artists are joined with ", "; the first album image (if any)
        becomes the art URL.
        """
        images = track.album.images
        return cls(
            spotify_track_id=track.id,
            title=track.name,
            artist=", ".join(artist.name for artist in track.artists),
            album=track.album.name,
            duration_ms=track.duration_ms,
            album_art_url=images[0].url if images else None,
            preview_url=track.preview_url,
            external_url=track.external_urls.get("spotify"),
            popularity=track.popularity,
        )


# =============================================================================
# Request / Response Bodies
# =============================================================================

class TrackSearchRequest(BaseModel):
    """
    Body for POST /spotify-search.

    `query` is optional at the schema level so a missing value reaches the
    client's own "query is required" check.
    """
    query: str | None = None
    limit: int = 20


class TrackSearchResponse(BaseModel):
    tracks: list[TrackRecord]


class TrackMetadataRequest(BaseModel):
    """Body for POST /get-track-metadata."""
    trackId: str | None = None


class TrackMetadataResponse(BaseModel):
    track: TrackRecord
