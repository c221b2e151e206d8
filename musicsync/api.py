"""FastAPI server for musicsync.

Exposes:
- GET /artists
- GET /artists/{artist_id}/full-albums
- GET /albums                               (?artist_id=)
- GET /albums/{album_id}/tracks
- GET /albums/{album_id}/artwork
- GET /albums/{album_id}/tracks/{track_id}/audio
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.responses import FileResponse, JSONResponse

from .config import MusicSyncConfig
from .errors import EntityNotFound, StoreError
from .logging_config import get_logger
from .schemas import AlbumRead, ArtistRead, FullAlbum, ListResponse, TrackRead
from .services import QueryService
from .store import LibraryStore
from .utils import display_name

logger = get_logger(__name__)


def _service(request: Request) -> QueryService:
    return request.app.state.service


def _file_response(path: Path) -> FileResponse:
    if not path.is_file():
        raise HTTPException(status_code=404, detail="File missing on disk")
    return FileResponse(path, filename=display_name(path))


def create_app(store: LibraryStore) -> FastAPI:
    """Build the read-only HTTP app over an explicitly passed store."""
    app = FastAPI(title="musicsync")
    app.state.service = QueryService(store)

    @app.exception_handler(EntityNotFound)
    async def entity_not_found_handler(request: Request, exc: EntityNotFound) -> JSONResponse:
        logger.info(f"Not found at {request.url.path}: {exc}")
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.error(f"Store failure at {request.url.path}: {exc}")
        return JSONResponse(status_code=503, content={"detail": "Library store unavailable"})

    @app.get("/favicon.ico", include_in_schema=False)
    def favicon() -> Response:
        return Response(status_code=204)

    @app.get("/artists", response_model=ListResponse[ArtistRead])
    def list_artists(service: QueryService = Depends(_service)):
        return ListResponse[ArtistRead](values=service.list_artists())

    @app.get("/artists/{artist_id}/full-albums", response_model=ListResponse[FullAlbum])
    def artist_full_albums(artist_id: int, service: QueryService = Depends(_service)):
        return ListResponse[FullAlbum](values=service.list_artist_full_albums(artist_id))

    @app.get("/albums", response_model=ListResponse[AlbumRead])
    def list_albums(
        artist_id: Optional[int] = Query(None),
        service: QueryService = Depends(_service),
    ):
        return ListResponse[AlbumRead](values=service.list_albums(artist_id))

    @app.get("/albums/{album_id}/tracks", response_model=ListResponse[TrackRead])
    def album_tracks(album_id: int, service: QueryService = Depends(_service)):
        return ListResponse[TrackRead](values=service.list_album_tracks(album_id))

    @app.get("/albums/{album_id}/artwork")
    def album_artwork(album_id: int, service: QueryService = Depends(_service)):
        return _file_response(service.find_album_artwork(album_id))

    @app.get("/albums/{album_id}/tracks/{track_id}/audio")
    def track_audio(album_id: int, track_id: int, service: QueryService = Depends(_service)):
        track = service.find_album_track(album_id, track_id)
        return _file_response(track.file_path)

    return app


def run_server(
    config: MusicSyncConfig,
    store: LibraryStore,
    host: Optional[str] = None,
    port: Optional[int] = None,
    log_level: str = "info",
) -> None:
    """Run the FastAPI app with Uvicorn."""
    import uvicorn

    effective_host = host or config.server_host
    effective_port = port or config.server_port

    logger.info(f"Serving {config.library.name} on http://{effective_host}:{effective_port}")
    uvicorn.run(
        create_app(store),
        host=effective_host,
        port=effective_port,
        log_level=log_level.lower(),
        log_config=None,
    )
