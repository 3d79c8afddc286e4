# ABOUTME: HTTP API for the typewriter front-end.
# ABOUTME: Serves page Markdown with its content hash, background uploads and the front-end.

import logging
import time
from pathlib import Path

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from .config import Config
from .content import fetch_page_content
from .notion import (
    ApiError,
    AuthError,
    MalformedIdentifierError,
    NotFoundError,
    NotionClient,
    NotionFetchError,
    TransientNetworkError,
)

logger = logging.getLogger(__name__)

BACKGROUND_FILENAME = "background.jpg"

UPLOAD_CHUNK_BYTES = 64 * 1024

# Status returned to the front-end for each fetch failure
ERROR_STATUS = {
    MalformedIdentifierError: 400,
    NotFoundError: 404,
    AuthError: 500,
    TransientNetworkError: 502,
    ApiError: 502,
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _static_file(root: Path, rel_path: str) -> Path | None:
    """Resolve a request path to a file inside ``root``.

    Directories resolve to their ``index.html``. Paths escaping ``root``
    and missing files give None.
    """
    root = root.resolve()
    candidate = (root / rel_path).resolve()
    try:
        candidate.relative_to(root)
    except ValueError:
        return None
    if candidate.is_dir():
        candidate = candidate / "index.html"
    return candidate if candidate.is_file() else None


def create_app(config: Config, client: NotionClient) -> FastAPI:
    """Build the API app.

    Args:
        config: Application configuration (default page, server settings).
        client: Notion client holding the resolved token.
    """
    public_dir = config.server.public_dir
    public_dir.mkdir(parents=True, exist_ok=True)
    dist_dir = config.server.dist_dir

    app = FastAPI(
        title="notion-typewriter",
        description="Notion page as Markdown for a typewriter display",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NotionFetchError)
    async def fetch_error_handler(request: Request, exc: NotionFetchError):
        status_code = ERROR_STATUS.get(type(exc), 500)
        logger.error(f"{request.url.path} failed: {exc}")
        return _error(status_code, str(exc))

    @app.get("/api/page-content")
    def page_content(pageUrl: str | None = None, pageId: str | None = None):
        """Current Markdown of the page plus its content hash."""
        page_ref = pageUrl or pageId or config.page
        if not page_ref:
            return _error(400, "Missing pageUrl or pageId (query or env NOTION_PAGE_URL / NOTION_PAGE_ID)")

        content = fetch_page_content(client, page_ref)
        return content.to_dict()

    @app.post("/api/background")
    async def upload_background(file: UploadFile | None = File(None)):
        """Replace the background image, returning a cache-busting URL."""
        if file is None:
            return _error(400, 'No image file (use field name "file")')
        if not (file.content_type or "").startswith("image/"):
            return _error(400, f"Not an image: {file.content_type}")

        limit = config.server.max_upload_bytes
        destination = public_dir / BACKGROUND_FILENAME
        partial = destination.with_name(destination.name + ".part")

        # An oversized upload leaves the current image untouched
        size = 0
        with partial.open("wb") as out:
            while True:
                chunk = await file.read(UPLOAD_CHUNK_BYTES)
                if not chunk:
                    break
                size += len(chunk)
                if size > limit:
                    break
                out.write(chunk)

        if size > limit:
            partial.unlink()
            logger.warning(f"Rejected background upload over {limit} bytes")
            return _error(413, f"Image larger than {limit} bytes")

        partial.replace(destination)
        logger.info(f"Saved background image ({size} bytes) to {destination}")

        return {"url": f"/{BACKGROUND_FILENAME}?{int(time.time() * 1000)}"}

    # Registered last so the API routes take precedence
    @app.get("/{path:path}")
    def static_files(path: str):
        """Files from public_dir, then dist_dir, else the front-end's index.html."""
        for root in (public_dir, dist_dir):
            found = _static_file(root, path)
            if found is not None:
                return FileResponse(found)

        index = _static_file(dist_dir, "index.html")
        if index is None:
            return _error(404, f"Front-end not built: no index.html in {dist_dir}")
        return FileResponse(index)

    return app
