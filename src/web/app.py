"""FastAPI application serving the republish page and the tracking pixel."""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from urllib.parse import urlsplit

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from republish import __version__
from republish.config import RepublishConfig, load_config
from republish.content.store import ContentStore, StoreAttribution
from republish.content.urls import bare_host, parse_item_id
from republish.errors import InvalidContentIdError
from republish.markup import default_post_tags, kses
from republish.republication import (
    ContentFooter,
    ContentTransformer,
    ImageAttribution,
    NotFound,
    RedirectToCanonical,
    RepublishHooks,
    RewriteResolver,
)
from republish.republication.footer import PIXEL_PATH
from republish.republication.resolver import Lookup

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
STATIC_DIR = Path(__file__).parent / "static"

# Transparent 1x1 GIF.
PIXEL_GIF = base64.b64decode("R0lGODlhAQABAIAAAAAAAP///yH5BAEAAAAALAAAAAABAAEAAAIBRAA7")

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, must-revalidate, max-age=0, no-store, private",
    "Expires": "Wed, 11 Jan 1984 05:00:00 GMT",
}


def safe_redirect_url(url: str, config: RepublishConfig) -> str:
    """Keep redirects on our own host; anything else goes to the home page."""
    home = f"{config.site.home_url}/"
    if not url:
        return home
    target = urlsplit(url)
    site_host = bare_host(urlsplit(config.site.url).netloc)
    if not target.netloc or bare_host(target.netloc) == site_host:
        return url
    logger.warning("Refusing off-site redirect to %s", url)
    return home


def create_app(
    config: RepublishConfig | None = None,
    store: ContentStore | None = None,
    *,
    hooks: RepublishHooks | None = None,
    attribution: ImageAttribution | None = None,
    lookup: Lookup | None = None,
) -> FastAPI:
    """Wire the resolver and transformer into a FastAPI app.

    Args:
        config: Site configuration. Loaded from disk/env when omitted.
        store: Content store. Opened from ``config.store.directory`` when omitted.
        hooks: Extension callables shared by every component.
        attribution: Image attribution source. When omitted and
            ``[attribution] enabled`` is set, the store's flags are used.
        lookup: Replacement URL → article id function.
    """
    config = config or load_config()
    store = store or ContentStore(config.store_path)
    hooks = hooks or RepublishHooks()
    if attribution is None and config.attribution.enabled:
        attribution = StoreAttribution(store)

    resolver = RewriteResolver(store, config, hooks=hooks, lookup=lookup)
    transformer = ContentTransformer(
        store,
        config,
        attribution=attribution,
        hooks=hooks,
        footer=ContentFooter(config),
    )
    endpoint = hooks.endpoint(config.republish.endpoint).strip("/")
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

    app = FastAPI(
        title="Republish",
        description="Republish articles under a Creative Commons license",
        version=__version__,
    )
    app.state.config = config
    app.state.store = store
    app.state.resolver = resolver
    app.state.transformer = transformer
    app.mount("/assets", StaticFiles(directory=str(STATIC_DIR)), name="assets")

    @app.get(PIXEL_PATH)
    def republication_pixel(request: Request, post: str = "", ga: str = "") -> Response:
        """Count a republication of ``post``; always answers with a blank GIF."""
        item_id = parse_item_id(post)
        if item_id is not None and store.exists(item_id):
            referrer = request.headers.get("referer", "")
            share = store.record_share(item_id, referrer)
            logger.info(
                "Article %s republished at %s (%d total)", post, referrer or "?", share.count
            )
        else:
            logger.debug("Pixel hit for unknown article %r", post)
        return Response(content=PIXEL_GIF, media_type="image/gif", headers=NO_CACHE_HEADERS)

    @app.get(f"/{endpoint}/{{path_suffix:path}}", response_class=HTMLResponse)
    def republish_page(request: Request, path_suffix: str) -> Response:
        """Republish page for the article found at ``path_suffix``."""
        suffix = path_suffix
        if request.url.query:
            suffix = f"{suffix}?{request.url.query}"

        outcome = resolver.resolve(suffix)

        if isinstance(outcome, NotFound):
            return templates.TemplateResponse(
                request,
                "404.html",
                {"site_name": config.site.name},
                status_code=404,
                headers=NO_CACHE_HEADERS,
            )

        if isinstance(outcome, RedirectToCanonical):
            return RedirectResponse(safe_redirect_url(outcome.url, config), status_code=302)

        try:
            snippet = transformer.build_snippet(outcome.item_id)
        except InvalidContentIdError:
            logger.error("Article %d vanished before rendering", outcome.item_id)
            return templates.TemplateResponse(
                request,
                "error.html",
                {"site_name": config.site.name, "message": "Invalid post ID."},
                status_code=500,
            )

        item = store.get(outcome.item_id)
        before_content = hooks.before_content(item) if item else ""
        after_content = hooks.after_content(item) if item else ""
        license_statement = kses(config.republish.license_statement, default_post_tags())
        logger.info("Rendering republish page for article %d", outcome.item_id)
        return templates.TemplateResponse(
            request,
            "republish.html",
            {
                "site_name": config.site.name,
                "head_markup": outcome.head_markup,
                "title": item.title if item else "",
                "license_statement": license_statement,
                "snippet": snippet,
                "before_content": before_content,
                "after_content": after_content,
            },
        )

    return app
