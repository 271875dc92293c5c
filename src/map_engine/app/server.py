# map_engine/app/server.py
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from map_engine.app.build import App
from map_engine.domain.entities.geography import BoundingBox
from map_engine.domain.errors import NoRouteFound, VertexNotFound


def create_server(app: App) -> FastAPI:
    engine, qcfg = app.engine, app.config.quadtree
    api = FastAPI(title="Map Engine API", version="0.1.0")

    # unauthenticated read-only API; allow any origin
    api.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @api.get("/health")
    def health():
        return {"status": "ok", "name": app.config.name, "dataset": app.dataset.stats()}

    @api.get("/raster")
    def raster(
        ullat: float = Query(...),
        ullon: float = Query(...),
        lrlat: float = Query(...),
        lrlon: float = Query(...),
        w: float = Query(..., ge=0),
        h: float = Query(..., ge=0),
    ):
        """Tile grid covering the viewport; image compositing is left to the client."""
        query = BoundingBox.from_corners(ullat, ullon, lrlat, lrlon)
        result = engine.resolve_viewport(query, w)
        return result.raster_params(qcfg.tile_size, qcfg.tile_suffix)

    @api.get("/route")
    def route(
        start_lat: float = Query(...),
        start_lon: float = Query(...),
        end_lat: float = Query(...),
        end_lon: float = Query(...),
    ):
        try:
            path = engine.route(start_lat, start_lon, end_lat, end_lon)
        except NoRouteFound:
            raise HTTPException(status_code=404, detail="no_route") from None
        except VertexNotFound:
            raise HTTPException(status_code=404, detail="no_vertices") from None
        return {"route": path.ids, "cost": path.cost}

    @api.get("/search")
    def search(
        term: str = Query(""),
        full: bool = Query(False),
        limit: int | None = Query(None, ge=1),
    ):
        if full:
            return [r.to_dict() for r in engine.search(term, exact=True, limit=limit)]
        return engine.search(term, exact=False, limit=limit)

    return api
