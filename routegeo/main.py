import logging

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from routegeo.config import CORS_ORIGINS, LOG_LEVEL, TRAFFIC_SERVICE_URL
from routegeo.bounds import view_center
from routegeo.geometry import FetchRoadGeometry, resolve
from routegeo.models import GeometryRequest, GeometryResponse
from routegeo.navigation import directions_url
from routegeo.stops import prepare
from routegeo.traffic_client import TrafficServiceClient

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Route Geometry Service", version="0.1.0")

# CORS: allow the dashboard dev server, adjust via CORS_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_road_geometry_fetcher() -> FetchRoadGeometry:
    return TrafficServiceClient()


@app.post("/api/routes/geometry", response_model=GeometryResponse)
async def get_route_geometry(
    payload: GeometryRequest,
    fetch_road_geometry: FetchRoadGeometry = Depends(get_road_geometry_fetcher),
) -> GeometryResponse:
    """
    Render-ready geometry for one route.

    Road-snapped when the traffic service answers with decodable legs,
    straight lines between the stops otherwise, empty when fewer than two
    stops have coordinates. Upstream failures never turn into 5xx here.
    """
    route = payload.route
    if not route.route_id:
        raise HTTPException(status_code=400, detail="route_id is required")

    logger.info("[API_REQUEST] Route %s with %d stops", route.route_id, len(route.stops))

    geometry = await resolve(route, fetch_road_geometry, payload.departure_time)

    return GeometryResponse(
        route_id=route.route_id,
        geometry=geometry,
        center=view_center(geometry),
        navigation_url=directions_url(prepare(route.stops)),
    )


@app.get("/api/health")
async def health():
    return {"status": "ok", "traffic_service": TRAFFIC_SERVICE_URL}


if __name__ == "__main__":
    import uvicorn

    from routegeo.config import APP_HOST, APP_PORT

    uvicorn.run(app, host=APP_HOST, port=APP_PORT)
