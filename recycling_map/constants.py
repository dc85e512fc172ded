"""Configuration constants for the Recycling Points Map.

All configurable parameters are centralized here for easy tuning.

Classes:
    AppConfig: UI application settings
    FirestoreConfig: Collection paths and document field names
    AuthConfig: Firebase Authentication REST endpoints
    MapConfig: Default map view parameters
    MarkerConfig: Marker icons for regular and favorite points
    ClickConfig: Pickable object types and click handling
    WriteConfig: Background writer pool
    StyleConfig: Labels and emojis shown in panels
"""


class AppConfig:
    """UI application settings."""

    TITLE = "EcoGestor - Recycling Points Map"
    ICON = "♻️"
    LAYOUT = "wide"

    # How often the remote-event poller drains pending snapshots (seconds)
    REFRESH_INTERVAL_S = 1.0


class FirestoreConfig:
    """Collection paths and field names of the remote document store.

    Field names are the ones the seeded database uses (Spanish).
    """

    POINTS_COLLECTION = "puntos_reciclaje"

    # Favorites live at favoritos/{user_id}/puntos/{point_id}
    FAVORITES_COLLECTION = "favoritos"
    FAVORITES_SUBCOLLECTION = "puntos"

    FIELD_NAME = "nombre"
    FIELD_COMMUNE = "comuna"
    FIELD_SCHEDULE = "horario"
    FIELD_LAT = "latitud"
    FIELD_LON = "longitud"
    FIELD_MATERIALS = "materiales"
    FIELD_ADDED = "agregado"


class AuthConfig:
    """Firebase Authentication REST API."""

    SIGN_IN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"
    REQUEST_TIMEOUT_S = 15

    # Firebase error codes -> readable reasons
    ERROR_REASONS = {
        "EMAIL_NOT_FOUND": "No account exists for this e-mail.",
        "INVALID_PASSWORD": "The password is incorrect.",
        "INVALID_LOGIN_CREDENTIALS": "E-mail or password is incorrect.",
        "INVALID_EMAIL": "The e-mail address is malformed.",
        "USER_DISABLED": "This account has been disabled.",
        "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts. Try again later.",
    }


class MapConfig:
    """Default map view parameters."""

    # Initial center: Santiago, Chile
    START_CENTER_LAT = -33.4489
    START_CENTER_LON = -70.6693

    DEFAULT_ZOOM = 12
    MAX_ZOOM = 19
    DEFAULT_PITCH = 0.0
    DEFAULT_BEARING = 0.0

    MAP_HEIGHT = 600

    OSM_TILES_ABC = [
        "https://a.tile.openstreetmap.org/{z}/{x}/{y}.png",
        "https://b.tile.openstreetmap.org/{z}/{x}/{y}.png",
        "https://c.tile.openstreetmap.org/{z}/{x}/{y}.png",
    ]
    OSM_ATTRIBUTION = "© OpenStreetMap contributors"


class MarkerConfig:
    """Marker icons (leaflet-color-markers set)."""

    ICON_URL_DEFAULT = (
        "https://raw.githubusercontent.com/pointhi/leaflet-color-markers/master/img/marker-icon-2x-green.png"
    )
    ICON_URL_FAVORITE = (
        "https://raw.githubusercontent.com/pointhi/leaflet-color-markers/master/img/marker-icon-2x-red.png"
    )

    # Source image is 2x; display size is 25x41 with the tip as anchor
    ICON_WIDTH = 50
    ICON_HEIGHT = 82
    ICON_ANCHOR_Y = 82
    ICON_SIZE_PX = 41


class ClickConfig:
    """Pickable object types and click handling."""

    TYPE_POINT = "recycling_point"
    LAYER_ID_POINTS = "recycling_points"
    PICKING_RADIUS_PX = 6


class WriteConfig:
    """Background writer pool for favorite writes."""

    MAX_WORKERS = 4
    THREAD_NAME_PREFIX = "favorite-writer"


class StyleConfig:
    """Labels shown in panels and buttons."""

    FAVORITE_EMOJI = "⭐"
    REMOVE_EMOJI = "🗑️"
    POINT_EMOJI = "📍"

    ADD_FAVORITE_LABEL = "⭐ Add to Favorites"
    REMOVE_FAVORITE_LABEL = "🗑️ Remove from Favorites"
